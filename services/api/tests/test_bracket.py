"""Unit tests for single-elimination bracket logic."""

from datetime import timedelta
import random

import pytest

from services.api.app.bracket import (
    advance_winner,
    bracket_size,
    calculate_rounds,
    collect_entrants,
    generate_single_elimination,
    matches_per_round,
    validate_tournament_start,
)
from services.api.app.models import Match, utcnow


@pytest.mark.parametrize(
    "count, size, rounds",
    [(0, 1, 0), (1, 1, 0), (2, 2, 1), (3, 4, 2), (4, 4, 2), (5, 8, 3), (8, 8, 3), (9, 16, 4)],
)
def test_bracket_dimensions(count, size, rounds) -> None:
    assert bracket_size(count) == size
    assert calculate_rounds(count) == rounds


def test_matches_per_round() -> None:
    assert [matches_per_round(r, 6) for r in (1, 2, 3)] == [4, 2, 1]


def test_validate_start(db, make_user, make_tournament, make_team, register) -> None:
    assert validate_tournament_start(db, "missing").reason == "Tournament not found"

    expired = make_tournament(make_user(), registration_deadline=utcnow() - timedelta(hours=1))
    assert validate_tournament_start(db, expired.id).reason == "Registration deadline has passed"

    teams = make_tournament(make_user(), is_team_based=True, team_min_size=2)
    make_team(teams, "Full", make_user(), make_user())
    make_team(teams, "Half", make_user())
    check = validate_tournament_start(db, teams.id)
    assert not check.can_start
    assert check.participant_count == 1

    make_team(teams, "Other", make_user(), make_user())
    check = validate_tournament_start(db, teams.id)
    assert check.can_start
    assert check.reason is None
    assert check.participant_count == 2


def test_solo_entrants_become_single_member_teams(db, make_user, make_tournament, register) -> None:
    tournament = make_tournament(make_user())
    register(tournament, make_user("ash"), make_user("misty"))

    entrants = collect_entrants(db, tournament)

    assert sorted(t.name for t in entrants) == ["ash", "misty"]
    assert all(len(t.members) == 1 for t in entrants)


def test_generate_requires_two_entrants(db, make_user, make_tournament, make_team) -> None:
    tournament = make_tournament(make_user())
    solo = make_team(tournament, "Alone", make_user())

    with pytest.raises(ValueError):
        generate_single_elimination(db, tournament, [solo])


def test_generate_with_byes(db, make_user, make_tournament, make_team) -> None:
    tournament = make_tournament(make_user(), is_team_based=True)
    teams = [make_team(tournament, f"T{i}", make_user()) for i in range(6)]

    matches, byes = generate_single_elimination(db, tournament, teams, rng=random.Random(7))

    assert len(matches) == 2
    assert len(byes) == 2
    paired = {m.team_a_id for m in matches} | {m.team_b_id for m in matches}
    assert paired.isdisjoint(byes)
    assert paired | set(byes) == {t.id for t in teams}

    # both byes are completed round-1 entries, paired together in round 2
    second_round = db.query(Match).filter(Match.round == 2).all()
    assert len(second_round) == 1
    assert {second_round[0].team_a_id, second_round[0].team_b_id} == set(byes)


def test_full_bracket_plays_to_completion(db, make_user, make_tournament, make_team) -> None:
    tournament = make_tournament(make_user(), is_team_based=True, status="IN_PROGRESS")
    teams = [make_team(tournament, f"T{i}", make_user()) for i in range(5)]
    generate_single_elimination(db, tournament, teams, rng=random.Random(1))
    db.commit()

    for _ in range(10):
        pending = (
            db.query(Match)
            .filter(Match.tournament_id == tournament.id, Match.status == "PENDING")
            .order_by(Match.round, Match.created_at)
            .first()
        )
        if pending is None:
            break
        pending.winner_team_id = pending.team_a_id
        pending.status = "COMPLETED"
        db.flush()
        advance_winner(db, pending)
        db.commit()

    assert tournament.status == "COMPLETED"
    rounds = [m.round for m in db.query(Match).filter(Match.tournament_id == tournament.id)]
    assert max(rounds) == calculate_rounds(5)


def test_advance_ignores_incomplete_match(db, make_user, make_tournament, make_team, make_match) -> None:
    tournament = make_tournament(make_user())
    match = make_match(tournament, make_team(tournament, "A"), make_team(tournament, "B"))

    assert advance_winner(db, match) is None
