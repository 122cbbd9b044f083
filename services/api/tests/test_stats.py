"""Tests for profile statistics (`/api/profile/stats` and `services.api.app.stats`)."""

import random

from services.api.app.bracket import generate_single_elimination
from services.api.app.stats import private_stats, public_stats


def test_private_stats_match_record(
    client, db, auth, make_user, make_tournament, make_team, make_match
) -> None:
    me = make_user()
    tournament = make_tournament(make_user(), is_team_based=True)
    mine = make_team(tournament, "Mine", me)
    rival = make_team(tournament, "Rival", make_user())
    other = make_team(tournament, "Other", make_user())
    make_match(tournament, mine, rival, winner_team_id=mine.id, status="COMPLETED")
    make_match(tournament, mine, other, round=2, winner_team_id=other.id, status="COMPLETED")
    make_match(tournament, mine, None, winner_team_id=mine.id, status="COMPLETED")
    make_match(tournament, rival, other)

    stats = client.get("/api/profile/stats", headers=auth(me)).json()

    assert stats["total_teams_joined"] == 1
    assert stats["total_matches"] == 2
    assert stats["won_matches"] == 1
    assert stats["win_rate"] == 50.0
    assert stats["total_wins"] == 1
    assert stats["total_tournaments"] == 0


def test_stats_for_newcomer_are_zero(db, make_user) -> None:
    user = make_user()

    stats = private_stats(db, user.id)

    assert stats["total_matches"] == 0
    assert stats["win_rate"] == 0
    assert public_stats(db, user.id)["total_wins"] == 0


def test_public_stats_ignore_private_tournaments(
    db, make_user, make_tournament, make_team, make_match, register
) -> None:
    me = make_user()
    hidden = make_tournament(make_user(), visibility="PRIVATE")
    team = make_team(hidden, "Ghosts", me)
    make_match(hidden, team, make_team(hidden, "Rival"), winner_team_id=team.id, status="COMPLETED")
    register(hidden, me)

    public = public_stats(db, me.id)
    private = private_stats(db, me.id)

    assert public["total_wins"] == 0
    assert public["total_registrations"] == 0
    assert public["total_teams"] == 1
    assert private["total_wins"] == 1


def test_bye_is_not_a_win(db, make_user, make_tournament, make_team) -> None:
    tournament = make_tournament(make_user(), is_team_based=True)
    players = [make_user() for _ in range(3)]
    teams = {make_team(tournament, f"T{i}", p).id: p for i, p in enumerate(players)}

    _, byes = generate_single_elimination(db, tournament, list(tournament.teams), rng=random.Random(3))
    db.commit()
    lucky = teams[byes[0]]

    assert public_stats(db, lucky.id)["total_wins"] == 0
    private = private_stats(db, lucky.id)
    assert private["total_wins"] == 0
    assert private["won_matches"] == 0
    assert private["total_matches"] == 0
