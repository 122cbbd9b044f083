"""Single-elimination bracket logic.

Responsibilities:
- deciding whether a tournament can be started (`validate_tournament_start`)
- turning registrations/teams into entrants (`collect_entrants`)
- generating the first round, byes included (`generate_single_elimination`)
- moving winners into the next round as results come in (`advance_winner`)

Byes are stored as round-1 matches with no `team_b`, already `COMPLETED`, so
that every entrant of round 2 is the winner of some round-1 match and the
same advancement rule applies everywhere.
"""

from collections import namedtuple
import math
import random

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from common.logging import get_logger

from .models import Match, Team, TeamMember, Tournament, TournamentRegistration, utcnow

logger = get_logger(__name__)

StartCheck = namedtuple("StartCheck", ["can_start", "reason", "participant_count"])


def bracket_size(participant_count: int) -> int:
    """Smallest power of two that fits `participant_count` entrants."""
    size = 1
    while size < participant_count:
        size *= 2
    return size


def calculate_rounds(participant_count: int) -> int:
    """Number of rounds needed to reduce `participant_count` entrants to one winner."""
    if participant_count < 2:
        return 0
    return math.ceil(math.log2(participant_count))


def matches_per_round(round_number: int, participant_count: int) -> int:
    """Number of match slots in `round_number` (1-based) of a full bracket."""
    return bracket_size(participant_count) // (2 ** round_number)


def validate_tournament_start(db: Session, tournament_id: str, now=None) -> StartCheck:
    """Check whether a tournament can be started.

    Rules:
        - the tournament exists and registrations are open (`REG_OPEN`)
        - the registration deadline, if any, has not passed
        - at least 2 participants: teams with `team_min_size` (default 1)
          members for team tournaments, registrations otherwise

    Returns:
        StartCheck: `(can_start, reason, participant_count)`; `reason` is None
        when the tournament can start.
    """
    now = now or utcnow()
    tournament = db.get(Tournament, tournament_id)
    if tournament is None:
        return StartCheck(False, "Tournament not found", 0)

    if tournament.status != "REG_OPEN":
        return StartCheck(False, "Registrations are closed", 0)

    if tournament.registration_deadline and tournament.registration_deadline < now:
        return StartCheck(False, "Registration deadline has passed", 0)

    if tournament.is_team_based:
        participant_count = len(_eligible_teams(tournament))
    else:
        participant_count = db.scalar(
            select(func.count(TournamentRegistration.id)).where(
                TournamentRegistration.tournament_id == tournament_id
            )
        )

    if participant_count < 2:
        return StartCheck(False, "At least 2 participants are required", participant_count)

    return StartCheck(True, None, participant_count)


def _eligible_teams(tournament: Tournament) -> list:
    min_size = tournament.team_min_size or 1
    return [t for t in tournament.teams if len(t.members) >= min_size]


def collect_entrants(db: Session, tournament: Tournament) -> list:
    """Return the teams that take part in the bracket.

    Team tournaments use their eligible teams. Solo tournaments get one
    single-member team per registered user, named after the user's pseudo.
    """
    if tournament.is_team_based:
        return _eligible_teams(tournament)

    entrants = []
    regs = db.execute(
        select(TournamentRegistration)
        .where(TournamentRegistration.tournament_id == tournament.id)
        .order_by(TournamentRegistration.created_at)
    ).scalars().all()
    for reg in regs:
        team = Team(name=reg.user.pseudo, tournament_id=tournament.id)
        team.members.append(TeamMember(user_id=reg.user_id))
        db.add(team)
        entrants.append(team)
    db.flush()
    return entrants


def generate_single_elimination(db: Session, tournament: Tournament, entrants: list, rng=None):
    """Create the first round of a single-elimination bracket.

    Entrants are shuffled, the bracket is padded to the next power of two, and
    the last `bracket_size - len(entrants)` entrants receive a bye. Remaining
    entrants are paired in order into `PENDING` round-1 matches.

    Args:
        db: SQLAlchemy session (caller commits).
        tournament: Tournament being started.
        entrants: Teams taking part.
        rng: Optional `random.Random` used for shuffling.

    Returns:
        tuple[list[Match], list[str]]: Round-1 matches played, and team ids that
        advanced on a bye.

    Raises:
        ValueError: If fewer than 2 entrants are given.
    """
    if len(entrants) < 2:
        raise ValueError("At least 2 participants are required")

    shuffled = list(entrants)
    (rng or random).shuffle(shuffled)

    byes = bracket_size(len(shuffled)) - len(shuffled)
    immediate_winners = []
    for _ in range(byes):
        immediate_winners.append(shuffled.pop().id)

    matches = []
    for i in range(0, len(shuffled), 2):
        match = Match(
            tournament_id=tournament.id,
            round=1,
            team_a_id=shuffled[i].id,
            team_b_id=shuffled[i + 1].id,
            status="PENDING",
        )
        db.add(match)
        matches.append(match)

    bye_matches = []
    for team_id in immediate_winners:
        bye = Match(
            tournament_id=tournament.id,
            round=1,
            team_a_id=team_id,
            team_b_id=None,
            winner_team_id=team_id,
            status="COMPLETED",
        )
        db.add(bye)
        bye_matches.append(bye)
    db.flush()

    for bye in bye_matches:
        advance_winner(db, bye)

    return matches, immediate_winners


def _entrant_count(db: Session, tournament_id: str) -> int:
    first_round = db.execute(
        select(Match).where(Match.tournament_id == tournament_id, Match.round == 1)
    ).scalars().all()
    return sum(2 if m.team_b_id else 1 for m in first_round)


def advance_winner(db: Session, match: Match):
    """Move the winner of a completed match into the next round.

    The winner is paired with the winner of another completed match of the
    same round that has not been placed in the next round yet (oldest first).
    Nothing happens while no such sibling exists; the later of the two results
    creates the next-round match. A completed final marks the tournament
    `COMPLETED`.

    Returns:
        Match | None: The next-round match created, if any.
    """
    if match.round is None or not match.winner_team_id:
        return None

    next_round = match.round + 1
    placed = set()
    for a_id, b_id in db.execute(
        select(Match.team_a_id, Match.team_b_id).where(
            Match.tournament_id == match.tournament_id,
            Match.round == next_round,
        )
    ):
        placed.update(t for t in (a_id, b_id) if t)

    if match.team_a_id in placed or (match.team_b_id and match.team_b_id in placed):
        logger.info("Match %s already advanced to round %s", match.id, next_round)
        return None

    total_rounds = calculate_rounds(_entrant_count(db, match.tournament_id))
    if total_rounds and match.round >= total_rounds:
        tournament = db.get(Tournament, match.tournament_id)
        tournament.status = "COMPLETED"
        logger.info("Tournament %s completed, winner team %s", tournament.id, match.winner_team_id)
        return None

    siblings = db.execute(
        select(Match)
        .where(
            Match.tournament_id == match.tournament_id,
            Match.round == match.round,
            Match.status == "COMPLETED",
            Match.winner_team_id.is_not(None),
            Match.id != match.id,
        )
        .order_by(Match.created_at)
    ).scalars().all()
    sibling = next((s for s in siblings if s.winner_team_id not in placed), None)
    if sibling is None:
        return None

    next_match = Match(
        tournament_id=match.tournament_id,
        round=next_round,
        team_a_id=match.winner_team_id,
        team_b_id=sibling.winner_team_id,
        status="PENDING",
    )
    db.add(next_match)
    db.flush()
    return next_match


def winner_has_advanced(db: Session, match: Match) -> bool:
    """Tell whether the match's recorded winner already plays in the next round."""
    if match.round is None or not match.winner_team_id:
        return False

    return db.execute(
        select(Match.id).where(
            Match.tournament_id == match.tournament_id,
            Match.round == match.round + 1,
            or_(
                Match.team_a_id == match.winner_team_id,
                Match.team_b_id == match.winner_team_id,
            ),
        )
    ).first() is not None
