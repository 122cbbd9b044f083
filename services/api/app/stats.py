"""Profile statistics.

Two flavours share the same tournament counters:
- `public_stats`: what anyone can see on a profile; only PUBLIC tournaments count.
- `private_stats`: what a user sees about themselves; all tournaments, plus
  match record and win rate.
"""

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from .models import Match, TeamMember, Tournament, TournamentRegistration


def _tournament_counters(db: Session, user_id: str, public_only: bool) -> dict:
    where = [Tournament.organizer_id == user_id]
    if public_only:
        where.append(Tournament.visibility == "PUBLIC")

    statuses = db.execute(select(Tournament.status).where(*where)).scalars().all()
    completed = sum(1 for s in statuses if s == "COMPLETED")

    total_participants = db.scalar(
        select(func.count(TournamentRegistration.id))
        .join(Tournament, TournamentRegistration.tournament_id == Tournament.id)
        .where(*where)
    )

    return {
        "total_tournaments": len(statuses),
        "active_tournaments": len(statuses) - completed,
        "completed_tournaments": completed,
        "total_participants": total_participants,
    }


def _team_ids(db: Session, user_id: str) -> list:
    return db.execute(
        select(TeamMember.team_id).where(TeamMember.user_id == user_id).distinct()
    ).scalars().all()


def _wins(db: Session, team_ids: list, public_only: bool) -> int:
    if not team_ids:
        return 0
    # byes have no team_b and are not wins
    stmt = select(func.count(Match.id)).where(
        Match.winner_team_id.in_(team_ids),
        Match.team_b_id.is_not(None),
    )
    if public_only:
        stmt = stmt.join(Tournament, Match.tournament_id == Tournament.id).where(
            Tournament.visibility == "PUBLIC"
        )
    return db.scalar(stmt)


def public_stats(db: Session, user_id: str) -> dict:
    """Statistics shown on a user's public profile.

    Returns:
        dict: total/active/completed tournaments organized, registrations
        received, wins of the user's teams, teams joined and registrations made.
    """
    team_ids = _team_ids(db, user_id)
    stats = _tournament_counters(db, user_id, public_only=True)

    stats["total_wins"] = _wins(db, team_ids, public_only=True)
    stats["total_teams"] = len(team_ids)
    stats["total_registrations"] = db.scalar(
        select(func.count(TournamentRegistration.id))
        .join(Tournament, TournamentRegistration.tournament_id == Tournament.id)
        .where(
            TournamentRegistration.user_id == user_id,
            Tournament.visibility == "PUBLIC",
        )
    )
    return stats


def private_stats(db: Session, user_id: str) -> dict:
    """Statistics for the signed-in user's own dashboard.

    Matches count when one of the user's teams played; a match is won when the
    recorded winner is one of those teams. Byes are not matches played.
    """
    team_ids = _team_ids(db, user_id)
    stats = _tournament_counters(db, user_id, public_only=False)

    stats["total_wins"] = _wins(db, team_ids, public_only=False)
    stats["total_teams_joined"] = len(team_ids)

    if team_ids:
        matches = db.execute(
            select(Match).where(
                Match.team_b_id.is_not(None),
                or_(Match.team_a_id.in_(team_ids), Match.team_b_id.in_(team_ids)),
            )
        ).scalars().all()
    else:
        matches = []

    won = sum(1 for m in matches if m.winner_team_id in team_ids)
    win_rate = (won / len(matches)) * 100 if matches else 0
    stats["total_matches"] = len(matches)
    stats["won_matches"] = won
    stats["win_rate"] = round(win_rate, 2)
    return stats


def team_count(db: Session, user_id: str) -> int:
    return db.scalar(select(func.count(TeamMember.id)).where(TeamMember.user_id == user_id))


def organized_count(db: Session, user_id: str) -> int:
    return db.scalar(select(func.count(Tournament.id)).where(Tournament.organizer_id == user_id))


def registration_count(db: Session, user_id: str) -> int:
    return db.scalar(
        select(func.count(TournamentRegistration.id)).where(TournamentRegistration.user_id == user_id)
    )


def registrations_for(db: Session, tournament_ids: list) -> dict:
    """Map tournament id -> number of registrations."""
    if not tournament_ids:
        return {}
    rows = db.execute(
        select(TournamentRegistration.tournament_id, func.count(TournamentRegistration.id))
        .where(TournamentRegistration.tournament_id.in_(tournament_ids))
        .group_by(TournamentRegistration.tournament_id)
    ).all()
    return {tid: count for tid, count in rows}
