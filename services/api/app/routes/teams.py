"""Team API routes.

Responsibilities:
- team listing for a tournament (`GET /teams/{tournament_id}`)
- team creation by a registered participant
- joining and leaving a team while registrations are open
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from common.logging import get_logger

from ..auth import get_current_user_id
from ..db import get_db
from ..models import Team, TeamMember, Tournament, TournamentRegistration, utcnow
from ..schemas import TeamCreate, TeamMemberOut, TeamOut, TeamWithMembers

router = APIRouter(tags=["teams"])
logger = get_logger(__name__)


def _registration(db: Session, tournament_id: str, user_id: str):
    return db.execute(
        select(TournamentRegistration).where(
            TournamentRegistration.tournament_id == tournament_id,
            TournamentRegistration.user_id == user_id,
        )
    ).scalars().first()


def _membership(db: Session, team_id: str, user_id: str):
    return db.execute(
        select(TeamMember).where(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
    ).scalars().first()


@router.get("/teams/{tournament_id}")
def list_teams(tournament_id: str, db: Session = Depends(get_db)):
    """List every team of a tournament, oldest first.

    Each team carries its members, and each member a minimal user projection
    (`id`, `pseudo`, `avatar_url`). A tournament without teams yields an empty
    list rather than an error.

    Args:
        tournament_id: Tournament identifier (`tournaments.id`).
        db: SQLAlchemy session (injected).

    Returns:
        dict: `{"teams": [...]}`.
    """
    teams = db.execute(
        select(Team)
        .options(selectinload(Team.members).selectinload(TeamMember.user))
        .where(Team.tournament_id == tournament_id)
        .order_by(Team.created_at.asc())
    ).scalars().all()

    return {"teams": [TeamWithMembers.model_validate(t) for t in teams]}


@router.post("/teams", status_code=201)
def create_team(
    payload: TeamCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create a team in a tournament with the caller as its first member.

    Raises:
        HTTPException: 404 unknown tournament; 403 caller organizes the
            tournament or is not registered to it.
    """
    tournament = db.get(Tournament, payload.tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")

    if tournament.organizer_id == user_id:
        raise HTTPException(status_code=403, detail="The organizer cannot create a team")

    if not _registration(db, tournament.id, user_id):
        raise HTTPException(status_code=403, detail="Register to the tournament before creating a team")

    team = Team(name=payload.name, tournament_id=tournament.id)
    team.members.append(TeamMember(user_id=user_id))
    db.add(team)
    db.commit()
    db.refresh(team)

    logger.info("Team %s created in tournament %s by %s", team.id, tournament.id, user_id)
    return {"team": TeamOut.model_validate(team)}


@router.post("/teams/{team_id}/join", status_code=201)
def join_team(
    team_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Join a team.

    Checks, in order: team exists; caller is not the organizer; registrations
    are open; deadline and end date have not passed; caller is registered to
    the tournament; team is not full; caller is not already a member of this
    or another team of the tournament.
    """
    team = db.execute(
        select(Team).options(selectinload(Team.members)).where(Team.id == team_id)
    ).scalars().first()
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")

    tournament = team.tournament
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")

    if tournament.organizer_id == user_id:
        raise HTTPException(status_code=403, detail="The organizer cannot join a team")

    if tournament.status != "REG_OPEN":
        raise HTTPException(status_code=400, detail="Cannot join: registrations are closed")

    now = utcnow()
    if tournament.registration_deadline and tournament.registration_deadline < now:
        raise HTTPException(status_code=400, detail="Cannot join: registration deadline has passed")

    if tournament.end_date and tournament.end_date < now:
        raise HTTPException(status_code=400, detail="Cannot join: tournament has ended")

    if not _registration(db, tournament.id, user_id):
        raise HTTPException(status_code=403, detail="Register to the tournament before joining a team")

    if tournament.team_max_size and len(team.members) >= tournament.team_max_size:
        raise HTTPException(status_code=400, detail="Team is full")

    if _membership(db, team.id, user_id):
        raise HTTPException(status_code=400, detail="Already a member")

    other = db.execute(
        select(TeamMember)
        .join(Team, TeamMember.team_id == Team.id)
        .where(TeamMember.user_id == user_id, Team.tournament_id == tournament.id)
    ).scalars().first()
    if other:
        raise HTTPException(status_code=400, detail="You are already in a team of this tournament")

    member = TeamMember(team_id=team.id, user_id=user_id)
    db.add(member)
    db.commit()
    db.refresh(member)
    return {"member": TeamMemberOut.model_validate(member)}


@router.delete("/teams/{team_id}/join")
def leave_team(
    team_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Leave a team. The team is deleted when its last member leaves.

    Returns:
        dict: `{"message", "team_deleted", "team_id"}`.
    """
    team = db.get(Team, team_id)
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")

    tournament = team.tournament
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")

    membership = _membership(db, team.id, user_id)
    if not membership:
        raise HTTPException(status_code=400, detail="You are not a member of this team")

    if tournament.status != "REG_OPEN":
        raise HTTPException(status_code=400, detail="Cannot leave a team after the tournament started")

    if tournament.registration_deadline and tournament.registration_deadline < utcnow():
        raise HTTPException(status_code=400, detail="Cannot leave a team after the registration deadline")

    db.delete(membership)
    db.flush()

    remaining = db.scalar(select(func.count(TeamMember.id)).where(TeamMember.team_id == team.id))
    if remaining == 0:
        db.delete(team)
        db.commit()
        return {"message": "You left the team. The team was deleted (last member).", "team_deleted": True, "team_id": team_id}

    db.commit()
    return {"message": "You left the team", "team_deleted": False, "team_id": team_id}
