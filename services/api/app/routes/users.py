"""User directory and public profile API routes.

Responsibilities:
- user search by handle or email (`/users/search`)
- public profile, organized tournaments, participations and statistics

Only PUBLIC tournaments are exposed on someone else's profile.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from common.logging import get_logger

from ..db import get_db
from ..models import Team, TeamMember, Tournament, TournamentRegistration, User
from ..schemas import PublicUser, UserSearchResult
from ..stats import organized_count, public_stats, registration_count, team_count
from .tournaments import list_items

router = APIRouter(tags=["users"])
logger = get_logger(__name__)

SEARCH_MIN_LENGTH = 2
SEARCH_LIMIT = 20
DEFAULT_BANNER_URL = "/images/games.jpg"


@router.get("/users/search")
def search_users(
    q: str = Query(default="", description="Substring of the user's pseudo or email."),
    db: Session = Depends(get_db),
):
    """Search users by pseudo or email.

    Queries shorter than 2 characters (after stripping) return an empty list
    without touching the database. Otherwise at most 20 users whose pseudo or
    email contains the query (case-insensitive) are returned, newest first.

    On a data-layer failure the error is logged and an empty list is returned
    with status 500.

    Returns:
        dict: `{"users": [...]}`.
    """
    query = q.strip()
    if len(query) < SEARCH_MIN_LENGTH:
        return {"users": []}

    try:
        users = db.execute(
            select(User)
            .where(
                or_(
                    User.pseudo.icontains(query, autoescape=True),
                    User.email.icontains(query, autoescape=True),
                )
            )
            .order_by(User.created_at.desc())
            .limit(SEARCH_LIMIT)
        ).scalars().all()
    except SQLAlchemyError:
        logger.exception("User search failed")
        return JSONResponse(status_code=500, content={"users": []})

    return {"users": [UserSearchResult.model_validate(u) for u in users]}


def _require_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/users/{user_id}")
def get_user(user_id: str, db: Session = Depends(get_db)):
    """Public profile with activity counters.

    `banner_url` falls back to the default banner when the user has none.
    """
    user = _require_user(db, user_id)

    profile = PublicUser.model_validate(user)
    profile.banner_url = user.banner_url or DEFAULT_BANNER_URL
    profile.tournament_count = organized_count(db, user_id)
    profile.team_count = team_count(db, user_id)
    profile.registration_count = registration_count(db, user_id)
    return {"user": profile}


@router.get("/users/{user_id}/tournaments")
def user_tournaments(user_id: str, db: Session = Depends(get_db)):
    """PUBLIC tournaments organized by the user, newest first."""
    _require_user(db, user_id)

    stmt = (
        select(Tournament)
        .where(Tournament.organizer_id == user_id, Tournament.visibility == "PUBLIC")
        .order_by(Tournament.created_at.desc())
    )
    return {"tournaments": list_items(db, stmt)}


@router.get("/users/{user_id}/participations")
def user_participations(user_id: str, db: Session = Depends(get_db)):
    """PUBLIC tournaments the user registered to or plays in through a team."""
    _require_user(db, user_id)

    registered = select(TournamentRegistration.tournament_id).where(
        TournamentRegistration.user_id == user_id
    )
    in_team = (
        select(Team.tournament_id)
        .join(TeamMember, TeamMember.team_id == Team.id)
        .where(TeamMember.user_id == user_id)
    )
    stmt = (
        select(Tournament)
        .where(
            Tournament.visibility == "PUBLIC",
            or_(Tournament.id.in_(registered), Tournament.id.in_(in_team)),
        )
        .order_by(Tournament.created_at.desc())
    )
    return {"participating": list_items(db, stmt)}


@router.get("/users/{user_id}/stats")
def user_stats(user_id: str, db: Session = Depends(get_db)):
    _require_user(db, user_id)
    return public_stats(db, user_id)
