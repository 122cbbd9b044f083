"""Signed-in user's own profile routes.

All endpoints require a bearer token; the user is the token's subject.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_, select
from sqlalchemy.orm import Session, joinedload

from common.logging import get_logger

from ..auth import get_current_user_id, hash_password, verify_password
from ..db import get_db
from ..models import Team, TeamMember, Tournament, TournamentRegistration, User
from ..schemas import PasswordChange, ProfileUpdate, ProfileUser, TournamentCard
from ..stats import private_stats

router = APIRouter(prefix="/profile", tags=["profile"])
logger = get_logger(__name__)


def _current_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("")
def get_profile(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Return the caller's profile: `{"user": {id, email, pseudo, avatar_url}}`."""
    return {"user": ProfileUser.model_validate(_current_user(db, user_id))}


@router.put("")
def update_profile(
    payload: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    user = _current_user(db, user_id)
    user.pseudo = payload.pseudo
    db.commit()
    db.refresh(user)

    logger.info("User %s updated their pseudo", user_id)
    return {"message": "Profile updated", "user": ProfileUser.model_validate(user)}


@router.patch("/password")
def change_password(
    payload: PasswordChange,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Change the caller's password after checking the current one.

    Raises:
        HTTPException: 404 when the account has no password (external login);
            400 when the current password is wrong.
    """
    user = db.get(User, user_id)
    if not user or not user.password_hash:
        raise HTTPException(status_code=404, detail="User not found or password not set")

    if not verify_password(payload.current_password, user.password_hash):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    user.password_hash = hash_password(payload.new_password)
    db.commit()
    return {"message": "Password updated"}


@router.get("/check-pseudo")
def check_pseudo(
    pseudo: str = Query(default=""),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Tell whether `pseudo` is free, ignoring the caller's own account."""
    if len(pseudo) < 2:
        raise HTTPException(status_code=400, detail="Pseudo is too short")

    taken = db.execute(
        select(User.id).where(User.pseudo == pseudo, User.id != user_id)
    ).first()
    return {"available": taken is None, "pseudo": pseudo}


@router.get("/stats")
def profile_stats(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return private_stats(db, user_id)


@router.get("/tournaments")
def profile_tournaments(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Dashboard lists of the caller's non-completed tournaments.

    Returns:
        dict: `{"participating": [...], "created": [...], "favorites": []}`.
        Favorites are not stored yet and are always empty.
    """
    registered = select(TournamentRegistration.tournament_id).where(
        TournamentRegistration.user_id == user_id
    )
    in_team = (
        select(Team.tournament_id)
        .join(TeamMember, TeamMember.team_id == Team.id)
        .where(TeamMember.user_id == user_id)
    )

    participating = db.execute(
        select(Tournament)
        .options(joinedload(Tournament.game_ref))
        .where(
            or_(Tournament.id.in_(registered), Tournament.id.in_(in_team)),
            Tournament.status != "COMPLETED",
        )
        .order_by(Tournament.created_at.desc())
    ).scalars().all()

    created = db.execute(
        select(Tournament)
        .options(joinedload(Tournament.game_ref))
        .where(Tournament.organizer_id == user_id, Tournament.status != "COMPLETED")
        .order_by(Tournament.created_at.desc())
    ).scalars().all()

    return {
        "participating": [TournamentCard.model_validate(t) for t in participating],
        "created": [TournamentCard.model_validate(t) for t in created],
        "favorites": [],
    }
