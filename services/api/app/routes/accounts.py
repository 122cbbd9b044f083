"""Account creation and login routes."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from common.logging import get_logger

from ..auth import create_access_token, hash_password, verify_password
from ..db import get_db
from ..models import User
from ..schemas import LoginRequest, ProfileUser, RegisterRequest

router = APIRouter(prefix="/auth", tags=["auth"])
logger = get_logger(__name__)


@router.post("/register", status_code=201)
def register_account(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account with an email/password pair.

    Returns:
        dict: `{"message", "user"}`; the password hash is never returned.

    Raises:
        HTTPException: 400 if an account with this email already exists.
    """
    existing = db.execute(select(User.id).where(User.email == payload.email)).first()
    if existing:
        raise HTTPException(status_code=400, detail="An account with this email already exists")

    user = User(
        email=payload.email,
        pseudo=payload.pseudo,
        password_hash=hash_password(payload.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("Account %s created", user.id)
    return {"message": "Account created", "user": ProfileUser.model_validate(user)}


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """Exchange credentials for a bearer token.

    Raises:
        HTTPException: 401 on unknown email, missing password or wrong password.
    """
    user = db.execute(select(User).where(User.email == payload.email)).scalars().first()
    if not user or not user.password_hash or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return {
        "access_token": create_access_token(user.id),
        "token_type": "bearer",
        "user": ProfileUser.model_validate(user),
    }
