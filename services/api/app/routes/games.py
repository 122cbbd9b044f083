"""Game catalogue routes.

The catalogue is read-only over HTTP; it is populated by the seed job
(`jobs/seed`).
"""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import Game
from ..schemas import GameOut

router = APIRouter(tags=["games"])


@router.get("/games")
def list_games(db: Session = Depends(get_db)):
    games = db.execute(select(Game).order_by(Game.name.asc())).scalars().all()
    return {"games": [GameOut.model_validate(g) for g in games]}
