"""Match result API routes.

Responsibilities:
- match lookup with both teams and a tournament summary (`/results/{match_id}`)
- result validation by the tournament organizer, followed by bracket advancement
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from common.logging import get_logger

from ..auth import get_current_user_id
from ..bracket import advance_winner, winner_has_advanced
from ..db import get_db
from ..models import Match
from ..schemas import MatchDetail, MatchOut, ResultSubmit

router = APIRouter(tags=["results"])
logger = get_logger(__name__)


@router.get("/results/{match_id}")
def get_match(match_id: str, db: Session = Depends(get_db)):
    """Fetch one match with its two teams and its tournament's id/organizer.

    Args:
        match_id: Match identifier (`matches.id`).
        db: SQLAlchemy session (injected).

    Returns:
        dict: `{"match": {..., "team_a": {...}, "team_b": {...}, "tournament": {"id", "organizer_id"}}}`.

    Raises:
        HTTPException: 404 if the match does not exist.
    """
    match = db.execute(
        select(Match)
        .options(
            joinedload(Match.team_a),
            joinedload(Match.team_b),
            joinedload(Match.tournament),
        )
        .where(Match.id == match_id)
    ).scalars().first()

    if not match:
        raise HTTPException(status_code=404, detail="Match not found")

    return {"match": MatchDetail.model_validate(match)}


@router.post("/results")
def submit_result(
    payload: ResultSubmit,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Record the winner of a match (organizer only) and advance the bracket.

    Bracket advancement runs in a savepoint; if it fails the result is still
    recorded and the failure is logged as a warning.

    Raises:
        HTTPException: 404 unknown match; 403 caller is not the organizer;
            400 winner is not one of the match's teams, or the winner
            changes after the previous one advanced to the next round.
    """
    match = db.execute(
        select(Match).options(joinedload(Match.tournament)).where(Match.id == payload.match_id)
    ).scalars().first()
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")

    if match.tournament.organizer_id != user_id:
        raise HTTPException(status_code=403, detail="Forbidden")

    if payload.winner_team_id not in (match.team_a_id, match.team_b_id):
        raise HTTPException(status_code=400, detail="Winner is not a team of this match")

    if (
        match.winner_team_id
        and match.winner_team_id != payload.winner_team_id
        and winner_has_advanced(db, match)
    ):
        raise HTTPException(
            status_code=400, detail="Result cannot change: the winner already plays the next round"
        )

    match.winner_team_id = payload.winner_team_id
    match.status = "COMPLETED"
    db.flush()

    try:
        with db.begin_nested():
            advance_winner(db, match)
    except SQLAlchemyError:
        logger.warning("Bracket advance failed for match %s", match.id, exc_info=True)

    db.commit()
    db.refresh(match)
    return {"match": MatchOut.model_validate(match)}
