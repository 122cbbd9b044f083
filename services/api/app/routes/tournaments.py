"""Tournament API routes.

Responsibilities:
- tournament directory with filtering and sorting (`GET /tournaments`)
- tournament creation, detail, update and deletion by its organizer
- participant registration / unregistration
- starting a tournament (first bracket round)
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import Session, joinedload, selectinload

from common.logging import get_logger

from ..auth import get_current_user_id, get_optional_user_id
from ..bracket import calculate_rounds, collect_entrants, generate_single_elimination, validate_tournament_start
from ..db import get_db
from ..models import (
    TOURNAMENT_STATUSES,
    Game,
    Match,
    Team,
    TeamMember,
    Tournament,
    TournamentRegistration,
    User,
    utcnow,
)
from ..schemas import (
    MatchOut,
    TournamentCreate,
    TournamentDetail,
    TournamentListItem,
    TournamentOut,
    TournamentUpdate,
    naive_utc,
)
from ..stats import registrations_for

router = APIRouter(tags=["tournaments"])
logger = get_logger(__name__)

# Individual organizers may run at most this many non-completed tournaments.
ACTIVE_TOURNAMENT_LIMIT = 10

_SORTS = {
    "created_desc": Tournament.created_at.desc(),
    "start_asc": Tournament.start_date.asc(),
    "start_desc": Tournament.start_date.desc(),
}


def list_items(db: Session, stmt) -> list:
    """Run a tournament query and shape rows as directory list items.

    Adds the organizer summary, the catalogue game reference and the number of
    registrations to every tournament.
    """
    tournaments = db.execute(
        stmt.options(joinedload(Tournament.organizer), joinedload(Tournament.game_ref))
    ).unique().scalars().all()
    counts = registrations_for(db, [t.id for t in tournaments])

    items = []
    for t in tournaments:
        item = TournamentListItem.model_validate(t)
        item.registration_count = counts.get(t.id, 0)
        items.append(item)
    return items


@router.get("/tournaments")
def list_tournaments(
    mine: str | None = Query(default=None, description="`1` lists the caller's own tournaments."),
    q: str | None = Query(default=None, description="Substring of the tournament name or game."),
    game: str | None = Query(default=None),
    sort: str = Query(default="created_desc"),
    status: str | None = Query(default=None),
    start_min: datetime | None = Query(default=None),
    start_max: datetime | None = Query(default=None),
    user_id: str | None = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
):
    """List tournaments.

    Filtering behavior:
      - `mine=1`: only tournaments organized by the caller (auth required).
      - otherwise: PUBLIC tournaments whose organizer is of the same kind as
        the viewer (enterprise vs individual; anonymous viewers are
        individuals).
      - `q` matches name or game, `game` matches game, `status` must be a
        known status (ignored otherwise), `start_min`/`start_max` bound the
        start date.

    Returns:
        dict: `{"tournaments": [...]}`.
    """
    stmt = select(Tournament)

    if mine == "1":
        if not user_id:
            raise HTTPException(status_code=401, detail="Unauthorized")
        stmt = stmt.where(Tournament.organizer_id == user_id)
    else:
        viewer_is_enterprise = False
        if user_id:
            viewer_is_enterprise = bool(
                db.scalar(select(User.is_enterprise).where(User.id == user_id))
            )
        stmt = (
            stmt.join(User, Tournament.organizer_id == User.id)
            .where(Tournament.visibility == "PUBLIC")
            .where(User.is_enterprise == viewer_is_enterprise)
        )

    if q:
        stmt = stmt.where(or_(Tournament.name.contains(q), Tournament.game.contains(q)))
    if game:
        stmt = stmt.where(Tournament.game.contains(game))
    if status in TOURNAMENT_STATUSES:
        stmt = stmt.where(Tournament.status == status)
    if start_min:
        stmt = stmt.where(Tournament.start_date >= naive_utc(start_min))
    if start_max:
        stmt = stmt.where(Tournament.start_date <= naive_utc(start_max))

    stmt = stmt.order_by(_SORTS.get(sort, _SORTS["created_desc"]))
    return {"tournaments": list_items(db, stmt)}


@router.post("/tournaments", status_code=201)
def create_tournament(
    payload: TournamentCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create a tournament organized by the caller.

    Format is always SINGLE_ELIMINATION, visibility is PRIVATE only when
    requested, and registrations open immediately.

    Raises:
        HTTPException: 401 if the caller's account no longer exists; 409 when
            an individual organizer already runs the maximum number of active
            tournaments.
    """
    organizer = db.get(User, user_id)
    if not organizer:
        raise HTTPException(status_code=401, detail="Session expired, please log in again")

    if not organizer.is_enterprise:
        active = db.scalar(
            select(func.count(Tournament.id)).where(
                Tournament.organizer_id == user_id,
                Tournament.status != "COMPLETED",
            )
        )
        if active >= ACTIVE_TOURNAMENT_LIMIT:
            raise HTTPException(
                status_code=409,
                detail=(
                    f"Limit reached: you cannot run more than {ACTIVE_TOURNAMENT_LIMIT} active "
                    "tournaments at once. Finish or delete one to create a new one."
                ),
            )

    game = payload.game
    if not game and payload.game_id:
        ref = db.get(Game, payload.game_id)
        if ref:
            game = ref.name

    tournament = Tournament(
        name=payload.name,
        description=payload.description or None,
        game=game or None,
        game_id=payload.game_id or None,
        format="SINGLE_ELIMINATION",
        visibility="PRIVATE" if payload.visibility == "PRIVATE" else "PUBLIC",
        status="REG_OPEN",
        is_team_based=payload.is_team_based,
        max_participants=payload.max_participants,
        team_min_size=payload.team_min_size,
        team_max_size=payload.team_max_size,
        start_date=payload.start_date,
        end_date=payload.end_date,
        registration_deadline=payload.registration_deadline,
        organizer_id=user_id,
    )
    db.add(tournament)
    db.commit()
    db.refresh(tournament)

    logger.info("Tournament %s created by %s", tournament.id, user_id)
    return {"tournament": TournamentOut.model_validate(tournament)}


@router.get("/tournaments/{tournament_id}")
def get_tournament(tournament_id: str, db: Session = Depends(get_db)):
    """Fetch a tournament with its organizer's pseudo, teams (with members) and matches.

    Raises:
        HTTPException: 404 if the tournament does not exist.
    """
    tournament = db.execute(
        select(Tournament)
        .options(
            joinedload(Tournament.organizer),
            selectinload(Tournament.teams).selectinload(Team.members).selectinload(TeamMember.user),
            selectinload(Tournament.matches),
        )
        .where(Tournament.id == tournament_id)
    ).unique().scalars().first()

    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")

    return {"tournament": TournamentDetail.model_validate(tournament)}


def _owned_tournament(db: Session, tournament_id: str, user_id: str) -> Tournament:
    tournament = db.get(Tournament, tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")
    if tournament.organizer_id != user_id:
        raise HTTPException(status_code=403, detail="Forbidden")
    return tournament


@router.patch("/tournaments/{tournament_id}")
def update_tournament(
    tournament_id: str,
    payload: TournamentUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Update the provided fields of a tournament (organizer only)."""
    tournament = _owned_tournament(db, tournament_id, user_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(tournament, field, value)

    db.commit()
    db.refresh(tournament)
    return {"tournament": TournamentOut.model_validate(tournament)}


@router.delete("/tournaments/{tournament_id}")
def delete_tournament(
    tournament_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Delete a tournament and everything attached to it (organizer only)."""
    _owned_tournament(db, tournament_id, user_id)

    team_ids = select(Team.id).where(Team.tournament_id == tournament_id)
    db.execute(delete(Match).where(Match.tournament_id == tournament_id))
    db.execute(delete(TeamMember).where(TeamMember.team_id.in_(team_ids)))
    db.execute(delete(Team).where(Team.tournament_id == tournament_id))
    db.execute(delete(TournamentRegistration).where(TournamentRegistration.tournament_id == tournament_id))
    db.execute(delete(Tournament).where(Tournament.id == tournament_id))
    db.commit()

    logger.info("Tournament %s deleted by %s", tournament_id, user_id)
    return {"message": "Tournament deleted"}


@router.post("/tournaments/{tournament_id}/register", status_code=201)
def register(
    tournament_id: str,
    response: Response,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Register the caller to a tournament.

    Team tournaments accept individual registrations too; teams are formed
    afterwards among registered participants.

    Returns:
        dict: `{"message": "Registered"}` (201), or `{"message": "Already registered"}`
        with status 200 when the caller was registered before.
    """
    tournament = db.get(Tournament, tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")

    if tournament.end_date and tournament.end_date < utcnow():
        raise HTTPException(status_code=400, detail="Tournament has ended")

    existing = db.execute(
        select(TournamentRegistration).where(
            TournamentRegistration.tournament_id == tournament_id,
            TournamentRegistration.user_id == user_id,
        )
    ).scalars().first()
    if existing:
        response.status_code = 200
        return {"message": "Already registered"}

    count = db.scalar(
        select(func.count(TournamentRegistration.id)).where(
            TournamentRegistration.tournament_id == tournament_id
        )
    )
    if tournament.max_participants and count >= tournament.max_participants:
        raise HTTPException(status_code=400, detail="Tournament is full")

    db.add(TournamentRegistration(tournament_id=tournament_id, user_id=user_id))
    db.commit()
    return {"message": "Registered"}


@router.delete("/tournaments/{tournament_id}/register")
def unregister(
    tournament_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    registration = db.execute(
        select(TournamentRegistration).where(
            TournamentRegistration.tournament_id == tournament_id,
            TournamentRegistration.user_id == user_id,
        )
    ).scalars().first()
    if not registration:
        raise HTTPException(status_code=404, detail="Not registered")

    db.delete(registration)
    db.commit()
    return {"message": "Unregistered"}


@router.post("/tournaments/{tournament_id}/start")
def start_tournament(
    tournament_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Start a tournament: generate the first bracket round and close registrations.

    Workflow:
        1) Check ownership.
        2) Validate the start (status, deadline, participant count).
        3) Collect entrants (solo tournaments get one-member teams).
        4) Generate round 1, byes included, and set status IN_PROGRESS.

    Returns:
        dict: `{"tournament_id", "rounds", "matches": [...]}` where `matches`
        lists every match created, byes and pre-filled round-2 pairings included.

    Raises:
        HTTPException: 404/403 on ownership; 400 with the reason when the
            tournament cannot start.
    """
    tournament = _owned_tournament(db, tournament_id, user_id)

    check = validate_tournament_start(db, tournament_id)
    if not check.can_start:
        raise HTTPException(status_code=400, detail=check.reason)

    entrants = collect_entrants(db, tournament)
    generate_single_elimination(db, tournament, entrants)
    tournament.status = "IN_PROGRESS"
    db.commit()

    matches = db.execute(
        select(Match)
        .where(Match.tournament_id == tournament_id)
        .order_by(Match.round, Match.created_at)
    ).scalars().all()

    logger.info("Tournament %s started with %s entrants", tournament_id, len(entrants))
    return {
        "tournament_id": tournament_id,
        "rounds": calculate_rounds(len(entrants)),
        "matches": [MatchOut.model_validate(m) for m in matches],
    }
