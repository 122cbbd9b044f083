"""Seed job entrypoint.

Populates the `games` catalogue table. The job is idempotent: games are
upserted by `slug`, so re-running it refreshes names and artwork without
creating duplicates or changing existing ids.

Run with:

    python -m jobs.seed.app.main

Returns:
    The process exit code (0 = success).
"""

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from common.db import database_url, make_engine, session_scope
from common.logging import configure_logging, get_logger

from services.api.app.models import Base, Game

from .games import GAMES

logger = get_logger(__name__)


def upsert_games(session, games=GAMES) -> tuple[int, int]:
    """Insert missing games and refresh existing ones, matching on slug.

    Args:
        session: Open SQLAlchemy session (caller commits).
        games: Catalogue entries (`id`, `name`, `slug` and artwork urls).

    Returns:
        tuple[int, int]: `(created, updated)` counts.
    """
    created = updated = 0
    for entry in games:
        game = session.execute(select(Game).where(Game.slug == entry["slug"])).scalars().first()
        if game is None:
            session.add(Game(**entry))
            created += 1
            continue

        game.name = entry["name"]
        game.image_url = entry.get("image_url")
        game.logo_url = entry.get("logo_url")
        game.poster_url = entry.get("poster_url")
        updated += 1
    return created, updated


def main(url=None) -> int:
    """Run the job."""
    configure_logging("seed")
    engine = make_engine(url or database_url())
    Base.metadata.create_all(bind=engine)

    logger.info("Seeding games...")
    try:
        with session_scope(sessionmaker(bind=engine)) as session:
            created, updated = upsert_games(session)
    except Exception:
        logger.exception("Seeding failed")
        return 1
    finally:
        engine.dispose()

    logger.info("Done: %s created, %s updated", created, updated)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
