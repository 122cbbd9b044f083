"""FastAPI application factory / entrypoint.

This service exposes HTTP endpoints for:
- account registration, login and the signed-in user's profile
- user search and public profiles
- tournaments, registrations, teams and brackets
- match results and winner advancement
- health checks

The API is intended to be consumed by the web frontend.

Operational notes:
- CORS origins come from `CORS_ORIGINS` (see `settings.py`).
- Database connectivity is provided via `services/api/app/db.py`.
- Unhandled data-layer errors are logged and mapped to a generic 500.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from common.logging import configure_logging, get_logger

from .db import init_db
from .routes import router
from .settings import get_settings

settings = get_settings()
configure_logging("api", settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        init_db()
        logger.info("Database tables ensured")
    yield


app = FastAPI(title="Tournament Platform API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/health")
def health():
    """Health check endpoint.

    Returns a minimal payload used by local dev tooling and container
    orchestrators to determine whether the API process is up.

    Returns:
        dict: `{"status": "ok", "service": "api"}`.
    """
    return {"status": "ok", "service": "api"}
