"""Central API router composition.

This module is responsible for mounting individual route modules on the main app
router and providing a single import point for `FastAPI.include_router(...)`.
"""

from fastapi import APIRouter

from .accounts import router as accounts_router
from .games import router as games_router
from .profile import router as profile_router
from .results import router as results_router
from .teams import router as teams_router
from .tournaments import router as tournaments_router
from .users import router as users_router

router = APIRouter(prefix="/api")

router.include_router(accounts_router)
router.include_router(profile_router)
router.include_router(users_router)
router.include_router(games_router)
router.include_router(tournaments_router)
router.include_router(teams_router)
router.include_router(results_router)
