"""API router package.

This package contains the HTTP route modules for the tournament API service:
accounts, profile, users, games, tournaments, teams and match results.

Most code should import the composed router via:

    from services.api.app.routes import router

The actual composition lives in `services/api/app/routes/api_router.py`.
"""

from .api_router import router
