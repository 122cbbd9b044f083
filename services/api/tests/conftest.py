"""Shared fixtures for the API service tests.

The app runs against an in-memory SQLite database. Every request handled by
the `client` fixture uses the same session as the test itself, so rows created
through the factories are visible to the routes and vice versa.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["AUTO_CREATE_TABLES"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from common.db import make_engine
from services.api.app.auth import create_access_token
from services.api.app.db import get_db
from services.api.app.main import app
from services.api.app.models import (
    Base,
    Match,
    Team,
    TeamMember,
    Tournament,
    TournamentRegistration,
    User,
    utcnow,
)


class BrokenSession:
    """Session double whose every data-layer call fails like a lost connection."""

    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            self.calls.append(name)
            raise OperationalError(
                "SELECT users.id FROM users",
                {},
                Exception("could not connect to server at db.internal:5432"),
            )

        return fail

    def close(self):
        pass


@pytest.fixture
def engine():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine)()
    yield session
    session.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_session():
    return BrokenSession()


@pytest.fixture
def broken_client(broken_session):
    def override_get_db():
        yield broken_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth():
    """Build the Authorization header of a user."""

    def header(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return header


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def factory(pseudo=None, email=None, is_enterprise=False, created_at=None, **kwargs):
        counter["n"] += 1
        pseudo = pseudo or f"player{counter['n']}"
        user = User(
            pseudo=pseudo,
            email=email or f"{pseudo.lower()}@arena.gg",
            is_enterprise=is_enterprise,
            created_at=created_at or utcnow(),
            **kwargs,
        )
        db.add(user)
        db.commit()
        return user

    return factory


@pytest.fixture
def make_tournament(db):
    counter = {"n": 0}

    def factory(organizer, **kwargs):
        counter["n"] += 1
        kwargs.setdefault("name", f"Cup {counter['n']}")
        kwargs.setdefault("status", "REG_OPEN")
        tournament = Tournament(organizer_id=organizer.id, **kwargs)
        db.add(tournament)
        db.commit()
        return tournament

    return factory


@pytest.fixture
def register(db):
    def factory(tournament, *users):
        for user in users:
            db.add(TournamentRegistration(tournament_id=tournament.id, user_id=user.id))
        db.commit()

    return factory


@pytest.fixture
def make_team(db):
    def factory(tournament, name, *members, created_at=None):
        team = Team(name=name, tournament_id=tournament.id, created_at=created_at or utcnow())
        for user in members:
            team.members.append(TeamMember(user_id=user.id))
        db.add(team)
        db.commit()
        return team

    return factory


@pytest.fixture
def make_match(db):
    def factory(tournament, team_a, team_b=None, round=1, **kwargs):
        match = Match(
            tournament_id=tournament.id,
            round=round,
            team_a_id=team_a.id,
            team_b_id=team_b.id if team_b else None,
            **kwargs,
        )
        db.add(match)
        db.commit()
        return match

    return factory