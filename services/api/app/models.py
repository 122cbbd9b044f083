"""SQLAlchemy declarative models for the tournament platform.

Tables:
- users, games
- tournaments, tournament_registrations
- teams, team_members
- matches

Identifiers are UUID4 hex strings generated application-side; timestamps are
naive UTC.
"""

from datetime import datetime, timezone
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

TOURNAMENT_STATUSES = ("DRAFT", "REG_OPEN", "IN_PROGRESS", "COMPLETED")
MATCH_STATUSES = ("PENDING", "SCHEDULED", "COMPLETED")


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    pseudo = Column(String(100), nullable=False, index=True)
    password_hash = Column(String(255), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    banner_url = Column(String(500), nullable=True)
    is_enterprise = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    tournaments = relationship("Tournament", back_populates="organizer")
    team_memberships = relationship("TeamMember", back_populates="user")
    registrations = relationship("TournamentRegistration", back_populates="user")


class Game(Base):
    __tablename__ = "games"

    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False)
    slug = Column(String(200), unique=True, nullable=False)
    image_url = Column(String(500), nullable=True)
    logo_url = Column(String(500), nullable=True)
    poster_url = Column(String(500), nullable=True)


class Tournament(Base):
    __tablename__ = "tournaments"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    game = Column(String(200), nullable=True)
    game_id = Column(String(64), ForeignKey("games.id"), nullable=True)
    format = Column(String(32), nullable=False, default="SINGLE_ELIMINATION")
    visibility = Column(String(16), nullable=False, default="PUBLIC")
    status = Column(String(16), nullable=False, default="REG_OPEN")
    poster_url = Column(String(500), nullable=True)
    logo_url = Column(String(500), nullable=True)
    is_team_based = Column(Boolean, nullable=False, default=False)
    max_participants = Column(Integer, nullable=True)
    team_min_size = Column(Integer, nullable=True)
    team_max_size = Column(Integer, nullable=True)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    registration_deadline = Column(DateTime, nullable=True)
    organizer_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    organizer = relationship("User", back_populates="tournaments")
    game_ref = relationship("Game")
    teams = relationship("Team", back_populates="tournament", order_by="Team.created_at")
    matches = relationship("Match", back_populates="tournament", order_by="Match.created_at")
    registrations = relationship("TournamentRegistration", back_populates="tournament")


class TournamentRegistration(Base):
    __tablename__ = "tournament_registrations"
    __table_args__ = (UniqueConstraint("tournament_id", "user_id"),)

    id = Column(String(32), primary_key=True, default=new_id)
    tournament_id = Column(String(32), ForeignKey("tournaments.id"), nullable=False, index=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    tournament = relationship("Tournament", back_populates="registrations")
    user = relationship("User", back_populates="registrations")


class Team(Base):
    __tablename__ = "teams"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False)
    tournament_id = Column(String(32), ForeignKey("tournaments.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    tournament = relationship("Tournament", back_populates="teams")
    members = relationship("TeamMember", back_populates="team", order_by="TeamMember.created_at")
    wins = relationship("Match", foreign_keys="Match.winner_team_id", viewonly=True)


class TeamMember(Base):
    __tablename__ = "team_members"
    __table_args__ = (UniqueConstraint("team_id", "user_id"),)

    id = Column(String(32), primary_key=True, default=new_id)
    team_id = Column(String(32), ForeignKey("teams.id"), nullable=False, index=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    team = relationship("Team", back_populates="members")
    user = relationship("User", back_populates="team_memberships")


class Match(Base):
    __tablename__ = "matches"

    id = Column(String(32), primary_key=True, default=new_id)
    tournament_id = Column(String(32), ForeignKey("tournaments.id"), nullable=False, index=True)
    round = Column(Integer, nullable=True)
    team_a_id = Column(String(32), ForeignKey("teams.id"), nullable=False)
    # NULL for a bye
    team_b_id = Column(String(32), ForeignKey("teams.id"), nullable=True)
    winner_team_id = Column(String(32), ForeignKey("teams.id"), nullable=True)
    status = Column(String(16), nullable=False, default="PENDING")
    scheduled_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    tournament = relationship("Tournament", back_populates="matches")
    team_a = relationship("Team", foreign_keys=[team_a_id])
    team_b = relationship("Team", foreign_keys=[team_b_id])
    winner_team = relationship("Team", foreign_keys=[winner_team_id])
