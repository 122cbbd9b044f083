"""API schemas.

Pydantic models for request bodies and response payloads. Response models are
built from ORM objects (`from_attributes=True`) and define exactly which
columns leave the service; route handlers wrap them in small envelopes such as
`{"match": ...}` or `{"teams": [...]}`.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def naive_utc(value):
    """Convert an aware datetime to naive UTC, the convention of stored timestamps."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# -----------------------------
# Users
# -----------------------------
class UserSummary(ORMModel):
    """Minimal projection used wherever a user is embedded in another record."""

    id: str
    pseudo: str
    avatar_url: Optional[str] = None


class UserSearchResult(UserSummary):
    email: str
    created_at: datetime


class ProfileUser(UserSummary):
    email: str


class PublicUser(UserSummary):
    banner_url: Optional[str] = None
    is_enterprise: bool
    created_at: datetime
    tournament_count: int = 0
    team_count: int = 0
    registration_count: int = 0


class OrganizerSummary(ORMModel):
    id: str
    pseudo: str
    is_enterprise: bool


class OrganizerName(ORMModel):
    pseudo: str


# -----------------------------
# Games
# -----------------------------
class GameOut(ORMModel):
    id: str
    name: str
    slug: str
    image_url: Optional[str] = None
    logo_url: Optional[str] = None
    poster_url: Optional[str] = None


class GameRef(ORMModel):
    id: str
    name: str
    image_url: Optional[str] = None


class GameArtwork(ORMModel):
    image_url: Optional[str] = None
    logo_url: Optional[str] = None
    poster_url: Optional[str] = None


# -----------------------------
# Teams
# -----------------------------
class TeamOut(ORMModel):
    id: str
    name: str
    tournament_id: str
    created_at: datetime


class TeamMemberOut(ORMModel):
    id: str
    team_id: str
    user_id: str
    created_at: datetime


class TeamMemberWithUser(TeamMemberOut):
    user: UserSummary


class TeamWithMembers(TeamOut):
    members: list[TeamMemberWithUser] = []


# -----------------------------
# Matches
# -----------------------------
class TournamentRef(ORMModel):
    id: str
    organizer_id: str


class MatchOut(ORMModel):
    id: str
    tournament_id: str
    round: Optional[int] = None
    team_a_id: str
    team_b_id: Optional[str] = None
    winner_team_id: Optional[str] = None
    status: str
    scheduled_at: Optional[datetime] = None
    created_at: datetime


class MatchDetail(MatchOut):
    team_a: TeamOut
    team_b: Optional[TeamOut] = None
    tournament: TournamentRef


# -----------------------------
# Tournaments
# -----------------------------
class TournamentOut(ORMModel):
    id: str
    name: str
    description: Optional[str] = None
    game: Optional[str] = None
    game_id: Optional[str] = None
    format: str
    visibility: str
    status: str
    poster_url: Optional[str] = None
    logo_url: Optional[str] = None
    is_team_based: bool
    max_participants: Optional[int] = None
    team_min_size: Optional[int] = None
    team_max_size: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    registration_deadline: Optional[datetime] = None
    organizer_id: str
    created_at: datetime


class TournamentListItem(TournamentOut):
    organizer: OrganizerSummary
    game_ref: Optional[GameRef] = None
    registration_count: int = 0


class TournamentDetail(TournamentOut):
    organizer: OrganizerName
    teams: list[TeamWithMembers] = []
    matches: list[MatchOut] = []


class TournamentCard(ORMModel):
    """Compact tournament projection used on the owner's dashboard."""

    id: str
    name: str
    poster_url: Optional[str] = None
    logo_url: Optional[str] = None
    game: Optional[str] = None
    status: str
    game_ref: Optional[GameArtwork] = None


# -----------------------------
# Request bodies
# -----------------------------
class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    pseudo: str = Field(..., min_length=1, max_length=100)


class LoginRequest(BaseModel):
    email: str
    password: str


class ProfileUpdate(BaseModel):
    pseudo: str = Field(..., min_length=1, max_length=100)


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class TournamentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    game: Optional[str] = None
    game_id: Optional[str] = None
    format: Optional[str] = None
    visibility: Optional[str] = None
    is_team_based: bool = False
    max_participants: Optional[int] = Field(None, ge=1)
    team_min_size: Optional[int] = Field(None, ge=1)
    team_max_size: Optional[int] = Field(None, ge=1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    registration_deadline: Optional[datetime] = None

    @field_validator("start_date", "end_date", "registration_deadline")
    @classmethod
    def _naive_dates(cls, value):
        return naive_utc(value)


class TournamentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    game: Optional[str] = None
    format: Optional[str] = None
    visibility: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _naive_dates(cls, value):
        return naive_utc(value)


class TeamCreate(BaseModel):
    tournament_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)


class ResultSubmit(BaseModel):
    match_id: str = Field(..., min_length=1)
    winner_team_id: str = Field(..., min_length=1)
