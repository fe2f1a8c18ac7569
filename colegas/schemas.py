"""Pydantic schemas for stored league data and request payloads."""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from .constants import STAT_NAMES
from .models import LeagueRole, PlayerRole, RequestStatus


class StatCounts(BaseModel):
    """Counted events for one player in one match."""

    goals_scored: int = 0
    clear_misses: int = 0
    assists: int = 0
    goals_conceded_as_keeper: int = 0
    saves_as_keeper: int = 0
    concessions: int = 0
    fouls_committed: int = 0
    fouls_received: int = 0
    penalties_won: int = 0
    penalties_conceded: int = 0
    passes_completed: int = 0
    passes_failed: int = 0
    steals: int = 0
    shots_on_target: int = 0
    shots_off_target: int = 0
    minutes_played: int = 0
    yellow_cards: int = 0
    red_cards: int = 0

    class Config:
        extra = 'forbid'


class StatsUpdate(StatCounts):
    """Stats submission for a (match, player) pair."""

    @field_validator(*STAT_NAMES)
    @classmethod
    def validate_non_negative(cls, v, info):
        """Counts can't go below zero."""
        if v < 0:
            raise ValueError(f'{info.field_name} must be >= 0, got {v}')
        return v


class PlayerMatchStats(StatCounts):
    """Stored stats snapshot with both derived role totals."""

    id: int
    match_id: int
    player_id: int
    total_field_points: float = 0.0
    total_goalkeeper_points: float = 0.0


class ScoringRule(BaseModel):
    """Points awarded per unit of a statistic for one role."""

    id: int
    stat_name: str = Field(..., min_length=1)
    points_per_unit: float
    role: PlayerRole

    class Config:
        extra = 'forbid'


class User(BaseModel):
    id: int
    username: str = Field(..., min_length=1)
    email: str
    password_hash: str

    class Config:
        extra = 'forbid'


class League(BaseModel):
    """League metadata."""

    id: int
    name: str = Field(..., min_length=1)
    description: str | None = None
    image: str | None = None
    is_private: bool = False
    join_code: str
    number_of_players: int = 0
    team_size: int = Field(..., ge=3, le=11)

    class Config:
        extra = 'forbid'


class Membership(BaseModel):
    """A user's role in a league."""

    user_id: int
    league_id: int
    role: LeagueRole

    class Config:
        extra = 'forbid'


class JoinRequest(BaseModel):
    id: int
    user_id: int
    league_id: int
    requested_at: datetime
    status: RequestStatus = RequestStatus.PENDING

    class Config:
        extra = 'forbid'


class Player(BaseModel):
    """Real-world player available to a league's rosters."""

    id: int
    name: str = Field(..., min_length=1)
    image: str | None = None
    total_points: int = 0
    league_id: int | None = None
    is_placeholder: bool = False

    class Config:
        extra = 'forbid'


class Match(BaseModel):
    id: int
    league_id: int
    name: str
    description: str | None = None
    match_date: date

    class Config:
        extra = 'forbid'


class RosterSlot(BaseModel):
    """One position in a user's fantasy team for a league."""

    id: int
    user_id: int
    league_id: int
    player_id: int
    role: PlayerRole

    class Config:
        extra = 'forbid'


class LeagueScore(BaseModel):
    """Cumulative score of a user in a league."""

    user_id: int
    league_id: int
    total_points: float = 0.0

    class Config:
        extra = 'forbid'


class ScoreCredit(BaseModel):
    """Points one stats submission credited to one roster slot."""

    match_id: int
    player_id: int
    user_id: int
    league_id: int
    slot_id: int
    role: PlayerRole
    points: float

    class Config:
        extra = 'forbid'


class LeagueDatabase(BaseModel):
    """Complete league database file structure."""

    users: list[User] = Field(default_factory=list)
    leagues: list[League] = Field(default_factory=list)
    memberships: list[Membership] = Field(default_factory=list)
    join_requests: list[JoinRequest] = Field(default_factory=list)
    players: list[Player] = Field(default_factory=list)
    matches: list[Match] = Field(default_factory=list)
    player_match_stats: list[PlayerMatchStats] = Field(default_factory=list)
    scoring_rules: list[ScoringRule] = Field(default_factory=list)
    roster_slots: list[RosterSlot] = Field(default_factory=list)
    league_scores: list[LeagueScore] = Field(default_factory=list)
    score_credits: list[ScoreCredit] = Field(default_factory=list)
    next_ids: dict[str, int] = Field(default_factory=dict)

    class Config:
        extra = 'forbid'


# Request payloads


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=30)
    email: str = Field(..., pattern=r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
    password: str = Field(..., min_length=6)

    class Config:
        extra = 'forbid'


class UserUpdate(BaseModel):
    """Profile edit. Omitted fields keep their current value."""

    username: str | None = Field(default=None, min_length=3, max_length=30)
    email: str | None = Field(default=None, pattern=r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
    password: str | None = Field(default=None, min_length=6)

    class Config:
        extra = 'forbid'


class LeagueCreate(BaseModel):
    """League creation or full update."""

    name: str = Field(..., min_length=1)
    description: str | None = None
    image: str | None = None
    is_private: bool = False
    number_of_players: int = Field(default=1, ge=0)
    team_size: int = Field(..., ge=3, le=11)

    class Config:
        extra = 'forbid'


class RosterSlotInput(BaseModel):
    player_id: int
    role: PlayerRole

    class Config:
        extra = 'forbid'


class RosterCreate(BaseModel):
    players: list[RosterSlotInput]

    class Config:
        extra = 'forbid'


class MatchCreate(BaseModel):
    league_id: int
    match_date: date
    description: str | None = None

    class Config:
        extra = 'forbid'


class PlayerCreate(BaseModel):
    name: str = Field(..., min_length=1)
    image: str | None = None

    class Config:
        extra = 'forbid'


class PlayerUpdate(BaseModel):
    name: str | None = None
    image: str | None = None

    class Config:
        extra = 'forbid'


class AppConfig(BaseModel):
    """Application configuration settings."""

    data_path: str = 'data/league_db.json'
    join_code_length: int = Field(default=4, ge=4, le=12)
    default_player_image: str = 'https://example.com/default-player.jpg'
    placeholder_player_name: str = 'Empty Slot'
    placeholder_player_image: str = 'https://example.com/placeholder-image.png'
    log_dir: str = 'logs'
    password_iterations: int = Field(default=200_000, ge=1)

    class Config:
        extra = 'forbid'
