"""Data models for the Colegas scoring engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict


class PlayerRole(str, Enum):
    """Slot a player fills in a fantasy roster."""
    FIELD = 'FIELD'
    GOALKEEPER = 'GOALKEEPER'


class LeagueRole(str, Enum):
    """A user's role inside a league."""
    ADMIN = 'ADMIN'
    PARTICIPANT = 'PARTICIPANT'


class RequestStatus(str, Enum):
    PENDING = 'PENDING'
    ACCEPTED = 'ACCEPTED'
    REJECTED = 'REJECTED'


@dataclass
class PlayerMatchStatsResult:
    """Outcome of a stats submission for one player in one match."""
    stats_id: int
    match_id: int
    player_id: int
    total_field_points: float = 0.0
    total_goalkeeper_points: float = 0.0
    field_breakdown: Dict[str, float] = field(default_factory=dict)
    goalkeeper_breakdown: Dict[str, float] = field(default_factory=dict)
    credited_users: int = 0  # Roster slots credited during propagation


@dataclass
class UserScore:
    """A user's cumulative score within a league."""
    user_id: int
    username: str
    total_points: float = 0.0
