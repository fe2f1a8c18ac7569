from .models import PlayerRole, LeagueRole, RequestStatus, PlayerMatchStatsResult, UserScore
from .exceptions import (
    ColegasError,
    NotFoundError,
    ValidationError,
    PermissionDeniedError,
    ConflictError,
    AuthenticationError,
    ComputationError,
)
from .store import LeagueStore
from .rules import ScoringRuleTable, rules_for_role, add_rule, seed_default_rules
from .scoring import PointsCalculator, calculate_points, calculate_points_for_role, get_stat_value, STAT_GETTERS
from .propagation import propagate_points
from .matches import (
    create_match,
    list_matches,
    update_player_match_stats,
    get_player_match_stats,
    list_match_stats,
    is_admin_of_match_league,
)
from .auth import register_user, authenticate, change_password
from .leagues import (
    create_league,
    join_league,
    send_join_request,
    get_pending_join_requests,
    accept_join_request,
    reject_join_request,
    get_league,
    update_league,
    update_team_size,
    change_user_role,
    leave_league,
    expel_user,
    delete_league,
    get_scoreboard,
    get_user_points,
)
from .players import (
    create_player,
    update_player,
    delete_player,
    get_player,
    list_players,
    update_player_points,
)
from .rosters import create_roster, assign_player, remove_player, get_user_roster, get_roster_by_team
from .excel_export import export_league_workbook

__all__ = [
    # Models
    'PlayerRole',
    'LeagueRole',
    'RequestStatus',
    'PlayerMatchStatsResult',
    'UserScore',
    # Errors
    'ColegasError',
    'NotFoundError',
    'ValidationError',
    'PermissionDeniedError',
    'ConflictError',
    'AuthenticationError',
    'ComputationError',
    # Storage
    'LeagueStore',
    # Scoring core
    'ScoringRuleTable',
    'rules_for_role',
    'add_rule',
    'seed_default_rules',
    'PointsCalculator',
    'calculate_points',
    'calculate_points_for_role',
    'get_stat_value',
    'STAT_GETTERS',
    'propagate_points',
    # Matches
    'create_match',
    'list_matches',
    'update_player_match_stats',
    'get_player_match_stats',
    'list_match_stats',
    'is_admin_of_match_league',
    # Users
    'register_user',
    'authenticate',
    'change_password',
    # Leagues
    'create_league',
    'join_league',
    'send_join_request',
    'get_pending_join_requests',
    'accept_join_request',
    'reject_join_request',
    'get_league',
    'update_league',
    'update_team_size',
    'change_user_role',
    'leave_league',
    'expel_user',
    'delete_league',
    'get_scoreboard',
    'get_user_points',
    # Players
    'create_player',
    'update_player',
    'delete_player',
    'get_player',
    'list_players',
    'update_player_points',
    # Rosters
    'create_roster',
    'assign_player',
    'remove_player',
    'get_user_roster',
    'get_roster_by_team',
    # Export
    'export_league_workbook',
]
