"""League membership and admin checks."""

from .exceptions import PermissionDeniedError
from .models import LeagueRole
from .schemas import LeagueDatabase
from .store import find_membership


def is_member(db: LeagueDatabase, league_id: int, user_id: int) -> bool:
    return find_membership(db, league_id, user_id) is not None


def is_admin(db: LeagueDatabase, league_id: int, user_id: int) -> bool:
    membership = find_membership(db, league_id, user_id)
    return membership is not None and membership.role == LeagueRole.ADMIN


def require_member(db: LeagueDatabase, league_id: int, user_id: int, action: str) -> None:
    if not is_member(db, league_id, user_id):
        raise PermissionDeniedError(f'Only league members can {action}')


def require_admin(db: LeagueDatabase, league_id: int, user_id: int, action: str) -> None:
    if not is_admin(db, league_id, user_id):
        raise PermissionDeniedError(f'Only league admins can {action}')


def count_admins(db: LeagueDatabase, league_id: int) -> int:
    return sum(
        1 for m in db.memberships if m.league_id == league_id and m.role == LeagueRole.ADMIN
    )
