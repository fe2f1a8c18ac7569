"""Fantasy roster assembly.

A roster is the set of roster slots a user holds in a league. Slots keep
their id and role for their whole life; only the player they point at
changes when players are assigned or removed.
"""

import logging
import random
from typing import Any, Optional

from .exceptions import NotFoundError, ValidationError
from .models import PlayerRole
from .permissions import require_member
from .players import get_placeholder_player
from .schemas import League, LeagueDatabase, RosterCreate, RosterSlot
from .store import (
    LeagueStore,
    find_league,
    find_player,
    find_user,
    find_user_slots,
    next_id,
)
from .utils import parse_payload
from .validators import validate_roster

logger = logging.getLogger('colegas.rosters')


def _slot_view(db: LeagueDatabase, slot: RosterSlot) -> dict[str, Any]:
    player = find_player(db, slot.player_id)
    return {
        'slot_id': slot.id,
        'player_id': player.id,
        'name': player.name,
        'role': slot.role.value,
        'image': player.image,
        'total_points': player.total_points,
        'is_placeholder': player.is_placeholder,
    }


def _replace_slots(db: LeagueDatabase, user_id: int, league_id: int, slots: list[RosterSlot]) -> None:
    db.roster_slots = [
        s for s in db.roster_slots if not (s.user_id == user_id and s.league_id == league_id)
    ] + slots


def create_random_roster(
    db: LeagueDatabase,
    league: League,
    user_id: int,
    rng: Optional[random.Random] = None,
) -> list[RosterSlot]:
    """
    Give a user a random roster in a league.

    The first drawn player keeps goal and the rest play in the field. When
    the league has fewer players than the team size the remaining slots
    get the placeholder player. Any previous roster is replaced.
    """
    rng = rng or random.Random()
    find_user(db, user_id)

    pool = [p for p in db.players if p.league_id == league.id and not p.is_placeholder]
    rng.shuffle(pool)
    chosen = [p.id for p in pool[: league.team_size]]

    if len(chosen) < league.team_size:
        placeholder = get_placeholder_player(db)
        chosen.extend([placeholder.id] * (league.team_size - len(chosen)))

    slots = []
    for index, player_id in enumerate(chosen):
        slots.append(
            RosterSlot(
                id=next_id(db, 'roster_slot'),
                user_id=user_id,
                league_id=league.id,
                player_id=player_id,
                role=PlayerRole.GOALKEEPER if index == 0 else PlayerRole.FIELD,
            )
        )

    _replace_slots(db, user_id, league.id, slots)
    return slots


def create_roster(
    store: LeagueStore, league_id: int, payload: RosterCreate | dict[str, Any], user_id: int
) -> list[RosterSlot]:
    """
    Save a user's chosen roster for a league.

    Raises:
        PermissionDeniedError: If the user is not a league member
        NotFoundError: If the league doesn't exist
        ValidationError: If the roster breaks league rules
    """
    request = parse_payload(RosterCreate, payload)

    with store.transaction() as db:
        require_member(db, league_id, user_id, 'create a roster')
        league = find_league(db, league_id)

        players_by_id = {p.id: p for p in db.players}
        errors = validate_roster(request.players, league.team_size, league_id, players_by_id)
        if errors:
            raise ValidationError('; '.join(errors))

        slots = [
            RosterSlot(
                id=next_id(db, 'roster_slot'),
                user_id=user_id,
                league_id=league_id,
                player_id=entry.player_id,
                role=entry.role,
            )
            for entry in request.players
        ]
        _replace_slots(db, user_id, league_id, slots)

    logger.info(f'User {user_id} saved a {len(slots)}-player roster in league {league_id}')
    return slots


def assign_player(
    store: LeagueStore, league_id: int, user_id: int, slot_id: int, player_id: int
) -> RosterSlot:
    """Point one of the user's slots at a different league player."""
    with store.transaction() as db:
        require_member(db, league_id, user_id, 'change a roster')
        slot = _find_own_slot(db, league_id, user_id, slot_id)
        player = find_player(db, player_id)
        if player.league_id != league_id:
            raise ValidationError(f'Player {player_id} does not belong to league {league_id}')
        if any(s.player_id == player_id for s in find_user_slots(db, user_id, league_id)):
            raise ValidationError(f'Player {player_id} is already on this roster')
        slot.player_id = player_id

    return slot


def remove_player(store: LeagueStore, league_id: int, user_id: int, slot_id: int) -> RosterSlot:
    """Empty one of the user's slots by giving it the placeholder player."""
    with store.transaction() as db:
        require_member(db, league_id, user_id, 'change a roster')
        slot = _find_own_slot(db, league_id, user_id, slot_id)
        slot.player_id = get_placeholder_player(db).id

    return slot


def _find_own_slot(db: LeagueDatabase, league_id: int, user_id: int, slot_id: int) -> RosterSlot:
    for slot in find_user_slots(db, user_id, league_id):
        if slot.id == slot_id:
            return slot
    raise NotFoundError('RosterSlot', slot_id)


def get_user_roster(store: LeagueStore, league_id: int, user_id: int) -> list[dict[str, Any]]:
    """A member's own roster with player details."""
    db = store.snapshot()
    require_member(db, league_id, user_id, 'view their roster')
    return [_slot_view(db, slot) for slot in find_user_slots(db, user_id, league_id)]


def get_roster_by_team(
    store: LeagueStore, league_id: int, team_user_id: int, requesting_user_id: int
) -> dict[str, Any]:
    """
    Another member's roster, visible to any member of the league.

    Raises:
        NotFoundError: If the user has no roster in the league
    """
    db = store.snapshot()
    league = find_league(db, league_id)
    require_member(db, league_id, requesting_user_id, 'view rosters')

    slots = find_user_slots(db, team_user_id, league_id)
    if not slots:
        raise NotFoundError('Roster', f'user {team_user_id} in league {league_id}')

    user = find_user(db, team_user_id)
    return {
        'league_id': league.id,
        'league_name': league.name,
        'user_id': user.id,
        'username': user.username,
        'players': [_slot_view(db, slot) for slot in slots],
    }
