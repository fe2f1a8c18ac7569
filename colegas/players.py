"""Player management within a league."""

import logging
from typing import Any

from .config import get_config
from .exceptions import ValidationError
from .permissions import require_admin
from .schemas import LeagueDatabase, Player, PlayerCreate, PlayerUpdate
from .store import LeagueStore, find_league, find_player, next_id
from .utils import parse_payload

logger = logging.getLogger('colegas.players')


def get_placeholder_player(db: LeagueDatabase) -> Player:
    """
    Return the shared placeholder player, creating it on first use.

    The placeholder fills roster slots that have no real player.
    """
    for player in db.players:
        if player.is_placeholder:
            return player

    config = get_config()
    placeholder = Player(
        id=next_id(db, 'player'),
        name=config.placeholder_player_name,
        image=config.placeholder_player_image,
        total_points=0,
        league_id=None,
        is_placeholder=True,
    )
    db.players.append(placeholder)
    logger.info(f'Created placeholder player (id={placeholder.id})')
    return placeholder


def _player_in_league(db: LeagueDatabase, league_id: int, player_id: int) -> Player:
    player = find_player(db, player_id)
    if player.league_id != league_id:
        raise ValidationError(f'Player {player_id} does not belong to league {league_id}')
    return player


def create_player(
    store: LeagueStore, league_id: int, payload: PlayerCreate | dict[str, Any], user_id: int
) -> Player:
    """Add a player to a league (admins only)."""
    request = parse_payload(PlayerCreate, payload)

    with store.transaction() as db:
        require_admin(db, league_id, user_id, 'add players')
        find_league(db, league_id)

        player = Player(
            id=next_id(db, 'player'),
            name=request.name,
            image=request.image or get_config().default_player_image,
            total_points=0,
            league_id=league_id,
        )
        db.players.append(player)

    logger.info(f'Created player {player.name} (id={player.id}) in league {league_id}')
    return player


def update_player(
    store: LeagueStore,
    league_id: int,
    player_id: int,
    payload: PlayerUpdate | dict[str, Any],
    user_id: int,
) -> Player:
    """Rename a player or change their image (admins only). Blank fields are ignored."""
    request = parse_payload(PlayerUpdate, payload)

    with store.transaction() as db:
        require_admin(db, league_id, user_id, 'modify players')
        player = _player_in_league(db, league_id, player_id)

        if request.name and request.name.strip():
            player.name = request.name
        if request.image and request.image.strip():
            player.image = request.image

    return player


def delete_player(store: LeagueStore, league_id: int, player_id: int, user_id: int) -> None:
    """
    Remove a player from a league (admins only).

    Roster slots holding the player are handed the placeholder player and
    keep their role.
    """
    with store.transaction() as db:
        require_admin(db, league_id, user_id, 'delete players')
        player = _player_in_league(db, league_id, player_id)
        placeholder = get_placeholder_player(db)

        replaced = 0
        for slot in db.roster_slots:
            if slot.player_id == player.id:
                slot.player_id = placeholder.id
                replaced += 1

        db.players = [p for p in db.players if p.id != player.id]

    logger.info(f'Deleted player {player_id} from league {league_id}, {replaced} slots emptied')


def get_player(store: LeagueStore, league_id: int, player_id: int) -> Player:
    return _player_in_league(store.snapshot(), league_id, player_id)


def list_players(store: LeagueStore, league_id: int) -> list[Player]:
    """Real (non-placeholder) players of a league."""
    db = store.snapshot()
    find_league(db, league_id)
    return [p for p in db.players if p.league_id == league_id and not p.is_placeholder]


def update_player_points(
    store: LeagueStore, league_id: int, player_id: int, total_points: int, user_id: int
) -> Player:
    """Set a player's cumulative total points (admins only)."""
    with store.transaction() as db:
        require_admin(db, league_id, user_id, 'update player points')
        player = _player_in_league(db, league_id, player_id)
        player.total_points = int(total_points)

    return player
