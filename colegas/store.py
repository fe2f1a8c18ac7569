"""JSON document store for league data.

The whole league database lives in one JSON file validated by
``LeagueDatabase``. Writes go through ``LeagueStore.transaction()``, which
hands out a deep copy of the document and only replaces the file when the
block finishes without raising. Everything a service does inside one
transaction is therefore applied together or not at all.

Read-modify-write cycles are serialized twice: a process-wide RLock orders
threads, and an exclusive ``fcntl.flock`` on a ``<db>.lock`` sibling file
orders separate processes (API workers, the management CLI).

Lookup helpers below take the document explicitly so services can call
them inside a transaction.
"""

import fcntl
import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .config import get_data_path
from .exceptions import NotFoundError
from .schemas import (
    LeagueDatabase,
    LeagueScore,
    League,
    Match,
    Membership,
    Player,
    PlayerMatchStats,
    RosterSlot,
    User,
)
from .utils import load_json, save_json

logger = logging.getLogger('colegas.store')

# Shared by every store in the process so separate instances on one file
# still serialize their transactions.
_STORE_LOCK = threading.RLock()

# Lock file path -> [fd, depth] for flocks held by this process. Only touched
# while _STORE_LOCK is held.
_FILE_LOCKS: dict[str, list[int]] = {}


def lock_path_for(path: Path) -> Path:
    return path.with_name(path.name + '.lock')


@contextmanager
def _exclusive_file_lock(path: Path) -> Iterator[None]:
    """
    Hold an exclusive flock on the sibling lock file of a database path.

    Re-entrant within the process: separate store instances on one file
    share the descriptor instead of blocking on each other.
    """
    key = str(lock_path_for(path).resolve())
    held = _FILE_LOCKS.get(key)
    if held is not None:
        held[1] += 1
        try:
            yield
        finally:
            held[1] -= 1
        return

    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(key, os.O_RDWR | os.O_CREAT, 0o644)
    try:
        fcntl.flock(fd, fcntl.LOCK_EX)
        _FILE_LOCKS[key] = [fd, 1]
        try:
            yield
        finally:
            del _FILE_LOCKS[key]
            fcntl.flock(fd, fcntl.LOCK_UN)
    finally:
        os.close(fd)


class LeagueStore:
    """File-backed league database with serialized transactions."""

    def __init__(self, path: Optional[Path | str] = None):
        self.path = Path(path) if path is not None else get_data_path()
        self._lock = _STORE_LOCK
        self._working: Optional[LeagueDatabase] = None

    def _read(self) -> LeagueDatabase:
        if not self.path.exists():
            return LeagueDatabase()
        return load_json(self.path, schema=LeagueDatabase)

    def snapshot(self) -> LeagueDatabase:
        """Return a private copy of the current document for reading."""
        with self._lock:
            if self._working is not None:
                return self._working.model_copy(deep=True)
            return self._read()

    @contextmanager
    def transaction(self) -> Iterator[LeagueDatabase]:
        """
        Open a read-write transaction.

        Nested calls on the same thread join the outer transaction. The
        file is rewritten once, when the outermost block exits cleanly.
        Other processes opening a transaction on the same file wait until
        then.

        Example:
            with store.transaction() as db:
                db.players.append(player)
        """
        with self._lock:
            if self._working is not None:
                yield self._working
                return

            with _exclusive_file_lock(self.path):
                self._working = self._read()
                try:
                    yield self._working
                    save_json(self.path, self._working)
                    logger.debug(f'Committed transaction to {self.path}')
                except BaseException:
                    logger.debug(f'Rolled back transaction on {self.path}')
                    raise
                finally:
                    self._working = None


def next_id(db: LeagueDatabase, kind: str) -> int:
    """Allocate the next integer id for an entity kind."""
    value = db.next_ids.get(kind, 1)
    db.next_ids[kind] = value + 1
    return value


def find_user(db: LeagueDatabase, user_id: int) -> User:
    for user in db.users:
        if user.id == user_id:
            return user
    raise NotFoundError('User', user_id)


def find_user_by_username(db: LeagueDatabase, username: str) -> Optional[User]:
    return next((u for u in db.users if u.username == username), None)


def find_league(db: LeagueDatabase, league_id: int) -> League:
    for league in db.leagues:
        if league.id == league_id:
            return league
    raise NotFoundError('League', league_id)


def find_match(db: LeagueDatabase, match_id: int) -> Match:
    for match in db.matches:
        if match.id == match_id:
            return match
    raise NotFoundError('Match', match_id)


def find_player(db: LeagueDatabase, player_id: int) -> Player:
    for player in db.players:
        if player.id == player_id:
            return player
    raise NotFoundError('Player', player_id)


def find_membership(db: LeagueDatabase, league_id: int, user_id: int) -> Optional[Membership]:
    return next(
        (m for m in db.memberships if m.league_id == league_id and m.user_id == user_id),
        None,
    )


def find_player_match_stats(
    db: LeagueDatabase, match_id: int, player_id: int
) -> Optional[PlayerMatchStats]:
    """Find the stats snapshot for a (match, player) pair, if recorded."""
    return next(
        (
            s
            for s in db.player_match_stats
            if s.match_id == match_id and s.player_id == player_id
        ),
        None,
    )


def find_roster_slots(db: LeagueDatabase, player_id: int, league_id: int) -> list[RosterSlot]:
    """All roster slots in a league currently holding a player."""
    return [
        slot
        for slot in db.roster_slots
        if slot.player_id == player_id and slot.league_id == league_id
    ]


def find_user_slots(db: LeagueDatabase, user_id: int, league_id: int) -> list[RosterSlot]:
    return [
        slot
        for slot in db.roster_slots
        if slot.user_id == user_id and slot.league_id == league_id
    ]


def get_league_score(db: LeagueDatabase, user_id: int, league_id: int) -> float:
    for score in db.league_scores:
        if score.user_id == user_id and score.league_id == league_id:
            return score.total_points
    return 0.0


def add_league_score(db: LeagueDatabase, user_id: int, league_id: int, delta: float) -> float:
    """
    Add delta to a user's cumulative league score.

    Creates the ledger entry on first credit.

    Returns:
        The new cumulative score
    """
    for score in db.league_scores:
        if score.user_id == user_id and score.league_id == league_id:
            score.total_points += delta
            return score.total_points

    db.league_scores.append(LeagueScore(user_id=user_id, league_id=league_id, total_points=delta))
    return delta
