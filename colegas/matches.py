"""Matches and per-match player stats.

Submitting stats for a (match, player) pair stores the snapshot, scores it
under both the FIELD and GOALKEEPER rules and credits the result to every
roster holding the player, all in one store transaction.
"""

import logging
from typing import Any

from .exceptions import ValidationError
from .models import PlayerMatchStatsResult, PlayerRole
from .permissions import is_admin, require_admin
from .propagation import propagate_points
from .rules import rules_for_role
from .schemas import Match, MatchCreate, PlayerMatchStats, StatsUpdate
from .scoring import calculate_points
from .store import (
    LeagueStore,
    find_league,
    find_match,
    find_player,
    find_player_match_stats,
    next_id,
)
from .utils import parse_payload
from .validators import validate_match_points

logger = logging.getLogger('colegas.matches')


def create_match(store: LeagueStore, payload: MatchCreate | dict[str, Any], user_id: int) -> Match:
    """
    Schedule a match in a league (admins only).

    Matches are named after their matchday: the Nth match of a league is
    'Matchday N'.
    """
    request = parse_payload(MatchCreate, payload)

    with store.transaction() as db:
        league = find_league(db, request.league_id)
        require_admin(db, league.id, user_id, 'create matches')

        played = sum(1 for m in db.matches if m.league_id == league.id)
        match = Match(
            id=next_id(db, 'match'),
            league_id=league.id,
            name=f'Matchday {played + 1}',
            description=request.description,
            match_date=request.match_date,
        )
        db.matches.append(match)

    logger.info(f'Created {match.name} (id={match.id}) in league {league.id}')
    return match


def list_matches(store: LeagueStore, league_id: int) -> list[Match]:
    db = store.snapshot()
    find_league(db, league_id)
    return sorted((m for m in db.matches if m.league_id == league_id), key=lambda m: m.id)


def update_player_match_stats(
    store: LeagueStore,
    match_id: int,
    player_id: int,
    raw_stats: StatsUpdate | dict[str, Any],
) -> PlayerMatchStatsResult:
    """
    Record a player's stats for a match and credit the rosters holding them.

    A second submission for the same pair replaces the first snapshot and
    its credits; nothing accumulates across submissions.

    Args:
        store: League store
        match_id: Match the stats belong to
        player_id: Player the stats belong to
        raw_stats: Counts keyed by stat name (missing counts are 0)

    Returns:
        PlayerMatchStatsResult with both role totals

    Raises:
        ValidationError: Negative or unknown counts, or a player outside the match's league
        NotFoundError: If the match or player doesn't exist
    """
    stats = parse_payload(StatsUpdate, raw_stats)

    with store.transaction() as db:
        match = find_match(db, match_id)
        player = find_player(db, player_id)
        if player.league_id != match.league_id:
            raise ValidationError(
                f'Player {player_id} does not play in the league of match {match_id}'
            )

        field_points, field_breakdown = calculate_points(stats, rules_for_role(db, PlayerRole.FIELD))
        keeper_points, keeper_breakdown = calculate_points(
            stats, rules_for_role(db, PlayerRole.GOALKEEPER)
        )

        existing = find_player_match_stats(db, match_id, player_id)
        record = PlayerMatchStats(
            id=existing.id if existing else next_id(db, 'player_match_stats'),
            match_id=match_id,
            player_id=player_id,
            total_field_points=field_points,
            total_goalkeeper_points=keeper_points,
            **stats.model_dump(),
        )
        if existing:
            db.player_match_stats = [
                record if s.id == existing.id else s for s in db.player_match_stats
            ]
        else:
            db.player_match_stats.append(record)

        credits = propagate_points(
            db, match_id, player_id, player.league_id, field_points, keeper_points
        )

    result = PlayerMatchStatsResult(
        stats_id=record.id,
        match_id=match_id,
        player_id=player_id,
        total_field_points=field_points,
        total_goalkeeper_points=keeper_points,
        field_breakdown=field_breakdown,
        goalkeeper_breakdown=keeper_breakdown,
        credited_users=len(credits),
    )

    for warning in validate_match_points(player.name, result):
        logger.warning(warning)

    logger.info(
        f'Stats for {player.name} in match {match_id}: field={field_points:.2f}, '
        f'goalkeeper={keeper_points:.2f}, {len(credits)} roster slots credited'
    )
    return result


def get_player_match_stats(store: LeagueStore, match_id: int, player_id: int) -> PlayerMatchStats | None:
    return find_player_match_stats(store.snapshot(), match_id, player_id)


def list_match_stats(store: LeagueStore, match_id: int) -> list[PlayerMatchStats]:
    db = store.snapshot()
    find_match(db, match_id)
    return [s for s in db.player_match_stats if s.match_id == match_id]


def is_admin_of_match_league(store: LeagueStore, match_id: int, user_id: int) -> bool:
    db = store.snapshot()
    match = find_match(db, match_id)
    return is_admin(db, match.league_id, user_id)
