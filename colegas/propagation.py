"""Crediting match points to the rosters that hold a player."""

import logging

from .models import PlayerRole
from .schemas import LeagueDatabase, ScoreCredit
from .store import add_league_score, find_roster_slots

logger = logging.getLogger('colegas.propagation')


def revoke_credits(db: LeagueDatabase, match_id: int, player_id: int) -> int:
    """
    Undo every credit earlier submissions for (match, player) made.

    Returns:
        Number of credits reversed
    """
    kept = []
    revoked = 0
    for credit in db.score_credits:
        if credit.match_id == match_id and credit.player_id == player_id:
            add_league_score(db, credit.user_id, credit.league_id, -credit.points)
            revoked += 1
        else:
            kept.append(credit)
    db.score_credits = kept
    return revoked


def propagate_points(
    db: LeagueDatabase,
    match_id: int,
    player_id: int,
    league_id: int,
    field_points: float,
    goalkeeper_points: float,
) -> list[ScoreCredit]:
    """
    Credit a player's match totals to every roster slot holding them.

    A FIELD slot earns field_points and a GOALKEEPER slot earns
    goalkeeper_points, added to the slot owner's cumulative score in the
    league. Credits from an earlier submission for the same match are
    reversed first, so the ledger always reflects the latest snapshot.

    Must run inside the same store transaction as the stats write.

    Args:
        db: Document from an open transaction
        match_id: Match the points were earned in
        player_id: Scored player
        league_id: League the player belongs to
        field_points: Player's total under FIELD rules
        goalkeeper_points: Player's total under GOALKEEPER rules

    Returns:
        The credits applied
    """
    revoked = revoke_credits(db, match_id, player_id)
    if revoked:
        logger.info(f'Reversed {revoked} earlier credits for player {player_id} in match {match_id}')

    credits = []
    for slot in find_roster_slots(db, player_id, league_id):
        if slot.role == PlayerRole.GOALKEEPER:
            points = goalkeeper_points
        else:
            points = field_points

        total = add_league_score(db, slot.user_id, league_id, points)
        credit = ScoreCredit(
            match_id=match_id,
            player_id=player_id,
            user_id=slot.user_id,
            league_id=league_id,
            slot_id=slot.id,
            role=slot.role,
            points=points,
        )
        db.score_credits.append(credit)
        credits.append(credit)
        logger.debug(
            f'User {slot.user_id} +{points:.2f} ({slot.role.value}) in league {league_id}, now {total:.2f}'
        )

    return credits
