"""Validation functions for rosters and scoring results."""

from .constants import (
    GOALKEEPERS_PER_ROSTER,
    MAX_REASONABLE_MATCH_POINTS,
    MIN_REASONABLE_MATCH_POINTS,
)
from .models import PlayerMatchStatsResult, PlayerRole
from .schemas import Player, RosterSlotInput


def validate_roster(
    slots: list[RosterSlotInput],
    team_size: int,
    league_id: int,
    players_by_id: dict[int, Player],
) -> list[str]:
    """
    Validate that a submitted roster complies with league rules.

    Checks:
    - Roster size equals the league's team size
    - Exactly one goalkeeper
    - Every player exists and belongs to the league
    - No player appears twice

    Args:
        slots: Submitted (player, role) pairs
        team_size: League team size
        league_id: League the roster is for
        players_by_id: Known players keyed by id

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    if len(slots) != team_size:
        errors.append(f'Roster must have {team_size} players, got {len(slots)}')

    keepers = sum(1 for s in slots if s.role == PlayerRole.GOALKEEPER)
    if keepers != GOALKEEPERS_PER_ROSTER:
        errors.append(f'Roster must have exactly {GOALKEEPERS_PER_ROSTER} goalkeeper, got {keepers}')

    seen = set()
    duplicates = set()
    for slot in slots:
        player = players_by_id.get(slot.player_id)
        if player is None:
            errors.append(f'Player {slot.player_id} not found')
        elif player.league_id != league_id:
            errors.append(f'Player {slot.player_id} does not belong to league {league_id}')

        if slot.player_id in seen:
            duplicates.add(slot.player_id)
        seen.add(slot.player_id)

    if duplicates:
        errors.append(
            f'Roster has duplicate players: {", ".join(str(d) for d in sorted(duplicates))}'
        )

    return errors


def validate_match_points(player_name: str, result: PlayerMatchStatsResult) -> list[str]:
    """
    Check that a player's match totals are reasonable and consistent.

    Sanity checks:
    - Each role total within the reasonable range
    - Breakdown sums match the totals (within rounding)

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    totals = (
        ('field', result.total_field_points, result.field_breakdown),
        ('goalkeeper', result.total_goalkeeper_points, result.goalkeeper_breakdown),
    )
    for label, total, breakdown in totals:
        if total > MAX_REASONABLE_MATCH_POINTS:
            warnings.append(
                f'{player_name} scored {total:.1f} {label} pts (unusually high - check the stats)'
            )
        elif total < MIN_REASONABLE_MATCH_POINTS:
            warnings.append(
                f'{player_name} scored {total:.1f} {label} pts (unusually low - check the stats)'
            )

        breakdown_sum = sum(breakdown.values())
        if abs(breakdown_sum - total) > 0.01:
            warnings.append(
                f'{player_name} {label} breakdown sum ({breakdown_sum:.2f}) != total ({total:.2f})'
            )

    return warnings
