"""Points calculation from match stats and role scoring rules."""

import math
from typing import Callable, Dict, Iterable, Protocol, Tuple

from .exceptions import ComputationError
from .models import PlayerRole
from .schemas import ScoringRule, StatCounts

# Every recognized statistic name and how to read it from a snapshot.
# Names missing from this table score 0.
STAT_GETTERS: Dict[str, Callable[[StatCounts], int]] = {
    'goals_scored': lambda s: s.goals_scored,
    'clear_misses': lambda s: s.clear_misses,
    'assists': lambda s: s.assists,
    'goals_conceded_as_keeper': lambda s: s.goals_conceded_as_keeper,
    'saves_as_keeper': lambda s: s.saves_as_keeper,
    'concessions': lambda s: s.concessions,
    'fouls_committed': lambda s: s.fouls_committed,
    'fouls_received': lambda s: s.fouls_received,
    'penalties_won': lambda s: s.penalties_won,
    'penalties_conceded': lambda s: s.penalties_conceded,
    'passes_completed': lambda s: s.passes_completed,
    'passes_failed': lambda s: s.passes_failed,
    'steals': lambda s: s.steals,
    'shots_on_target': lambda s: s.shots_on_target,
    'shots_off_target': lambda s: s.shots_off_target,
    'minutes_played': lambda s: s.minutes_played,
    'yellow_cards': lambda s: s.yellow_cards,
    'red_cards': lambda s: s.red_cards,
}


def get_stat_value(stats: StatCounts, stat_name: str) -> int:
    """Raw count for a recognized stat name, 0 for anything else."""
    getter = STAT_GETTERS.get(stat_name)
    if getter is None:
        return 0
    return getter(stats)


def calculate_points(stats: StatCounts, rules: Iterable[ScoringRule]) -> Tuple[float, Dict[str, float]]:
    """
    Apply a set of scoring rules to a stats snapshot.

    Scoring:
        - Each rule adds raw count * points_per_unit
        - Rules for the same stat add up
        - Rules naming an unrecognized stat add nothing
        - Negative counts are not rejected here and score negatively

    Args:
        stats: Counted events for one player in one match
        rules: Rules for a single role

    Returns:
        Tuple of (total points, breakdown by stat name)

    Raises:
        ComputationError: If the total is not a finite number
    """
    points = 0.0
    breakdown: Dict[str, float] = {}

    for rule in rules:
        value = get_stat_value(stats, rule.stat_name)
        contribution = value * rule.points_per_unit
        if contribution:
            breakdown[rule.stat_name] = breakdown.get(rule.stat_name, 0.0) + contribution
        points += contribution

    if not math.isfinite(points):
        raise ComputationError(f'Non-finite point total: {points}')

    return points, breakdown


class RuleSource(Protocol):
    def rules_for_role(self, role: PlayerRole) -> list[ScoringRule]: ...


def calculate_points_for_role(stats: StatCounts, role: PlayerRole, rule_table: RuleSource) -> float:
    """Total points a snapshot is worth under one role's rules (0.0 when it has none)."""
    points, _ = calculate_points(stats, rule_table.rules_for_role(PlayerRole(role)))
    return points


class PointsCalculator:
    """Scores stat snapshots against the rules of a rule table."""

    def __init__(self, rule_table: RuleSource):
        self.rule_table = rule_table

    def calculate(self, stats: StatCounts, role: PlayerRole) -> float:
        """Total points a snapshot is worth for a role."""
        return calculate_points_for_role(stats, role, self.rule_table)

    def calculate_both(self, stats: StatCounts) -> Tuple[float, float]:
        """(field points, goalkeeper points) for a snapshot."""
        return (
            self.calculate(stats, PlayerRole.FIELD),
            self.calculate(stats, PlayerRole.GOALKEEPER),
        )
