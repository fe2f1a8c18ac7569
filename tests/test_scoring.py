"""Unit tests for points calculation."""

import pytest

from colegas.exceptions import ComputationError
from colegas.models import PlayerRole
from colegas.rules import ScoringRuleTable
from colegas.schemas import ScoringRule, StatCounts
from colegas.scoring import (
    STAT_GETTERS,
    PointsCalculator,
    calculate_points,
    calculate_points_for_role,
    get_stat_value,
)
from colegas.constants import STAT_NAMES


def rule(stat_name, points, role=PlayerRole.FIELD, rule_id=1):
    return ScoringRule(id=rule_id, stat_name=stat_name, points_per_unit=points, role=role)


class StaticRules:
    """Rule source backed by a fixed list."""

    def __init__(self, rules):
        self.rules = rules

    def rules_for_role(self, role):
        return [r for r in self.rules if r.role == role]


class TestCalculatePoints:
    """Tests for applying rules to a stats snapshot."""

    def test_goals_and_assists(self):
        """Test 2 goals at 5 and 1 assist at 3 = 13, yellow card ignored."""
        stats = StatCounts(goals_scored=2, assists=1, yellow_cards=1)
        rules = [rule('goals_scored', 5.0), rule('assists', 3.0, rule_id=2)]
        points, breakdown = calculate_points(stats, rules)
        assert points == 13.0
        assert breakdown == {'goals_scored': 10.0, 'assists': 3.0}

    def test_no_rules_scores_zero(self):
        """Test an empty rule set scores 0.0."""
        stats = StatCounts(goals_scored=4, saves_as_keeper=9)
        points, breakdown = calculate_points(stats, [])
        assert points == 0.0
        assert breakdown == {}

    def test_unknown_stats_score_zero(self):
        """Test rules naming unrecognized stats contribute nothing."""
        stats = StatCounts(goals_scored=3, assists=2, minutes_played=90)
        rules = [rule('goalsScored', 5.0), rule('bicycle_kicks', 10.0, rule_id=2)]
        points, breakdown = calculate_points(stats, rules)
        assert points == 0.0
        assert breakdown == {}

    def test_negative_weight_decreases_total(self):
        """Test a penalty rule subtracts per unit."""
        stats = StatCounts(goals_scored=1, red_cards=1)
        rules = [rule('goals_scored', 5.0), rule('red_cards', -3.0, rule_id=2)]
        points, breakdown = calculate_points(stats, rules)
        assert points == 2.0
        assert breakdown['red_cards'] == -3.0

    def test_duplicate_rules_add_up(self):
        """Test two rules for the same stat both apply."""
        stats = StatCounts(assists=2)
        rules = [rule('assists', 3.0), rule('assists', 1.0, rule_id=2)]
        points, breakdown = calculate_points(stats, rules)
        assert points == 8.0
        assert breakdown == {'assists': 8.0}

    def test_zero_count_not_in_breakdown(self):
        """Test stats with no events are left out of the breakdown."""
        stats = StatCounts(goals_scored=1)
        rules = [rule('goals_scored', 5.0), rule('assists', 3.0, rule_id=2)]
        _, breakdown = calculate_points(stats, rules)
        assert 'assists' not in breakdown

    def test_deterministic(self):
        """Test the same input always yields the same output."""
        stats = StatCounts(goals_scored=2, fouls_committed=3, fouls_received=1)
        rules = [
            rule('goals_scored', 5.0),
            rule('fouls_committed', -0.5, rule_id=2),
            rule('fouls_received', 0.5, rule_id=3),
        ]
        assert calculate_points(stats, rules) == calculate_points(stats, rules)

    def test_non_finite_total_raises(self):
        """Test an infinite weight is reported as a computation error."""
        stats = StatCounts(goals_scored=1)
        with pytest.raises(ComputationError):
            calculate_points(stats, [rule('goals_scored', float('inf'))])


class TestStatGetters:
    """Tests for the stat name lookup table."""

    def test_every_stat_has_a_getter(self):
        assert set(STAT_GETTERS) == set(STAT_NAMES)

    def test_getter_reads_matching_field(self):
        stats = StatCounts(saves_as_keeper=7, passes_completed=31)
        assert get_stat_value(stats, 'saves_as_keeper') == 7
        assert get_stat_value(stats, 'passes_completed') == 31

    def test_unknown_name_is_zero(self):
        stats = StatCounts(goals_scored=3)
        assert get_stat_value(stats, 'GOALS_SCORED') == 0
        assert get_stat_value(stats, '') == 0


class TestPointsCalculator:
    """Tests for role-aware scoring against a rule table."""

    def test_goalkeeper_without_rules_scores_zero(self):
        """Test FIELD rules don't leak into GOALKEEPER scoring."""
        calculator = PointsCalculator(StaticRules([
            rule('goals_scored', 5.0),
            rule('assists', 3.0, rule_id=2),
        ]))
        stats = StatCounts(goals_scored=2, assists=1, yellow_cards=1)
        assert calculator.calculate(stats, PlayerRole.FIELD) == 13.0
        assert calculator.calculate(stats, PlayerRole.GOALKEEPER) == 0.0

    def test_calculate_both(self):
        calculator = PointsCalculator(StaticRules([
            rule('goals_scored', 5.0),
            rule('saves_as_keeper', 0.5, PlayerRole.GOALKEEPER, rule_id=2),
        ]))
        stats = StatCounts(goals_scored=1, saves_as_keeper=4)
        assert calculator.calculate_both(stats) == (5.0, 2.0)

    def test_calculate_points_for_role(self):
        """Test the functional form matches the 13.0 / 0.0 example."""
        table = StaticRules([rule('goals_scored', 5.0), rule('assists', 3.0, rule_id=2)])
        stats = StatCounts(goals_scored=2, assists=1, yellow_cards=1)
        assert calculate_points_for_role(stats, PlayerRole.FIELD, table) == 13.0
        assert calculate_points_for_role(stats, PlayerRole.GOALKEEPER, table) == 0.0

    def test_accepts_role_string(self):
        calculator = PointsCalculator(StaticRules([rule('assists', 3.0)]))
        assert calculator.calculate(StatCounts(assists=1), 'FIELD') == 3.0

    def test_default_rules_from_store(self, seeded_store):
        """Test the seeded rule set scores both roles."""
        calculator = PointsCalculator(ScoringRuleTable(seeded_store))
        stats = StatCounts(goals_scored=1, assists=1, saves_as_keeper=4, yellow_cards=1)
        field, keeper = calculator.calculate_both(stats)
        assert field == 5.0 + 3.0 - 1.0
        assert keeper == 2.0 - 1.0
