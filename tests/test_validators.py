"""Tests for roster and match-points validators."""

from colegas.models import PlayerMatchStatsResult, PlayerRole
from colegas.schemas import Player, RosterSlotInput
from colegas.validators import validate_match_points, validate_roster


def make_players():
    return {
        1: Player(id=1, name='Keeper', league_id=1),
        2: Player(id=2, name='Striker', league_id=1),
        3: Player(id=3, name='Winger', league_id=1),
        4: Player(id=4, name='Stranger', league_id=2),
    }


def slot(player_id, role=PlayerRole.FIELD):
    return RosterSlotInput(player_id=player_id, role=role)


class TestValidateRoster:
    """Tests for roster validation."""

    def test_valid_roster(self):
        slots = [slot(1, PlayerRole.GOALKEEPER), slot(2), slot(3)]
        assert validate_roster(slots, 3, 1, make_players()) == []

    def test_wrong_size(self):
        slots = [slot(1, PlayerRole.GOALKEEPER), slot(2)]
        errors = validate_roster(slots, 3, 1, make_players())
        assert errors == ['Roster must have 3 players, got 2']

    def test_no_goalkeeper(self):
        slots = [slot(1), slot(2), slot(3)]
        errors = validate_roster(slots, 3, 1, make_players())
        assert any('goalkeeper' in e for e in errors)

    def test_player_from_other_league(self):
        slots = [slot(1, PlayerRole.GOALKEEPER), slot(2), slot(4)]
        errors = validate_roster(slots, 3, 1, make_players())
        assert errors == ['Player 4 does not belong to league 1']

    def test_missing_player(self):
        slots = [slot(1, PlayerRole.GOALKEEPER), slot(2), slot(99)]
        errors = validate_roster(slots, 3, 1, make_players())
        assert errors == ['Player 99 not found']

    def test_duplicates(self):
        slots = [slot(1, PlayerRole.GOALKEEPER), slot(2), slot(2)]
        errors = validate_roster(slots, 3, 1, make_players())
        assert errors == ['Roster has duplicate players: 2']

    def test_reports_every_problem(self):
        slots = [slot(2), slot(2)]
        errors = validate_roster(slots, 3, 1, make_players())
        assert len(errors) == 3


class TestValidateMatchPoints:
    """Tests for match points sanity checks."""

    def test_reasonable_result(self):
        result = PlayerMatchStatsResult(
            stats_id=1, match_id=1, player_id=1,
            total_field_points=13.0,
            total_goalkeeper_points=0.0,
            field_breakdown={'goals_scored': 10.0, 'assists': 3.0},
        )
        assert validate_match_points('Striker', result) == []

    def test_unusually_high(self):
        result = PlayerMatchStatsResult(
            stats_id=1, match_id=1, player_id=1,
            total_field_points=75.0,
            field_breakdown={'goals_scored': 75.0},
        )
        warnings = validate_match_points('Striker', result)
        assert len(warnings) == 1
        assert 'unusually high' in warnings[0]

    def test_unusually_low(self):
        result = PlayerMatchStatsResult(
            stats_id=1, match_id=1, player_id=1,
            total_goalkeeper_points=-40.0,
            goalkeeper_breakdown={'goals_conceded_as_keeper': -40.0},
        )
        warnings = validate_match_points('Keeper', result)
        assert len(warnings) == 1
        assert 'goalkeeper' in warnings[0]

    def test_breakdown_mismatch(self):
        result = PlayerMatchStatsResult(
            stats_id=1, match_id=1, player_id=1,
            total_field_points=10.0,
            field_breakdown={'goals_scored': 5.0},
        )
        warnings = validate_match_points('Striker', result)
        assert any('breakdown sum' in w for w in warnings)
