"""Tests for league player management."""

import pytest

from colegas.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from colegas.players import (
    create_player,
    delete_player,
    get_placeholder_player,
    get_player,
    list_players,
    update_player,
    update_player_points,
)
from colegas.rosters import get_user_roster


class TestPlaceholder:
    def test_created_once(self, store):
        with store.transaction() as db:
            first = get_placeholder_player(db)
            second = get_placeholder_player(db)
        assert first.id == second.id
        assert first.is_placeholder
        assert first.league_id is None
        assert first.name == 'Empty Slot'


class TestPlayers:
    def test_default_image(self, league_setup):
        s = league_setup
        player = get_player(s['store'], s['league_id'], s['players']['Keeper'].id)
        assert player.image == 'https://example.com/default-player.jpg'
        assert player.total_points == 0

    def test_list_excludes_placeholder(self, league_setup):
        s = league_setup
        names = [p.name for p in list_players(s['store'], s['league_id'])]
        assert names == ['Keeper', 'Striker', 'Winger', 'Defender']

    def test_participant_cannot_create(self, league_setup):
        s = league_setup
        with pytest.raises(PermissionDeniedError):
            create_player(s['store'], s['league_id'], {'name': 'Sneaky'}, s['bob'].id)

    def test_blank_name_rejected(self, league_setup):
        s = league_setup
        with pytest.raises(ValidationError):
            create_player(s['store'], s['league_id'], {'name': ''}, s['alice'].id)

    def test_update_ignores_blank_fields(self, league_setup):
        s = league_setup
        player_id = s['players']['Winger'].id
        updated = update_player(
            s['store'], s['league_id'], player_id, {'name': 'Left Winger', 'image': '  '}, s['alice'].id
        )
        assert updated.name == 'Left Winger'
        assert updated.image == 'https://example.com/default-player.jpg'

    def test_update_points(self, league_setup):
        s = league_setup
        player_id = s['players']['Striker'].id
        update_player_points(s['store'], s['league_id'], player_id, 42, s['alice'].id)
        assert get_player(s['store'], s['league_id'], player_id).total_points == 42

    def test_player_from_other_league(self, league_setup):
        s = league_setup
        with pytest.raises(ValidationError):
            get_player(s['store'], s['league_id'] + 1, s['players']['Striker'].id)

    def test_missing_player(self, league_setup):
        s = league_setup
        with pytest.raises(NotFoundError):
            get_player(s['store'], s['league_id'], 999)


class TestDeletePlayer:
    def test_slots_get_placeholder(self, league_setup):
        s = league_setup
        striker = s['players']['Striker'].id
        delete_player(s['store'], s['league_id'], striker, s['alice'].id)

        bob_roster = get_user_roster(s['store'], s['league_id'], s['bob'].id)
        assert bob_roster[0]['is_placeholder']
        assert bob_roster[0]['role'] == 'GOALKEEPER'
        with pytest.raises(NotFoundError):
            get_player(s['store'], s['league_id'], striker)

    def test_participant_cannot_delete(self, league_setup):
        s = league_setup
        with pytest.raises(PermissionDeniedError):
            delete_player(s['store'], s['league_id'], s['players']['Striker'].id, s['bob'].id)
