"""Shared fixtures: an isolated league database per test."""

import json
from datetime import date

import pytest

from colegas.auth import register_user
from colegas.config import clear_config_cache
from colegas.leagues import create_league, join_league
from colegas.matches import create_match
from colegas.players import create_player
from colegas.rosters import create_roster
from colegas.rules import seed_default_rules
from colegas.store import LeagueStore


@pytest.fixture(autouse=True)
def test_config(tmp_path, monkeypatch):
    """Point the config at a temp file with cheap password hashing."""
    config_path = tmp_path / 'league_config.json'
    config = {
        'data_path': str(tmp_path / 'league_db.json'),
        'join_code_length': 4,
        'default_player_image': 'https://example.com/default-player.jpg',
        'placeholder_player_name': 'Empty Slot',
        'placeholder_player_image': 'https://example.com/placeholder-image.png',
        'log_dir': str(tmp_path / 'logs'),
        'password_iterations': 1000,
    }
    with open(config_path, 'w') as f:
        json.dump(config, f)

    monkeypatch.setenv('COLEGAS_CONFIG', str(config_path))
    clear_config_cache()
    yield config
    clear_config_cache()


@pytest.fixture
def store(tmp_path):
    """Empty league store backed by a temp file."""
    return LeagueStore(tmp_path / 'league_db.json')


@pytest.fixture
def seeded_store(store):
    """Store with the default scoring rules installed."""
    with store.transaction() as db:
        seed_default_rules(db)
    return store


def make_user(store, username):
    return register_user(
        store,
        {'username': username, 'email': f'{username}@example.com', 'password': 'secret123'},
    )


@pytest.fixture
def league_setup(seeded_store):
    """
    A three-a-side league run by alice with bob as a participant.

    Players: Keeper, Striker, Winger, Defender. Alice fields Keeper in goal
    with Striker and Winger; bob puts Striker in goal with Winger and
    Defender in the field.
    """
    store = seeded_store
    alice = make_user(store, 'alice')
    bob = make_user(store, 'bob')

    league = create_league(store, {'name': 'Colegas', 'team_size': 3}, alice.id)
    league_id = league['id']

    players = {
        name: create_player(store, league_id, {'name': name}, alice.id)
        for name in ('Keeper', 'Striker', 'Winger', 'Defender')
    }

    join_league(store, league['join_code'], bob.id)

    create_roster(store, league_id, {'players': [
        {'player_id': players['Keeper'].id, 'role': 'GOALKEEPER'},
        {'player_id': players['Striker'].id, 'role': 'FIELD'},
        {'player_id': players['Winger'].id, 'role': 'FIELD'},
    ]}, alice.id)
    create_roster(store, league_id, {'players': [
        {'player_id': players['Striker'].id, 'role': 'GOALKEEPER'},
        {'player_id': players['Winger'].id, 'role': 'FIELD'},
        {'player_id': players['Defender'].id, 'role': 'FIELD'},
    ]}, bob.id)

    match = create_match(store, {'league_id': league_id, 'match_date': date(2024, 9, 1)}, alice.id)

    return {
        'store': store,
        'alice': alice,
        'bob': bob,
        'league': league,
        'league_id': league_id,
        'players': players,
        'match': match,
    }
