#!/usr/bin/env python3
"""
Colegas league management CLI

Maintenance tasks run against the league database file.

Usage:
    python manage.py init
    python manage.py stats --match 7 --player 3 --file stats/matchday_7_player_3.json
    python manage.py scoreboard --league 1
    python manage.py export --league 1 --output exports/league_1.xlsx
"""

import argparse
import json
import sys
from pathlib import Path

from colegas import (
    ColegasError,
    LeagueStore,
    export_league_workbook,
    get_scoreboard,
    update_player_match_stats,
)
from colegas.config import get_config
from colegas.logging_config import setup_logging
from colegas.players import get_placeholder_player
from colegas.rules import seed_default_rules


def cmd_init(store: LeagueStore, args) -> int:
    with store.transaction() as db:
        created = seed_default_rules(db)
        placeholder = get_placeholder_player(db)

    if created:
        print(f"Seeded {created} default scoring rules")
    else:
        print("Scoring rules already present, left untouched")
    print(f"Placeholder player: {placeholder.name} (id={placeholder.id})")
    print(f"Database: {store.path}")
    return 0


def cmd_stats(store: LeagueStore, args) -> int:
    stats_path = Path(args.file)
    if not stats_path.exists():
        print(f"❌ Stats file not found: {stats_path}")
        return 1

    try:
        with open(stats_path, encoding="utf-8") as f:
            raw_stats = json.load(f)
    except json.JSONDecodeError as e:
        print(f"❌ Invalid stats JSON in {stats_path}: {e.msg} (line {e.lineno})")
        return 1

    result = update_player_match_stats(store, args.match, args.player, raw_stats)

    print(f"Stats recorded for player {args.player} in match {args.match}")
    print(f"  Field:      {result.total_field_points:.1f} pts")
    print(f"  Goalkeeper: {result.total_goalkeeper_points:.1f} pts")
    print(f"  Roster slots credited: {result.credited_users}")
    return 0


def cmd_scoreboard(store: LeagueStore, args) -> int:
    scoreboard = get_scoreboard(store, args.league)

    print("\n" + "=" * 60)
    print("SCOREBOARD")
    print("=" * 60)

    if not scoreboard:
        print("  No members yet")
    for rank, entry in enumerate(scoreboard, 1):
        print(f"  {rank}. {entry.username}: {entry.total_points:.1f} pts")
    return 0


def cmd_export(store: LeagueStore, args) -> int:
    output = Path(args.output) if args.output else Path("exports") / f"league_{args.league}.xlsx"
    path = export_league_workbook(store, args.league, output)
    print(f"League exported: {path}")
    return 0


COMMANDS = {
    "init": cmd_init,
    "stats": cmd_stats,
    "scoreboard": cmd_scoreboard,
    "export": cmd_export,
}


def main(argv=None):
    parser = argparse.ArgumentParser(description="Colegas fantasy league management")
    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="League database file (default: data_path from config)",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log to the log file, not stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init", help="Seed default scoring rules and the placeholder player")

    stats_parser = subparsers.add_parser("stats", help="Record a player's stats for a match")
    stats_parser.add_argument("--match", type=int, required=True, help="Match id")
    stats_parser.add_argument("--player", type=int, required=True, help="Player id")
    stats_parser.add_argument("--file", type=str, required=True, help="JSON file of stat counts")

    scoreboard_parser = subparsers.add_parser("scoreboard", help="Print a league's scoreboard")
    scoreboard_parser.add_argument("--league", type=int, required=True, help="League id")

    export_parser = subparsers.add_parser("export", help="Export a league to Excel")
    export_parser.add_argument("--league", type=int, required=True, help="League id")
    export_parser.add_argument("--output", type=str, default=None, help="Output .xlsx path")

    args = parser.parse_args(argv)

    setup_logging(Path(get_config().log_dir), args.command, quiet=args.quiet)
    store = LeagueStore(args.db)

    try:
        return COMMANDS[args.command](store, args)
    except ColegasError as e:
        print(f"❌ {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
