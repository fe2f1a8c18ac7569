"""Spreadsheet export of a league's scoreboard and rosters.

The workbook has two sheets:
- Scoreboard: rank, user and cumulative points
- Rosters: one column per member, one row per roster slot

An existing workbook is updated in place so other sheets survive.
"""

import logging
from pathlib import Path

import openpyxl
from openpyxl.styles import Font

from .leagues import get_scoreboard
from .models import PlayerRole
from .store import LeagueStore, find_league, find_player, find_user, find_user_slots

logger = logging.getLogger('colegas.excel_export')


def format_slot_for_excel(player_name: str, role: PlayerRole) -> str:
    """Format a roster slot as 'Name' or '[GK] Name'."""
    if role == PlayerRole.GOALKEEPER:
        return f'[GK] {player_name}'
    return player_name


def _sheet(wb, name):
    if name in wb.sheetnames:
        ws = wb[name]
        ws.delete_rows(1, ws.max_row)
        return ws
    return wb.create_sheet(name)


def export_league_workbook(store: LeagueStore, league_id: int, excel_path: str | Path) -> Path:
    """
    Write a league's scoreboard and rosters to an Excel file.

    Args:
        store: League store
        league_id: League to export
        excel_path: Path to Excel file (created if doesn't exist)

    Returns:
        Path of the written workbook
    """
    db = store.snapshot()
    league = find_league(db, league_id)
    scoreboard = get_scoreboard(store, league_id)

    excel_path = Path(excel_path)
    if excel_path.exists():
        wb = openpyxl.load_workbook(str(excel_path))
    else:
        wb = openpyxl.Workbook()
        wb.remove(wb.active)

    ws = _sheet(wb, 'Scoreboard')
    ws.cell(row=1, column=1, value=league.name).font = Font(bold=True)
    for col_idx, header in enumerate(('Rank', 'User', 'Points'), start=1):
        ws.cell(row=2, column=col_idx, value=header).font = Font(bold=True)

    for rank, entry in enumerate(scoreboard, start=1):
        row = rank + 2
        ws.cell(row=row, column=1, value=rank)
        ws.cell(row=row, column=2, value=entry.username)
        ws.cell(row=row, column=3, value=round(entry.total_points, 2))

    ws = _sheet(wb, 'Rosters')
    ws.cell(row=1, column=1, value='Slot')
    for slot_idx in range(league.team_size):
        ws.cell(row=slot_idx + 2, column=1, value=f'Slot {slot_idx + 1}')

    for col_idx, entry in enumerate(scoreboard, start=2):
        user = find_user(db, entry.user_id)
        ws.cell(row=1, column=col_idx, value=user.username).font = Font(bold=True)
        slots = sorted(
            find_user_slots(db, user.id, league_id),
            key=lambda s: (s.role != PlayerRole.GOALKEEPER, s.id),
        )
        for slot_idx, slot in enumerate(slots):
            player = find_player(db, slot.player_id)
            ws.cell(
                row=slot_idx + 2,
                column=col_idx,
                value=format_slot_for_excel(player.name, slot.role),
            )

    excel_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(excel_path))
    wb.close()

    logger.info(f'League {league_id} exported to {excel_path}')
    return excel_path
