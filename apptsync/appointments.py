"""Reads and writes against one user's appointments sheet."""

from __future__ import annotations

from typing import Iterable, List, Optional

import pandas as pd

import config
from . import sheets
from .logging_utils import info, warn
from .models import APPOINTMENT_COLUMNS, STATUS_COLUMN, Appointment, AppointmentStatus, parse_status

FIRST_DATA_ROW = 2


def list_appointments(client, sheet: str, tab: str = config.USER_SHEET_TAB) -> List[Appointment]:
    sheet_id = sheets.require_spreadsheet_id(sheet, "appointments")
    rows = client.read_range(sheet_id, f"{tab}!A{FIRST_DATA_ROW}:G")
    out = []
    for i, r in enumerate(rows, start=FIRST_DATA_ROW):
        if not any((c or "").strip() for c in r):
            continue
        try:
            out.append(Appointment.from_row(r, row_index=i))
        except ValueError as e:
            warn(f"Skipping row {i}: {e}")
    return out


def filter_by_status(appointments: Iterable[Appointment], status: Optional[str]) -> List[Appointment]:
    if not status:
        return list(appointments)
    wanted = parse_status(status)
    return [a for a in appointments if a.status == wanted]


def update_status(
    client,
    sheet: str,
    row_index: int,
    status: str,
    tab: str = config.USER_SHEET_TAB,
) -> AppointmentStatus:
    if row_index < FIRST_DATA_ROW:
        raise ValueError(f"Row {row_index} is not an appointment row")
    new_status = parse_status(status)
    sheet_id = sheets.require_spreadsheet_id(sheet, "appointments")
    client.write_range(sheet_id, f"{tab}!{STATUS_COLUMN}{row_index}", [[new_status.value]])
    info(f"Row {row_index} status -> {new_status.value}")
    return new_status


def to_frame(appointments: Iterable[Appointment]) -> pd.DataFrame:
    rows = [[a.row_index] + a.to_row() for a in appointments]
    return pd.DataFrame(rows, columns=["Row"] + APPOINTMENT_COLUMNS, dtype=object).fillna("")


def export_appointments(appointments: Iterable[Appointment], path: str) -> int:
    df = to_frame(appointments)
    df.to_csv(path, index=False)
    info(f"Exported {len(df)} appointments -> {path}")
    return len(df)


__all__ = [
    "export_appointments",
    "filter_by_status",
    "list_appointments",
    "to_frame",
    "update_status",
]
