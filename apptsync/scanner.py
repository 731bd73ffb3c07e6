from __future__ import annotations

from dataclasses import dataclass
from typing import List

import config
from . import sheets
from .logging_utils import debug


@dataclass(frozen=True)
class ScannedRow:
    row_index: int
    values: List[str]


def _has_name_and_email(values: List[str]) -> bool:
    name = values[0] if len(values) > 0 else ""
    email = values[1] if len(values) > 1 else ""
    return bool((name or "").strip() and (email or "").strip())


def scan_new_rows(
    client,
    master_sheet: str = config.MAIN_APPOINTMENTS_SHEET_ID,
    tab: str = config.APPOINTMENTS_TAB,
    watermark: int = 1,
) -> List[ScannedRow]:
    """Master rows after ``watermark`` that carry a patient name and an email."""

    sheet_id = sheets.require_spreadsheet_id(master_sheet, "main appointments")
    start = watermark + 1
    rows = client.read_range(sheet_id, f"{tab}!A{start}:G")
    out = [
        ScannedRow(row_index=start + i, values=list(r))
        for i, r in enumerate(rows)
        if _has_name_and_email(r)
    ]
    debug(f"Scanned {len(rows)} rows from row {start}; {len(out)} usable.")
    return out


__all__ = ["ScannedRow", "scan_new_rows"]
