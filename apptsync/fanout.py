from __future__ import annotations

from typing import List

import config
from . import sheets


def append_appointment(client, target_sheet: str, row: List[str], tab: str = config.USER_SHEET_TAB) -> int:
    """Append an appointment row to a user's sheet; returns the row written."""

    sheet_id = sheets.require_spreadsheet_id(target_sheet, "user")
    return sheets.append_row(client, sheet_id, tab, row)


__all__ = ["append_appointment"]
