"""Fan new master-sheet appointments out to per-user sheets.

One run reads every master row after the stored watermark, resolves the row's
email against the users sheet and appends the row to that user's own
spreadsheet. The watermark moves past each row whatever happened to it, so a
row whose append failed is not picked up again.
"""

from __future__ import annotations

import threading
from typing import Optional

import config
from . import sheets
from .directory import load_directory
from .fanout import append_appointment
from .logging_utils import debug, error, info, warn
from .models import SyncStats, copy_row
from .scanner import scan_new_rows
from .storage import JsonFileStore, WatermarkStore


class SyncJob:
    def __init__(
        self,
        client,
        watermark: WatermarkStore,
        master_sheet: str = config.MAIN_APPOINTMENTS_SHEET_ID,
        users_sheet: str = config.USERS_SHEET_ID,
        master_tab: str = config.APPOINTMENTS_TAB,
        users_tab: str = config.USERS_TAB,
        user_tab: str = config.USER_SHEET_TAB,
    ):
        self.client = client
        self.watermark = watermark
        self.master_sheet = master_sheet
        self.users_sheet = users_sheet
        self.master_tab = master_tab
        self.users_tab = users_tab
        self.user_tab = user_tab
        self._lock = threading.Lock()

    def run(self) -> SyncStats:
        """Process every new master row once.

        Scanner and directory failures propagate; per-row failures are counted
        in ``errors``.
        """
        with self._lock:
            return self._run()

    def _run(self) -> SyncStats:
        stats = SyncStats()
        start = self.watermark.get()
        rows = scan_new_rows(self.client, self.master_sheet, self.master_tab, start)
        if not rows:
            debug(f"No new appointments after row {start}.")
            return stats

        directory = load_directory(self.client, self.users_sheet, self.users_tab)

        for row in rows:
            stats.processed += 1
            try:
                values = copy_row(row.values)
                email = values[1]
                target = directory.get(email)
                if not target:
                    warn(f"No user found for email: {email} (row {row.row_index})")
                    stats.errors += 1
                else:
                    written = append_appointment(self.client, target, values, self.user_tab)
                    stats.synced += 1
                    info(f"Synced appointment for {email} to spreadsheet {target} (row {written})")
            except (sheets.SheetsError, ValueError) as e:
                error(f"Error syncing master row {row.row_index}: {e}")
                stats.errors += 1
            self.watermark.advance(row.row_index)

        return stats


def build_job(client=None, state_file: str = config.STATE_FILE) -> SyncJob:
    """Job wired from ``config``: configured client, JSON watermark file."""

    if not config.MAIN_APPOINTMENTS_SHEET_ID:
        raise sheets.ConfigError("MAIN_APPOINTMENTS_SHEET_ID is not set")
    if not config.USERS_SHEET_ID:
        raise sheets.ConfigError("USERS_SHEET_ID is not set")
    client = client or sheets.open_client()
    return SyncJob(
        client,
        WatermarkStore(JsonFileStore(state_file)),
        master_sheet=config.MAIN_APPOINTMENTS_SHEET_ID,
        users_sheet=config.USERS_SHEET_ID,
        master_tab=config.APPOINTMENTS_TAB,
        users_tab=config.USERS_TAB,
        user_tab=config.USER_SHEET_TAB,
    )


def sync_appointments(job: Optional[SyncJob] = None) -> SyncStats:
    return (job or build_job()).run()


__all__ = ["SyncJob", "build_job", "sync_appointments"]
