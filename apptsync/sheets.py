"""Range-level access to Google Sheets.

Two clients share one tiny contract, ``read_range`` / ``write_range``:

* :class:`RestSheetsClient` talks to the Sheets v4 ``values`` endpoint with a
  static API key.
* :class:`GspreadSheetsClient` goes through ``gspread`` with a service
  account, which is what writes to private sheets need.

Rows travel as ordered lists of strings in both directions.
"""

from __future__ import annotations

import os
import re
from typing import Dict, List, Optional

import gspread
import requests
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

import config
from .logging_utils import debug

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

_SHEET_URL_RE = re.compile(r"/spreadsheets/d/([a-zA-Z0-9-_]+)")


class SheetsError(Exception):
    """A read or write against the spreadsheet API failed."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ConfigError(Exception):
    """Credentials or sheet ids are missing from the configuration."""


def extract_spreadsheet_id(ref: str) -> Optional[str]:
    """Return the spreadsheet id from a bare id or a docs.google.com URL."""

    ref = (ref or "").strip()
    if not ref:
        return None
    if "/" not in ref:
        return ref
    m = _SHEET_URL_RE.search(ref)
    return m.group(1) if m else None


def require_spreadsheet_id(ref: str, what: str) -> str:
    sheet_id = extract_spreadsheet_id(ref)
    if not sheet_id:
        raise ValueError(f"Invalid {what} sheet ID format")
    return sheet_id


def column_letter(n: int) -> str:
    """1 -> A, 26 -> Z, 27 -> AA."""

    out = ""
    while n > 0:
        n, rem = divmod(n - 1, 26)
        out = chr(65 + rem) + out
    return out


# gspread lets transport and token-refresh failures through unwrapped.
_GSPREAD_FAILURES = (gspread.exceptions.GSpreadException, requests.RequestException, GoogleAuthError)


def _as_sheets_error(e: Exception) -> SheetsError:
    status = getattr(getattr(e, "response", None), "status_code", None)
    return SheetsError(str(e) or e.__class__.__name__, status)


def _stringify(rows) -> List[List[str]]:
    return [["" if v is None else str(v) for v in row] for row in rows]


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


class RestSheetsClient:
    """Sheets v4 ``values`` API over ``requests`` with an API key."""

    def __init__(
        self,
        api_key: str,
        base_url: str = config.SHEETS_API_BASE,
        timeout: float = config.HTTP_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        if not api_key:
            raise ConfigError("Google Sheets API key not configured")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, spreadsheet_id: str, a1_range: str) -> str:
        return f"{self.base_url}/{spreadsheet_id}/values/{a1_range}"

    def _check(self, r: requests.Response) -> None:
        if r.ok:
            return
        try:
            message = r.json().get("error", {}).get("message")
        except ValueError:
            message = None
        raise SheetsError(message or f"HTTP error! status: {r.status_code}", r.status_code)

    def read_range(self, spreadsheet_id: str, a1_range: str) -> List[List[str]]:
        debug(f"GET {spreadsheet_id} {a1_range}")
        try:
            r = self.session.get(
                self._url(spreadsheet_id, a1_range),
                params={"key": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SheetsError(f"Request for {a1_range} failed: {e}") from e
        self._check(r)
        return _stringify(r.json().get("values", []))

    def write_range(self, spreadsheet_id: str, a1_range: str, rows: List[List[str]]) -> None:
        debug(f"PUT {spreadsheet_id} {a1_range} ({len(rows)} rows)")
        try:
            r = self.session.put(
                self._url(spreadsheet_id, a1_range),
                params={"valueInputOption": "RAW", "key": self.api_key},
                json={"values": rows},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SheetsError(f"Write to {a1_range} failed: {e}") from e
        self._check(r)


class GspreadSheetsClient:
    """Same contract as :class:`RestSheetsClient`, authorized by a service account."""

    def __init__(self, credentials_file: str = config.SERVICE_ACCOUNT_FILE, gc: Optional[gspread.Client] = None):
        self.credentials_file = credentials_file
        self._gc = gc
        self._open: Dict[str, gspread.Spreadsheet] = {}

    def _client(self) -> gspread.Client:
        if self._gc is None:
            creds = Credentials.from_service_account_file(self.credentials_file, scopes=SCOPES)
            self._gc = gspread.authorize(creds)
        return self._gc

    def open_spreadsheet(self, spreadsheet_id: str) -> gspread.Spreadsheet:
        ss = self._open.get(spreadsheet_id)
        if ss is None:
            ss = self._client().open_by_key(spreadsheet_id)
            self._open[spreadsheet_id] = ss
        return ss

    def read_range(self, spreadsheet_id: str, a1_range: str) -> List[List[str]]:
        debug(f"values_get {spreadsheet_id} {a1_range}")
        try:
            data = self.open_spreadsheet(spreadsheet_id).values_get(a1_range)
        except _GSPREAD_FAILURES as e:
            raise _as_sheets_error(e) from e
        return _stringify(data.get("values", []))

    def write_range(self, spreadsheet_id: str, a1_range: str, rows: List[List[str]]) -> None:
        debug(f"values_update {spreadsheet_id} {a1_range} ({len(rows)} rows)")
        try:
            self.open_spreadsheet(spreadsheet_id).values_update(
                a1_range,
                params={"valueInputOption": "RAW"},
                body={"values": rows},
            )
        except _GSPREAD_FAILURES as e:
            raise _as_sheets_error(e) from e


def open_client(
    credentials_file: str = config.SERVICE_ACCOUNT_FILE,
    api_key: str = config.GOOGLE_SHEETS_API_KEY,
):
    """Prefer the service account when its file exists, else fall back to the API key."""

    if credentials_file and os.path.exists(credentials_file):
        return GspreadSheetsClient(credentials_file)
    if api_key:
        return RestSheetsClient(api_key)
    raise ConfigError(
        "No Google credentials: set SERVICE_ACCOUNT_FILE to a service-account JSON "
        "or GOOGLE_SHEETS_API_KEY"
    )


# ---------------------------------------------------------------------------
# Row helpers
# ---------------------------------------------------------------------------


def next_free_row(client, spreadsheet_id: str, tab: str) -> int:
    """First row after the last non-empty cell of column A."""

    return len(client.read_range(spreadsheet_id, f"{tab}!A:A")) + 1


def append_row(client, spreadsheet_id: str, tab: str, row: List[str]) -> int:
    """Write ``row`` below the existing data and return its row index.

    Reads column A first, so two writers racing on the same tab can pick the
    same row.
    """

    n = next_free_row(client, spreadsheet_id, tab)
    last_col = column_letter(max(len(row), 1))
    client.write_range(spreadsheet_id, f"{tab}!A{n}:{last_col}{n}", [list(row)])
    return n


__all__ = [
    "ConfigError",
    "GspreadSheetsClient",
    "RestSheetsClient",
    "SheetsError",
    "append_row",
    "column_letter",
    "extract_spreadsheet_id",
    "next_free_row",
    "open_client",
    "require_spreadsheet_id",
]
