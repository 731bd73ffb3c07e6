"""Users sheet: email -> target sheet lookup, login and registration.

Layout of the users tab (header on row 1):

    A: email    B: password (plaintext)    C: appointments spreadsheet id or URL
"""

from __future__ import annotations

import time
from typing import Dict, List, Optional

import config
from . import sheets
from .logging_utils import debug, info
from .models import User, UserEntry, normalize_email


class AlreadyRegistered(Exception):
    """Registration for an email that already has a row in the users sheet."""


def load_users(client, users_sheet: str = config.USERS_SHEET_ID, tab: str = config.USERS_TAB) -> List[UserEntry]:
    sheet_id = sheets.require_spreadsheet_id(users_sheet, "users")
    rows = client.read_range(sheet_id, f"{tab}!A2:C")
    return [UserEntry.from_row(r) for r in rows]


def load_directory(client, users_sheet: str = config.USERS_SHEET_ID, tab: str = config.USERS_TAB) -> Dict[str, str]:
    """Return ``normalized email -> target sheet`` for every complete user row.

    Later rows win when an email appears twice.
    """

    directory: Dict[str, str] = {}
    for entry in load_users(client, users_sheet, tab):
        if entry.email and entry.sheet:
            directory[normalize_email(entry.email)] = entry.sheet
    debug(f"Loaded {len(directory)} users from directory.")
    return directory


def authenticate(
    client,
    email: str,
    password: str,
    users_sheet: str = config.USERS_SHEET_ID,
    tab: str = config.USERS_TAB,
) -> Optional[User]:
    key = normalize_email(email)
    if not key:
        return None
    for entry in load_users(client, users_sheet, tab):
        if normalize_email(entry.email) == key and entry.password == password:
            return User(email=entry.email, appointments_sheet=entry.sheet)
    return None


def register(
    client,
    email: str,
    password: str,
    appointments_sheet: Optional[str] = None,
    users_sheet: str = config.USERS_SHEET_ID,
    tab: str = config.USERS_TAB,
) -> User:
    key = normalize_email(email)
    if not key:
        raise ValueError("Email is required")
    if not password:
        raise ValueError("Password is required")
    if any(normalize_email(e.email) == key for e in load_users(client, users_sheet, tab)):
        raise AlreadyRegistered("Email already registered. Please login instead.")

    # No sheet provisioning here; the placeholder has to be replaced by hand.
    sheet_ref = appointments_sheet or f"new-sheet-{int(time.time() * 1000)}"
    sheet_id = sheets.require_spreadsheet_id(users_sheet, "users")
    row = sheets.append_row(client, sheet_id, tab, [email.strip(), password, sheet_ref])
    info(f"Registered {email.strip()} on users row {row}.")
    return User(email=email.strip(), appointments_sheet=sheet_ref)


__all__ = ["AlreadyRegistered", "authenticate", "load_directory", "load_users", "register"]
