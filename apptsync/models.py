from __future__ import annotations

import enum
from dataclasses import dataclass, asdict
from typing import List, Optional


# Column order shared by the master sheet and every per-user sheet (A..G).
APPOINTMENT_COLUMNS = [
    "Patient Name",
    "Email",
    "Phone Number",
    "Report URL",
    "date",
    "start_time",
    "status",
]
STATUS_COLUMN = "G"


class AppointmentStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def parse_status(value: str) -> AppointmentStatus:
    """Blank means scheduled; anything unknown is a ``ValueError``."""

    s = (value or "").strip().lower()
    if not s:
        return AppointmentStatus.SCHEDULED
    try:
        return AppointmentStatus(s)
    except ValueError:
        raise ValueError(f"Unknown appointment status '{value}'") from None


def normalize_email(email: str) -> str:
    return (email or "").strip().casefold()


def _cell(row: List[str], i: int) -> str:
    return row[i] if i < len(row) and row[i] is not None else ""


def copy_row(row: List[str]) -> List[str]:
    """Master row as written to a user sheet.

    The email is normalized and a blank status becomes ``scheduled``; every
    other cell, status included, is copied as-is.
    """

    out = [_cell(row, i) for i in range(len(APPOINTMENT_COLUMNS))]
    out[1] = normalize_email(out[1])
    if not out[6].strip():
        out[6] = AppointmentStatus.SCHEDULED.value
    return out


@dataclass
class Appointment:
    """One appointment row. ``row_index`` is positional and may be ``None``."""

    patient_name: str
    email: str
    phone_number: str = ""
    report_url: str = ""
    date: str = ""
    start_time: str = ""
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    row_index: Optional[int] = None

    @classmethod
    def from_row(cls, row: List[str], row_index: Optional[int] = None) -> "Appointment":
        return cls(
            patient_name=_cell(row, 0),
            email=normalize_email(_cell(row, 1)),
            phone_number=_cell(row, 2),
            report_url=_cell(row, 3),
            date=_cell(row, 4),
            start_time=_cell(row, 5),
            status=parse_status(_cell(row, 6)),
            row_index=row_index,
        )

    def to_row(self) -> List[str]:
        return [
            self.patient_name,
            self.email,
            self.phone_number,
            self.report_url,
            self.date,
            self.start_time,
            self.status.value,
        ]


@dataclass(frozen=True)
class UserEntry:
    """Row of the users sheet. The password is stored in plaintext upstream."""

    email: str
    password: str
    sheet: str

    @classmethod
    def from_row(cls, row: List[str]) -> "UserEntry":
        return cls(
            email=_cell(row, 0).strip(),
            password=_cell(row, 1),
            sheet=_cell(row, 2).strip(),
        )


@dataclass
class User:
    """Logged-in user record kept in local storage."""

    email: str
    appointments_sheet: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(email=data["email"], appointments_sheet=data.get("appointments_sheet", ""))


@dataclass
class SyncStats:
    processed: int = 0
    synced: int = 0
    errors: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


__all__ = [
    "APPOINTMENT_COLUMNS",
    "STATUS_COLUMN",
    "Appointment",
    "AppointmentStatus",
    "copy_row",
    "SyncStats",
    "User",
    "UserEntry",
    "normalize_email",
    "parse_status",
]
