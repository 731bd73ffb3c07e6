"""Command-line dashboard over the users sheet and a user's appointments sheet."""

import argparse
import getpass
import sys

from apptsync import appointments, directory, logging_utils
from apptsync.logging_utils import error, ok, warn
from apptsync.sheets import ConfigError, SheetsError, open_client
from apptsync.storage import JsonFileStore, SessionStore

import config


def _password(args) -> str:
    return args.password if args.password is not None else getpass.getpass("Password: ")


def _require_user(session: SessionStore):
    user = session.load()
    if user is None:
        raise ConfigError("Not logged in. Run: python dashboard.py login EMAIL")
    return user


def cmd_login(args, client, session: SessionStore) -> int:
    user = directory.authenticate(client, args.email, _password(args), config.USERS_SHEET_ID, config.USERS_TAB)
    if user is None:
        warn("Invalid email or password")
        return 1
    session.save(user)
    ok(f"Logged in as {user.email}")
    return 0


def cmd_register(args, client, session: SessionStore) -> int:
    try:
        user = directory.register(
            client, args.email, _password(args), args.sheet, config.USERS_SHEET_ID, config.USERS_TAB
        )
    except directory.AlreadyRegistered as e:
        warn(str(e))
        return 1
    session.save(user)
    ok(f"Registered and logged in as {user.email}")
    return 0


def cmd_logout(args, client, session: SessionStore) -> int:
    session.clear()
    ok("Logged out")
    return 0


def cmd_whoami(args, client, session: SessionStore) -> int:
    user = _require_user(session)
    print(f"{user.email}\t{user.appointments_sheet}")
    return 0


def cmd_list(args, client, session: SessionStore) -> int:
    user = _require_user(session)
    items = appointments.list_appointments(client, user.appointments_sheet, config.USER_SHEET_TAB)
    for a in appointments.filter_by_status(items, args.status):
        print(
            f"{a.row_index:>4}  {a.date:<10} {a.start_time:<5}  {a.status.value:<9}  "
            f"{a.patient_name} <{a.email}> {a.phone_number}"
        )
    return 0


def cmd_set_status(args, client, session: SessionStore) -> int:
    user = _require_user(session)
    appointments.update_status(client, user.appointments_sheet, args.row, args.status, config.USER_SHEET_TAB)
    return 0


def cmd_export(args, client, session: SessionStore) -> int:
    user = _require_user(session)
    items = appointments.list_appointments(client, user.appointments_sheet, config.USER_SHEET_TAB)
    appointments.export_appointments(appointments.filter_by_status(items, args.status), args.path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Healthcare appointment dashboard (sheets-backed)")
    p.add_argument("--state-file", default=config.STATE_FILE)
    p.add_argument("--verbose", action="store_true", help="Enable DEBUG logs")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("login", help="Log in with a users-sheet account")
    s.add_argument("email")
    s.add_argument("--password")
    s.set_defaults(func=cmd_login)

    s = sub.add_parser("register", help="Add a row to the users sheet")
    s.add_argument("email")
    s.add_argument("--password")
    s.add_argument("--sheet", help="Appointments spreadsheet id or URL for this user")
    s.set_defaults(func=cmd_register)

    s = sub.add_parser("logout")
    s.set_defaults(func=cmd_logout)

    s = sub.add_parser("whoami")
    s.set_defaults(func=cmd_whoami)

    s = sub.add_parser("list", help="List your appointments")
    s.add_argument("--status", choices=["scheduled", "completed", "cancelled"])
    s.set_defaults(func=cmd_list)

    s = sub.add_parser("set-status", help="Change the status of one appointment row")
    s.add_argument("row", type=int)
    s.add_argument("status", choices=["scheduled", "completed", "cancelled"])
    s.set_defaults(func=cmd_set_status)

    s = sub.add_parser("export", help="Write your appointments to CSV")
    s.add_argument("path")
    s.add_argument("--status", choices=["scheduled", "completed", "cancelled"])
    s.set_defaults(func=cmd_export)
    return p


def main(argv=None, client=None) -> int:
    args = build_parser().parse_args(argv)
    logging_utils.setup("DEBUG" if args.verbose else None)
    session = SessionStore(JsonFileStore(args.state_file))
    try:
        if args.func in (cmd_login, cmd_register) and not config.USERS_SHEET_ID:
            raise ConfigError("USERS_SHEET_ID is not set")
        if args.func in (cmd_logout, cmd_whoami):
            return args.func(args, client, session)
        return args.func(args, client or open_client(), session)
    except (ConfigError, SheetsError, ValueError) as e:
        error(str(e))
        return 2 if isinstance(e, ConfigError) else 1


if __name__ == "__main__":  # pragma: no cover - manual execution
    sys.exit(main())
