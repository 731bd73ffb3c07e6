"""Copy new master-sheet appointments into each user's own spreadsheet.

    python appointment_sync.py --once        # single pass
    python appointment_sync.py               # run now, then every SYNC_INTERVAL_SECONDS
"""

import argparse
import sys

from apptsync import logging_utils
from apptsync.logging_utils import error, info, ok
from apptsync.scheduler import AutoSync
from apptsync.sheets import ConfigError, SheetsError
from apptsync.sync import build_job, sync_appointments

import config


def main(argv=None, client=None) -> int:
    p = argparse.ArgumentParser(description="Master appointments sheet -> per-user sheets sync")
    p.add_argument("--once", action="store_true", help="Run once and exit")
    p.add_argument(
        "--interval",
        type=float,
        default=config.SYNC_INTERVAL_SECONDS,
        help="Seconds between runs (default: %(default)s)",
    )
    p.add_argument("--state-file", default=config.STATE_FILE, help="Where the watermark is kept")
    p.add_argument("--verbose", action="store_true", help="Enable DEBUG logs")
    args = p.parse_args(argv)

    logging_utils.setup("DEBUG" if args.verbose else None)

    try:
        job = build_job(client, state_file=args.state_file)
    except ConfigError as e:
        error(str(e))
        return 2

    if args.once:
        try:
            stats = sync_appointments(job)
        except (SheetsError, ValueError) as e:
            error(f"Sync failed: {e}")
            return 1
        ok(f"processed={stats.processed} synced={stats.synced} errors={stats.errors}")
        return 0

    auto = AutoSync(job, args.interval).start()
    try:
        auto.wait()
    except KeyboardInterrupt:
        info("Interrupted.")
    finally:
        auto.stop()
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution
    sys.exit(main())
