"""Small logging front-end shared by the sync job and the scripts."""

import logging

import config

LOGGER_NAME = "apptsync"

log = logging.getLogger(LOGGER_NAME)


def setup(level: str = None) -> logging.Logger:
    """Configure root output once and set the ``apptsync`` level.

    ``level`` defaults to ``config.LOG_LEVEL`` (DEBUG when ``DEBUG_LOG`` is on).
    """
    level = (level or ("DEBUG" if config.DEBUG_LOG else config.LOG_LEVEL)).upper()
    logging.basicConfig(format="%(asctime)s  %(levelname)s  %(message)s")
    log.setLevel(getattr(logging, level, logging.INFO))
    return log


def debug(msg: str) -> None:
    log.debug(msg)


def info(msg: str) -> None:
    log.info(msg)


def ok(msg: str) -> None:
    log.info(f"[OK] {msg}")


def warn(msg: str) -> None:
    log.warning(msg)


def error(msg: str) -> None:
    log.error(msg)
