"""
Logging configuration for the Skill Events API.

``setup_logging`` configures the root logger with a console handler
and an optional file handler.  Wallet changes are additionally written
to a dedicated ledger log when ``LEDGER_LOG_FILE`` is set, so that
every grant, deduction, join debit and rollback can be audited apart
from request noise.
"""

import logging
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LEDGER_LOGGER = "skill_events_api.app.services.ledger_service"


def _file_handler(path: str, formatter: logging.Formatter) -> logging.FileHandler:
    log_path = Path(path).resolve()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(formatter)
    return handler


def setup_ledger_log(logfile: str) -> logging.Handler:
    """Attach a file handler for wallet changes to the ledger logger.

    Calling it again with the same path returns the existing handler.
    """
    ledger_logger = logging.getLogger(LEDGER_LOGGER)
    target = str(Path(logfile).resolve())
    for handler in ledger_logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return handler
    handler = _file_handler(logfile, logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.setLevel(logging.INFO)
    ledger_logger.addHandler(handler)
    if ledger_logger.getEffectiveLevel() > logging.INFO:
        ledger_logger.setLevel(logging.INFO)
    return handler


def setup_logging(level: str = "INFO", logfile: Optional[str] = None, ledger_logfile: Optional[str] = None) -> None:
    """Configure logging for the process.

    Parameters
    ----------
    level : str
        Root logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        File receiving everything the root logger emits.
    ledger_logfile : Optional[str]
        File receiving only wallet changes.
    """
    if ledger_logfile:
        setup_ledger_log(ledger_logfile)

    root = logging.getLogger()
    if root.handlers:
        # Already configured, e.g. by pytest or a repeated create_app().
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        root.addHandler(_file_handler(logfile, formatter))
