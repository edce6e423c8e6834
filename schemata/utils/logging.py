"""
schemata Logging Utilities - Session Logging for Schema Builds

Overview:
---------
Centralised logging configuration for schema builds.  Provides session-based
file logging with unique identifiers, configurable verbosity, and structured
helpers for the start, outcome and size of each document build.

Log Location:
-------------
- Default: ~/.schemata/logs/
- Each CLI run creates a timestamped log file with session ID
- A symlink 'schemata.log' always points to the latest session
- Can be overridden via SCHEMATA_LOG_DIR environment variable

Log Levels:
-----------
- DEBUG: Every type registration and schema id
- INFO: Build start and completion summaries
- WARNING: Schema id collisions tolerated in full-name mode
- ERROR: Failed builds

Usage:
------
    from schemata.utils.logging import get_logger, setup_logging

    # Call once at startup (CLI entry point)
    log_file = setup_logging(level="DEBUG")

    # Library modules just use logging.getLogger(__name__)
    logger = get_logger(__name__)
"""

from __future__ import annotations

import logging
import os
import sys
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

# ============================================================================
# Constants
# ============================================================================

DEFAULT_LOG_DIR = Path.home() / ".schemata" / "logs"
DEFAULT_LOG_LEVEL = "INFO"
SYMLINK_NAME = "schemata.log"
ROOT_LOGGER = "schemata"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(session_id)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# File logging includes line numbers
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(session_id)s | %(name)s:%(lineno)d | %(message)s"

_logging_initialised = False
_log_file_path: Optional[Path] = None
_session_id: Optional[str] = None


# ============================================================================
# Session ID Filter - Adds session_id to all log records
# ============================================================================

class SessionIdFilter(logging.Filter):
    """Add session_id to all log records."""

    def __init__(self, session_id: str):
        super().__init__()
        self.session_id = session_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = self.session_id  # type: ignore[attr-defined]
        return True


class SessionFormatter(logging.Formatter):
    """Formatter that defaults session_id to 'N/A' when no filter set it."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "session_id"):
            record.session_id = _session_id or "N/A"  # type: ignore[attr-defined]
        return super().format(record)


# ============================================================================
# Setup Functions
# ============================================================================

def generate_session_id() -> str:
    """Generate a short unique session ID (6 characters)."""
    return uuid.uuid4().hex[:6]


def get_log_directory() -> Path:
    """Get the log directory, respecting SCHEMATA_LOG_DIR."""
    env_log_dir = os.getenv("SCHEMATA_LOG_DIR")
    if env_log_dir:
        return Path(env_log_dir)
    return DEFAULT_LOG_DIR


def generate_log_filename(session_id: str) -> str:
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"schemata_{timestamp}_{session_id}.log"


def setup_logging(
    level: Optional[str] = None,
    log_dir: Optional[Path] = None,
    console_output: bool = False,
) -> Path:
    """
    Initialise schemata logging with a per-session file and optional console.

    Parameters
    ----------
    level : str, optional
        DEBUG, INFO, WARNING or ERROR.  Falls back to SCHEMATA_LOG_LEVEL,
        then INFO.
    log_dir : Path, optional
        Directory for log files.  Defaults to ~/.schemata/logs/
    console_output : bool
        Also log to stderr.

    Returns
    -------
    Path
        The log file being written to.
    """
    global _logging_initialised, _log_file_path, _session_id

    _session_id = generate_session_id()

    if level is None:
        level = os.getenv("SCHEMATA_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_dir is None:
        log_dir = get_log_directory()
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / generate_log_filename(_session_id)
    _log_file_path = log_file

    root = logging.getLogger(ROOT_LOGGER)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for f in root.filters[:]:
        root.removeFilter(f)
    root.setLevel(log_level)
    root.addFilter(SessionIdFilter(_session_id))

    # No rotation: each session gets its own file
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(log_level)
    file_handler.setFormatter(SessionFormatter(FILE_LOG_FORMAT, LOG_DATE_FORMAT))
    root.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(SessionFormatter(LOG_FORMAT, LOG_DATE_FORMAT))
        root.addHandler(console_handler)

    root.propagate = False

    symlink_path = log_dir / SYMLINK_NAME
    try:
        if symlink_path.is_symlink() or symlink_path.exists():
            symlink_path.unlink()
        symlink_path.symlink_to(log_file.name)
    except OSError:
        # Symlinks may be unavailable (e.g. Windows without admin)
        pass

    _logging_initialised = True
    root.info("schemata logging session %s started (level %s, file %s)", _session_id, level.upper(), log_file)
    return log_file


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``schemata`` namespace.

    Unlike :func:`setup_logging` this never touches the filesystem; until
    logging is set up, records go wherever the host application sends them.
    """
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def get_current_log_file() -> Optional[Path]:
    return _log_file_path


def get_session_id() -> Optional[str]:
    return _session_id


def is_initialised() -> bool:
    return _logging_initialised


# ============================================================================
# Structured helpers
# ============================================================================

def log_build_start(logger: logging.Logger, title: str, version: str) -> None:
    """Log the start of a document build."""
    logger.info("BUILD START | %s %s", title, version)


def log_registration(logger: logging.Logger, identity: str, schema_id: str) -> None:
    logger.debug("Registered '%s' as '%s'", identity, schema_id)


def log_build_complete(
    logger: logging.Logger,
    title: str,
    *,
    paths: int,
    definitions: int,
    duration_seconds: Optional[float] = None,
) -> None:
    """Log a build summary."""
    msg = f"BUILD COMPLETE | {title} | {paths} paths, {definitions} definitions"
    if duration_seconds is not None:
        msg += f" ({duration_seconds:.3f}s)"
    logger.info(msg)


def log_build_failure(logger: logging.Logger, title: str, error: BaseException) -> None:
    logger.error("BUILD FAILED | %s | %s: %s", title, type(error).__name__, error)
