"""
schemata Utilities Package - Cross-Cutting Helpers

Overview:
---------
Helpers shared by the registry, the document assembler and the CLI that do
not belong to any one of them.  Currently this is session logging: setup,
namespaced loggers and the structured build-summary lines.
"""

from .logging import (
    setup_logging,
    get_logger,
    get_current_log_file,
    get_session_id,
    is_initialised,
    log_build_start,
    log_registration,
    log_build_complete,
    log_build_failure,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "get_current_log_file",
    "get_session_id",
    "is_initialised",
    "log_build_start",
    "log_registration",
    "log_build_complete",
    "log_build_failure",
]
