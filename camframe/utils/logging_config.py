"""Centralized logging configuration for camframe.

Usage:
    from camframe.utils.logging_config import setup_logging

    # stderr only:
    setup_logging()

    # With debug level:
    setup_logging(debug=True)

    # stderr + logs/<server_name>.log:
    setup_logging(server_name="camframe")

    # Custom log file path:
    setup_logging(log_file="/tmp/camframe.log")
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Log rotation defaults
MAX_BYTES = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 3

DEFAULT_LOG_DIR = Path.cwd() / "logs"


def setup_logging(
    level: int = logging.INFO,
    log_file: str | None = None,
    fmt: str = DEFAULT_FORMAT,
    max_bytes: int = MAX_BYTES,
    backup_count: int = BACKUP_COUNT,
    *,
    server_name: str | None = None,
    log_dir: str | Path | None = None,
    debug: bool = False,
) -> list[logging.Handler]:
    """Configure root logger with consistent format and optional file output.

    Call this once at the start of each entry point. Returns the handlers
    that were installed.
    """
    if debug:
        level = logging.DEBUG

    resolved_log_file = log_file
    if server_name and not log_file:
        target_dir = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
        resolved_log_file = str(target_dir / f"{server_name}.log")

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if resolved_log_file:
        Path(resolved_log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                resolved_log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
        )
    logging.basicConfig(level=level, format=fmt, handlers=handlers, force=True)

    if resolved_log_file:
        logging.getLogger(__name__).info("Logging to %s", resolved_log_file)
    return handlers
