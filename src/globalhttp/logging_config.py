"""
Logging configuration for GlobalHTTP.

The library only creates module loggers under the ``globalhttp`` namespace;
applications and the CLI call ``setup_logging`` to attach handlers.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path


class RequestFormatter(logging.Formatter):
    """Formatter that fills in request context passed through ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "method"):
            record.method = "-"
        if not hasattr(record, "url"):
            record.url = "-"
        return super().format(record)


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    log_dir: str | None = None,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
    enable_console: bool = True,
    enable_file: bool = False,
) -> logging.Logger:
    """
    Set up logging for GlobalHTTP.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Custom log file path (overrides log_dir)
        log_dir: Directory for log files (defaults to ~/.globalhttp/logs)
        max_bytes: Maximum log file size before rotation
        backup_count: Number of backup log files to keep
        enable_console: Log to stderr
        enable_file: Log to a rotating file

    Returns:
        The configured ``globalhttp`` logger
    """
    logger = logging.getLogger("globalhttp")
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers.clear()

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(console_handler)

    if enable_file:
        if log_file:
            log_path = Path(log_file)
        elif log_dir:
            log_path = Path(log_dir) / "globalhttp.log"
        else:
            log_path = Path.home() / ".globalhttp" / "logs" / "globalhttp.log"
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(RequestFormatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)-30s | %(method)-6s | "
                "%(url)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the ``globalhttp`` namespace."""
    if name != "globalhttp" and not name.startswith("globalhttp."):
        name = f"globalhttp.{name}"
    return logging.getLogger(name)


def configure_logging(debug: bool = False, log_to_file: bool = False) -> None:
    """Quick logging configuration for scripts and the CLI."""
    setup_logging(
        level="DEBUG" if debug else "WARNING",
        enable_console=True,
        enable_file=log_to_file,
    )
