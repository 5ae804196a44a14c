"""
Logging Configuration - Logging Setup and Configuration

This module provides centralized logging configuration for hosts embedding
the pricing library. Library modules only create module-level loggers; the
host calls setup_logging() once at startup.

Files that USE this module:
- Host applications (setup_logging for logging initialization)
- tests.test_logging_conf (unit tests)

Files that this module USES:
- cartprice.config.settings (optional Settings for log options)
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    log_dir: Optional[Union[str, Path]] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    log_to_stdout: bool = True,
) -> Optional[Path]:
    """
    Configure application-wide logging settings.

    Sets up logging with consistent formatting. Can output to stdout, file,
    or both. Supports log rotation for file logging.

    Args:
        level: Logging level (default: logging.INFO), as int or name
        log_file: Optional path to log file (enables file logging)
        log_dir: Optional directory for log files (file is cartprice.log)
        max_bytes: Maximum size per log file before rotation (default: 10MB)
        backup_count: Number of backup log files to keep (default: 5)
        log_to_stdout: Whether to also log to stdout

    Returns:
        Path of the log file if file logging was enabled, else None
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handlers = []
    log_file_path: Optional[Path] = None

    if log_to_stdout:
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handlers.append(stdout_handler)

    # File logging (if log_file or log_dir is specified)
    if log_file or log_dir:
        if log_dir:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)
            log_file_path = log_dir / "cartprice.log"
        else:
            log_file_path = Path(log_file)
            log_file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handlers.append(file_handler)

    # If no handlers specified, default to stdout
    if not handlers:
        handlers = [logging.StreamHandler(sys.stdout)]

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )

    logger = logging.getLogger(__name__)
    if log_file_path:
        logger.info("Logging configured: file=%s, level=%s", log_file_path, logging.getLevelName(level))
    else:
        logger.info("Logging configured: stdout, level=%s", logging.getLevelName(level))
    return log_file_path


def setup_logging_from_settings(config=None) -> Optional[Path]:
    """
    Configure logging from a Settings instance.

    Args:
        config: cartprice.config.Settings (defaults to the global settings)

    Returns:
        Path of the log file if file logging was enabled, else None
    """
    if config is None:
        from cartprice.config import settings as config

    return setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        log_dir=config.log_dir,
        max_bytes=config.log_max_bytes,
        backup_count=config.log_backup_count,
        log_to_stdout=config.log_stdout,
    )
