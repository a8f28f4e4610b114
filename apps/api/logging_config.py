"""
Logging configuration for FamilyBoard API.
Sets up structured logging with file and console outputs.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# Log format
DETAILED_FORMAT = "%(asctime)s [%(name)s:%(lineno)d] %(levelname)s - %(message)s"
SIMPLE_FORMAT = "%(levelname)s - %(message)s"

MAX_LOG_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5


def _rotating_handler(path: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUP_COUNT)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(DETAILED_FORMAT))
    return handler


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[str] = None,
    log_to_file: bool = True,
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for app.log and error.log
        log_to_file: Disable to log to the console only (tests, containers)
    """
    # Convert string to logging level
    level = getattr(logging, log_level.upper(), logging.INFO)

    # Root logger configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture everything at root level

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_to_file:
        log_path = Path(log_dir or "./logs")

        # Application log file handler (rotating)
        try:
            log_path.mkdir(parents=True, exist_ok=True)
            root_logger.addHandler(_rotating_handler(log_path / "app.log", logging.DEBUG))
        except OSError as e:
            print(f"Warning: Could not setup app log file: {e}")

        # Error log file handler (rotating)
        try:
            root_logger.addHandler(_rotating_handler(log_path / "error.log", logging.ERROR))
        except OSError as e:
            print(f"Warning: Could not setup error log file: {e}")

    # Set specific loggers
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)
