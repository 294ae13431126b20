"""
Logger utility - Console and rotating file logging for the chat service.
"""

import logging
import logging.handlers
import re
from pathlib import Path

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'

# Provider SDKs log every HTTP request at INFO
QUIET_LOGGERS = ("httpx", "openai", "anthropic")

def log_file_stem(app_name: str) -> str:
    """File-name form of the application name: "Avatar Chat" -> "avatar_chat"."""
    return re.sub(r"[^a-z0-9]+", "_", app_name.lower()).strip("_") or "app"

def _rotating_handler(path: Path, level: int, max_mb: int, backups: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=max_mb * 1024 * 1024,
        backupCount=backups,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler

def setup_logging(log_level: str = "INFO", log_dir: str = "logs", app_name: str = "Avatar Chat"):
    """Route all service logging to the console, ``<app>.log`` and ``<app>_errors.log``."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    stem = log_file_stem(app_name)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    root_logger.addHandler(_rotating_handler(directory / f"{stem}.log", level, max_mb=10, backups=5))
    root_logger.addHandler(_rotating_handler(directory / f"{stem}_errors.log", logging.ERROR, max_mb=5, backups=3))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(f"Logging to {directory / stem}.log at {logging.getLevelName(level)}")

def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)
