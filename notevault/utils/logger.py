"""
Logging configuration using Loguru.

Console output is human-readable. The optional file sink rotates by size
and, when ``serialize`` is on, writes one JSON object per line with the
context the stores bind to each record.
"""

import sys
from pathlib import Path

from loguru import logger

from notevault.config import LoggingConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
LOG_FILE_PATTERN = "notevault_{time:YYYY-MM-DD}.log"


def setup_logging(config: LoggingConfig | None = None) -> None:
    """
    Replace Loguru's default sink with the configured ones.

    Args:
        config: Logging section of the app config (defaults if omitted)
    """
    config = config or LoggingConfig()
    logger.remove()

    logger.add(
        sys.stderr,
        level=config.level,
        format=CONSOLE_FORMAT,
        colorize=True,
        serialize=False,
    )

    if config.log_to_file:
        log_path = Path(config.log_dir).expanduser()
        log_path.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path / LOG_FILE_PATTERN,
            level=config.level,
            format=FILE_FORMAT,
            rotation=config.file_rotation,
            retention=config.file_retention,
            compression=config.compression,
            serialize=config.serialize,
            enqueue=True,
        )


def get_logger(name: str):
    """Get a logger instance for a module."""
    return logger.bind(module=name)
