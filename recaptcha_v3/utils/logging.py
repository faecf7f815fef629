"""
Logging configuration for reCAPTCHA v3 verification.

Uses loguru. Nothing is configured on import; host applications call
setup_logging() when they want the package's own sinks. Level and file
default to RECAPTCHA_LOG_LEVEL / RECAPTCHA_LOG_FILE (environment or .env).
"""

import sys
from pathlib import Path

from loguru import logger

from recaptcha_v3.config import LoggingSettings

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(
    level: str | None = None,
    log_file: Path | None = None,
    rotation: str = "10 MB",
    retention: str = "1 week",
    settings: LoggingSettings | None = None,
) -> list[int]:
    """
    Replace loguru's default sink with the verifier's console and file sinks.

    Args:
        level: Log level; falls back to settings.log_level
        log_file: Optional log file; falls back to settings.log_file
        rotation: Rotation for the file sink (e.g., "10 MB", "1 day")
        retention: Retention for the file sink (e.g., "1 week", "10 files")
        settings: Pre-loaded LoggingSettings, read from the environment if omitted

    Returns:
        Handler ids of the sinks that were added
    """
    settings = settings or LoggingSettings()
    level = (level or settings.log_level).upper()
    log_file = log_file or settings.log_file

    logger.remove()
    handler_ids = [logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)]

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler_ids.append(
            logger.add(
                log_file,
                level=level,
                format=FILE_FORMAT,
                rotation=rotation,
                retention=retention,
                compression="gz",
            )
        )

    logger.debug(f"reCAPTCHA logging configured: level={level}, file={log_file}")
    return handler_ids
