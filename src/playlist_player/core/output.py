"""
Unified output system using Loguru.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import LoggingConfig, get_data_dir

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"


def get_log_file_path() -> Path:
    """Get the default path to the log file."""
    return get_data_dir() / "playlist-player.log"


def setup_loguru(
    log_file: Optional[Path] = None,
    level: str = "INFO",
    console_output: bool = False,
    max_file_size_mb: int = 10,
    backup_count: int = 5,
) -> Path:
    """
    Configure loguru with a rotating file sink and an optional console sink.

    Args:
        log_file: Path to log file (default: ~/.local/share/playlist-player/playlist-player.log)
        level: Minimum level (DEBUG, INFO, WARNING, ERROR)
        console_output: Also log to stderr
        max_file_size_mb: Size before the file is rotated
        backup_count: Number of rotated files to keep

    Returns:
        The log file path in use
    """
    log_file = Path(log_file) if log_file else get_log_file_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Remove default handler
    logger.remove()

    logger.add(
        log_file,
        rotation=f"{max_file_size_mb} MB",
        retention=backup_count,
        level=level,
        format=LOG_FORMAT,
        enqueue=True,  # Watcher and scan threads log too
    )

    if console_output:
        logger.add(sys.stderr, level=level, format="{level}: {message}")

    logger.info(f"Loguru initialized: {log_file} (level={level})")
    return log_file


def setup_logging_from_config(config: LoggingConfig) -> Path:
    """Configure loguru from the [logging] config section."""
    return setup_loguru(
        Path(config.log_file) if config.log_file else None,
        level=config.level,
        console_output=config.console_output,
        max_file_size_mb=config.max_file_size_mb,
        backup_count=config.backup_count,
    )
