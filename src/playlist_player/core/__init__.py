"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Logging (Loguru)
- Last-playlist persistence (JSON)
"""

# Configuration
from .config import (
    Config,
    LibraryConfig,
    LoggingConfig,
    WebConfig,
    create_default_config,
    ensure_directories,
    get_config_dir,
    get_config_path,
    get_data_dir,
    load_config,
    parse_config,
)

# Logging
from .output import setup_logging_from_config, setup_loguru

# Persistence
from .session_store import SessionStore

__all__ = [
    # Config
    "Config",
    "LibraryConfig",
    "LoggingConfig",
    "WebConfig",
    "create_default_config",
    "ensure_directories",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "load_config",
    "parse_config",
    # Logging
    "setup_logging_from_config",
    "setup_loguru",
    # Persistence
    "SessionStore",
]
