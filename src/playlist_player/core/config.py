"""
Configuration management for Playlist Player
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger


@dataclass
class LibraryConfig:
    """Configuration for the playlist library."""

    root: str = str(Path.home() / "Music" / "playlists")
    supported_formats: List[str] = field(default_factory=lambda: [".mp3"])
    debounce_seconds: float = 1.0  # Quiet window before a reload runs
    metadata_timeout_seconds: float = 10.0  # Per-file bound on tag reading
    max_scan_workers: int = 4
    watch: bool = True

    def validate(self) -> None:
        """Validate library configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if self.debounce_seconds <= 0:
            raise ValueError(f"debounce_seconds must be positive, got {self.debounce_seconds}")
        if self.metadata_timeout_seconds <= 0:
            raise ValueError(
                f"metadata_timeout_seconds must be positive, got {self.metadata_timeout_seconds}"
            )
        if self.max_scan_workers < 1:
            raise ValueError(f"max_scan_workers must be at least 1, got {self.max_scan_workers}")
        if not self.supported_formats:
            raise ValueError("supported_formats must not be empty")


@dataclass
class WebConfig:
    """Configuration for the HTTP/WebSocket server."""

    host: str = "0.0.0.0"
    port: int = 3000
    port_search_range: int = 100  # Ports tried after `port` if it is taken
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])

    def validate(self) -> None:
        """Validate web configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")
        if self.port_search_range < 1:
            raise ValueError(f"port_search_range must be at least 1, got {self.port_search_range}")


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/playlist-player/playlist-player.log)
    )
    max_file_size_mb: int = 10  # Maximum log file size before rotation
    backup_count: int = 5  # Number of backup files to keep
    console_output: bool = False  # Also output to console (for debugging)


@dataclass
class Config:
    """Main configuration object."""

    library: LibraryConfig = field(default_factory=LibraryConfig)
    web: WebConfig = field(default_factory=WebConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "playlist-player"
    return Path.home() / ".config" / "playlist-player"


def _find_project_config() -> Optional[Path]:
    """Find config.toml in project root by looking for pyproject.toml.

    Returns:
        Path to config.toml in project root, or None if not found
    """
    current = Path(__file__).resolve().parent
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            config_path = parent / "config.toml"
            if config_path.exists():
                return config_path
            # Found project root but no config.toml there
            return None
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. XDG_CONFIG_HOME/playlist-player (or ~/.config/playlist-player)
    """
    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "playlist-player"
    return Path.home() / ".local" / "share" / "playlist-player"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Playlist Player Configuration

[library]
# Directory holding one subdirectory per playlist
root = "~/Music/playlists"

# Audio file extensions included in playlists (case-insensitive)
supported_formats = [".mp3"]

# Seconds of filesystem quiet before the library is reloaded
debounce_seconds = 1.0

# Seconds to wait for one file's tags before using its filename
metadata_timeout_seconds = 10.0

# Threads used to read tags during a scan
max_scan_workers = 4

# Reload automatically when the library changes on disk
watch = true

[web]
host = "0.0.0.0"

# First port to try; the next free port is used if it is taken
port = 3000
port_search_range = 100

# CORS origins allowed to call the API
allowed_origins = ["*"]

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/playlist-player/playlist-player.log)
# log_file = "/path/to/custom/playlist-player.log"

# Maximum log file size in MB before rotation
max_file_size_mb = 10

# Number of backup log files to keep
backup_count = 5

# Also output logs to console (useful for debugging)
console_output = false
""".strip()


def _parse_library(data: dict, default: LibraryConfig) -> LibraryConfig:
    return LibraryConfig(
        root=str(Path(data.get("root", default.root)).expanduser()),
        supported_formats=[
            fmt.lower() if fmt.startswith(".") else f".{fmt.lower()}"
            for fmt in data.get("supported_formats", default.supported_formats)
        ],
        debounce_seconds=float(data.get("debounce_seconds", default.debounce_seconds)),
        metadata_timeout_seconds=float(
            data.get("metadata_timeout_seconds", default.metadata_timeout_seconds)
        ),
        max_scan_workers=int(data.get("max_scan_workers", default.max_scan_workers)),
        watch=data.get("watch", default.watch),
    )


def _parse_web(data: dict, default: WebConfig) -> WebConfig:
    return WebConfig(
        host=data.get("host", default.host),
        port=int(data.get("port", default.port)),
        port_search_range=int(data.get("port_search_range", default.port_search_range)),
        allowed_origins=data.get("allowed_origins", default.allowed_origins),
    )


def _parse_logging(data: dict, default: LoggingConfig) -> LoggingConfig:
    log_file = data.get("log_file")
    if log_file:
        log_file = str(Path(log_file).expanduser())
    return LoggingConfig(
        level=data.get("level", default.level).upper(),
        log_file=log_file,
        max_file_size_mb=data.get("max_file_size_mb", default.max_file_size_mb),
        backup_count=data.get("backup_count", default.backup_count),
        console_output=data.get("console_output", default.console_output),
    )


def apply_env_overrides(config: Config) -> Config:
    """Override TOML values with environment variables.

    - PLAYLIST_PLAYER_ROOT: library root directory
    - PORT: first web port to try
    - ALLOWED_ORIGINS: comma-separated CORS origins
    """
    root = os.environ.get("PLAYLIST_PLAYER_ROOT")
    if root:
        config.library.root = str(Path(root).expanduser())

    port = os.environ.get("PORT")
    if port:
        try:
            config.web.port = int(port)
        except ValueError:
            logger.warning(f"Ignoring invalid PORT value: {port!r}")

    origins = os.environ.get("ALLOWED_ORIGINS")
    if origins:
        config.web.allowed_origins = [o.strip() for o in origins.split(",") if o.strip()]

    return config


def parse_config(toml_data: dict) -> Config:
    """Build a Config from parsed TOML, falling back per invalid section."""
    config = Config()

    if "library" in toml_data:
        try:
            library = _parse_library(toml_data["library"], config.library)
            library.validate()
            config.library = library
        except (TypeError, ValueError) as e:
            logger.warning(f"Invalid library configuration: {e}. Using defaults.")

    if "web" in toml_data:
        try:
            web = _parse_web(toml_data["web"], config.web)
            web.validate()
            config.web = web
        except (TypeError, ValueError) as e:
            logger.warning(f"Invalid web configuration: {e}. Using defaults.")

    if "logging" in toml_data:
        try:
            config.logging = _parse_logging(toml_data["logging"], config.logging)
        except (AttributeError, TypeError) as e:
            logger.warning(f"Invalid logging configuration: {e}. Using defaults.")

    return config


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values (see apply_env_overrides).
    A .env file in the config directory is loaded first.
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = config_path or get_config_path()

    if not config_path.exists():
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w", encoding="utf-8") as f:
                f.write(create_default_config())
            logger.info(f"Created default configuration at: {config_path}")
        except OSError as e:
            logger.warning(f"Could not write default configuration to {config_path}: {e}")
        return apply_env_overrides(Config())

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.error(f"Error loading configuration from {config_path}: {e}. Using default configuration.")
        return apply_env_overrides(Config())

    return apply_env_overrides(parse_config(toml_data))


def ensure_directories() -> None:
    """Ensure all necessary directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_data_dir().mkdir(parents=True, exist_ok=True)
