"""
Playlist Player CLI - entry point for the playback server.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from playlist_player.core.config import Config, load_config
from playlist_player.core.output import setup_logging_from_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="playlist-player",
        description="Shuffled playlist playback with shared remote and player state",
    )
    parser.add_argument("--config", type=Path, help="Path to config.toml")
    parser.add_argument("--root", help="Playlist library root (one subdirectory per playlist)")
    parser.add_argument("--host", help="Interface to bind")
    parser.add_argument("--port", type=int, help="First port to try")
    parser.add_argument("--no-watch", action="store_true", help="Do not reload on library changes")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Log level",
    )
    parser.add_argument("--console-log", action="store_true", help="Also log to stderr")
    return parser


def apply_cli_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Apply command-line flags on top of file/env configuration."""
    if args.root:
        config.library.root = str(Path(args.root).expanduser())
    if args.host:
        config.web.host = args.host
    if args.port:
        config.web.port = args.port
    if args.no_watch:
        config.library.watch = False
    if args.log_level:
        config.logging.level = args.log_level
    if args.console_log:
        config.logging.console_output = True
    return config


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = apply_cli_overrides(load_config(args.config), args)
    setup_logging_from_config(config.logging)

    from playlist_player.web_launcher import run_server

    try:
        run_server(config)
    except RuntimeError as e:
        logger.error(str(e))
        print(f"Failed to start server: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nReceived interrupt. Graceful shutdown...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
