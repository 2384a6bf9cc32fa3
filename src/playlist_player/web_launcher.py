"""
Web server launcher for Playlist Player.

Port checking and the uvicorn entry used by the CLI.
"""

import socket

import uvicorn
from loguru import logger

from .core.config import Config


def is_port_available(port: int, host: str = "0.0.0.0") -> bool:
    """
    Check if a port is available for binding.

    Args:
        port: Port number to check
        host: Interface to bind on

    Returns:
        True if port is available, False if already in use
    """
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            s.settimeout(1.0)  # Add timeout to avoid hanging
            s.bind((host, port))
            return True
        except OSError:
            return False


def find_available_port(start_port: int = 3000, max_attempts: int = 100, host: str = "0.0.0.0") -> int:
    """
    Find the first free port in [start_port, start_port + max_attempts).

    Raises:
        RuntimeError: If every port in the range is taken
    """
    for port in range(start_port, start_port + max_attempts):
        if is_port_available(port, host):
            return port
    raise RuntimeError(
        f"No available port found in range {start_port}-{start_port + max_attempts - 1}"
    )


def run_server(config: Config) -> None:
    """Build the app and serve it with uvicorn on the first free port."""
    from web.backend.main import create_app

    port = find_available_port(config.web.port, config.web.port_search_range, config.web.host)
    if port != config.web.port:
        logger.warning(f"Port {config.web.port} in use, using {port}")
    config.web.port = port

    print(f"Server running on http://localhost:{port}")
    print(f"Sync socket: ws://localhost:{port}/ws/sync")
    print(f"State: http://localhost:{port}/api/current-state")

    app = create_app(config)
    uvicorn.run(app, host=config.web.host, port=port, log_level=config.logging.level.lower())
