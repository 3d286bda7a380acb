"""
=============================================================================
COURSESERVER CLI ENTRY POINT
=============================================================================

    # Run with defaults (127.0.0.1:8080, lessons/ and static/ auto-detected)
    python -m courseserver

    # Custom port (positional)
    python -m courseserver 3000

    # Listen on all interfaces, explicit content directories
    python -m courseserver 8080 --host 0.0.0.0 --lessons ./lessons --static ./static

    # JSON access log, verbose
    python -m courseserver --log-format json --log-level DEBUG

Configuration starts from the environment (ServerConfig.from_env) and
command-line flags override it.

=============================================================================
EXIT STATUS
=============================================================================

    0   Stopped by SIGINT / SIGTERM
    1   Invalid port or configuration, or the address couldn't be bound

=============================================================================
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .app import create_app
from .config import ServerConfig


def parse_port(value: str) -> int:
    """Parse a port argument; raises ValueError outside 1-65535."""
    port = int(value)
    if not 1 <= port <= 65535:
        raise ValueError(f"port out of range: {port}")
    return port


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="courseserver",
        description="Course website server built on raw sockets",
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "port",
        nargs="?",
        default=None,
        help="Port to listen on (default: 8080 or HTTP_PORT)"
    )

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for containers)"
    )

    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=None,
        help="Maximum worker threads (default: 16)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--lessons",
        default=None,
        help="Lessons directory (default: first of ./lessons, ../lessons, ../../lessons)"
    )

    parser.add_argument(
        "--static", "-s",
        default=None,
        help="Static files directory holding css/ and js/ (default: ./static or ../static)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default="text",
        help="Access log format (default: text)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"courseserver {__version__}"
    )

    return parser


def build_config(args: argparse.Namespace) -> ServerConfig:
    """Environment first, then any flag that was given."""
    config = ServerConfig.from_env()

    if args.port is not None:
        config.port = parse_port(args.port)
    if args.host:
        config.host = args.host
    if args.workers is not None:
        config.max_workers = args.workers
        config.min_workers = min(config.min_workers, args.workers)
    if args.lessons:
        config.lessons_dir = args.lessons
    if args.static:
        config.static_dir = args.static
    if args.log_level:
        config.log_level = args.log_level
    config.log_format = args.log_format

    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = build_config(args)
        server = create_app(config)
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        server.run()
    except OSError as e:
        print(f"Error: could not start server on {config.host}:{config.port}: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
