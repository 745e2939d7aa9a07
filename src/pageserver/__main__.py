"""
=============================================================================
COMMAND LINE ENTRY POINT
=============================================================================

    pageserver ./site                       # http://127.0.0.1:8015/
    pageserver ./site -p 9000 -H 0.0.0.0    # all interfaces, port 9000
    pageserver ./site --strict-404          # real 404 status for missing pages
    python -m pageserver ./site -l DEBUG --log-format json

Startup problems (bad root, missing template, port in use) print
"Error: <message>" to stderr and exit with status 1.

=============================================================================
"""

from typing import Optional, Sequence
import argparse
import sys

from . import __version__
from .app import create_app
from .config import DEFAULT_PORT, LOG_FORMATS, ServerConfig
from .pages import ConfigurationError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pageserver",
        description="Serve a directory of HTML fragments wrapped in a site template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pageserver ./site                    # Serve ./site on 127.0.0.1:8015
  pageserver ./site --port 3000        # Custom port
  pageserver ./site --host 0.0.0.0     # Listen on all interfaces
  pageserver ./site --strict-404       # Send 404 status for missing pages
        """,
    )

    parser.add_argument(
        "serve_dir",
        help="Directory of .html fragments to serve",
    )
    parser.add_argument(
        "--host", "-H",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=DEFAULT_PORT,
        help=f"Port to listen on (default: {DEFAULT_PORT})",
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=4,
        help="Number of worker threads (default: 4, max will be 2x this)",
    )
    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        choices=list(LOG_FORMATS),
        default="text",
        help="Access log format (default: text)",
    )
    parser.add_argument(
        "--strict-404",
        action="store_true",
        help="Answer missing pages with status 404 instead of 200",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"pageserver {__version__}",
    )

    return parser


def build_config(args: argparse.Namespace) -> ServerConfig:
    return ServerConfig(
        host=args.host,
        port=args.port,
        root_dir=args.serve_dir,
        min_workers=args.workers,
        max_workers=args.workers * 2,
        log_level=args.log_level,
        log_format=args.log_format,
        strict_not_found=args.strict_404,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        server = create_app(build_config(args))
        server.run()
    except (ConfigurationError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
