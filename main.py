# main.py

"""Entry point for the shopping search aggregator (HTTP server or CLI)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("shopping_ai.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    from src.cli.runner import CLI_SOURCES

    parser = argparse.ArgumentParser(
        prog="shopping_ai",
        description="Multi-marketplace product search aggregator.",
        epilog=f"Available sources: {', '.join(CLI_SOURCES)}",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Search query. Omit to start the HTTP server.",
    )
    parser.add_argument(
        "-s",
        "--source",
        choices=CLI_SOURCES,
        default="combined",
        help="Source to search (default: combined).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Report which providers are configured.",
    )
    return parser


def _run_server(settings: Settings) -> None:
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    from src.api.app import create_app
    from src.config.logging_config import attach_server_loggers

    logger.info(
        "Server is running on http://%s:%d", settings.host, settings.port
    )
    attach_server_loggers()
    try:
        uvicorn.run(
            create_app(settings),
            host=settings.host,
            port=settings.port,
            log_config=None,
        )
    except Exception:
        logger.critical("Fatal error while serving", exc_info=True)
        raise
    finally:
        logger.info("shopping_ai server shutting down")


def _run_cli(args: argparse.Namespace, settings: Settings) -> None:
    """Run a headless search and exit."""
    from src.cli.runner import cli_search

    exit_code = asyncio.run(
        cli_search(
            query=args.query,
            source=args.source,
            output_format=args.output_format,
            settings=settings,
        )
    )
    sys.exit(exit_code)


def _run_health_check(settings: Settings) -> None:
    """Report provider configuration readiness."""
    from src.cli.runner import run_health_check

    sys.exit(run_health_check(settings))


def main() -> None:
    """Route to the HTTP server (no args) or the headless CLI."""
    settings = Settings()
    log_file = setup_logging(settings.log_level)
    logger.info("shopping_ai starting, log file: %s", log_file)

    args = _build_parser().parse_args()

    if args.health:
        _run_health_check(settings)
    elif args.query is None:
        _run_server(settings)
    else:
        _run_cli(args, settings)


if __name__ == "__main__":
    main()
