#!/usr/bin/env python3
"""Command-line entry point for the payment gateway server.

Usage:
    python -m payment_gateway.cli serve
    python -m payment_gateway.cli serve --port 8090 --bank-url http://localhost:8080
    python -m payment_gateway.cli serve --simulator
"""

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

import uvicorn

from .api import create_app
from .config import BANK_MODE_SIMULATOR, GatewaySettings

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Payment gateway API server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Interface to bind (default: GATEWAY_HOST or 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, help="Port to bind (default: GATEWAY_PORT or 8090)")
    serve_parser.add_argument("--bank-url", help="Acquiring bank base URL (default: BANK_BASE_URL)")
    serve_parser.add_argument(
        "--simulator",
        action="store_true",
        help="Use the in-process bank simulator instead of calling a bank",
    )
    serve_parser.add_argument("--log-level", help="Logging level (default: LOG_LEVEL or INFO)")
    return parser


def settings_from_args(args: argparse.Namespace, base: GatewaySettings) -> GatewaySettings:
    """Overlay command-line options on environment settings."""
    overrides = {}
    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port
    if args.bank_url:
        overrides["bank_base_url"] = args.bank_url
    if args.simulator:
        overrides["bank_mode"] = BANK_MODE_SIMULATOR
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    return dataclasses.replace(base, **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != "serve":
        parser.print_help()
        return 1

    try:
        settings = settings_from_args(args, GatewaySettings.from_env())
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    configure_logging(settings.log_level)
    logger.info(
        f"Starting payment gateway on {settings.host}:{settings.port} "
        f"(bank mode: {settings.bank_mode})"
    )
    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
