"""Inspect Sentry bootstrap configuration.

Usage:
    python -m kubeshark_sentry status
    python -m kubeshark_sentry fetch-dsn --service hub --version v52.3.0
"""

import argparse
import asyncio
import logging
import sys

from kubeshark_sentry.dsn import fetch_dsn
from kubeshark_sentry.environment import dsn_endpoint, is_enabled, resolve_environment
from kubeshark_sentry.types import SentryBootstrapError


def status() -> int:
    """Print gate state, environment tag and DSN endpoint."""
    print(f"enabled: {str(is_enabled()).lower()}")
    print(f"environment: {resolve_environment()}")
    print(f"endpoint: {dsn_endpoint()}")
    return 0


async def _fetch(service: str, version: str, timeout: float) -> str:
    return await asyncio.wait_for(fetch_dsn(service, version), timeout=timeout)


def fetch(service: str, version: str, timeout: float) -> int:
    """Fetch and print the DSN (empty line when none is configured)."""
    try:
        dsn = asyncio.run(_fetch(service, version, timeout))
    except SentryBootstrapError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except asyncio.TimeoutError:
        print(f"error: timed out after {timeout}s", file=sys.stderr)
        return 1
    print(dsn)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kubeshark_sentry", description="Kubeshark Sentry bootstrap helper")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subcommands = parser.add_subparsers(dest="command", required=True)

    subcommands.add_parser("status", help="Show gate, environment and endpoint")

    fetch_parser = subcommands.add_parser("fetch-dsn", help="Fetch the DSN for a component")
    fetch_parser.add_argument("--service", required=True, help="Component name (e.g. hub, worker)")
    fetch_parser.add_argument("--version", required=True, help="Component build version")
    fetch_parser.add_argument(
        "--timeout",
        type=float,
        default=120.0,
        help="Overall deadline in seconds, retries included (default: 120)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for `python -m kubeshark_sentry`."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "status":
        return status()
    return fetch(args.service, args.version, args.timeout)


if __name__ == "__main__":
    sys.exit(main())
