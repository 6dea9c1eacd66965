"""CLI entry point: print a JS snippet that signs the browser in as a user."""

import argparse
import asyncio
import logging
import sys

import httpx

from impersonate.core.config import Settings
from impersonate.core.errors import ImpersonationError
from impersonate.pipeline.orchestrator import check_user, impersonate
from impersonate.provider.http import client_scope


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Provide an email address and get a JS snippet that you can run in "
            "the browser on the site to impersonate the user."
        ),
    )
    parser.add_argument(
        "email",
        help="Email address of the user to impersonate",
    )
    parser.add_argument(
        "--skip-check",
        action="store_true",
        help=(
            "Bypass the user existence check. A new account will be created if "
            "a user with the given email does not exist"
        ),
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Stop after the user existence check, without generating a login request",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to a dotenv file with the Supabase settings (default: .env)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    # Stays on stderr: stdout carries only the snippet.
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


async def run(
    settings: Settings,
    args: argparse.Namespace,
    client: httpx.AsyncClient | None = None,
) -> None:
    """Run the check/issue/capture pipeline and print the result."""
    async with client_scope(client) as http:
        if not args.skip_check:
            user = await check_user(settings, args.email, http)
            print(f"// Email: {args.email}")
            print(f"// User ID: {user.get('id')}")

        if args.dry_run:
            return

        result = await impersonate(settings, args.email, http)

    print(result.output)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = Settings.from_env(env_file=args.env_file)
    except ImpersonationError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        asyncio.run(run(settings, args))
    except ImpersonationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
