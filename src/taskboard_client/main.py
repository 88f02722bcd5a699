"""Command-line entry point."""

import argparse
import asyncio
import getpass
import json
import logging
import os
import sys

import httpx

from .config import Config, setup_logging
from .consts import CLIENT_NAME, PACKAGE_VERSION
from .exceptions import TaskboardClientError
from .models import Response
from .session import SessionClient

logger = logging.getLogger("taskboard-client.main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=CLIENT_NAME, description="Authenticated client for the task API"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {PACKAGE_VERSION}"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("status", help="show whether credentials are stored")

    login = commands.add_parser("login", help="sign in and store credentials")
    login.add_argument("username")

    commands.add_parser("logout", help="remove stored credentials")

    get = commands.add_parser("get", help="GET a path and print the JSON body")
    get.add_argument("path", help="path relative to the base URL, e.g. /api/tasks/")

    return parser


async def execute(args: argparse.Namespace, client: SessionClient) -> Response:
    """Execute one command and summarize its outcome.

    Raises:
        TaskboardClientError: If signing in fails.
        httpx.HTTPError: For HTTP error statuses and network errors.
    """
    config = client.config

    if args.command == "status":
        if not client.is_authenticated:
            return Response(
                status="error",
                message=f"signed out ({config.base_url})",
                suggestions=[f"Run '{CLIENT_NAME} login USERNAME'"],
            )
        return Response(status="success", message=f"signed in ({config.base_url})")

    if args.command == "login":
        password = os.environ.get("TASKBOARD_PASSWORD") or getpass.getpass()
        await client.login(args.username, password)
        return Response(status="success", message=f"signed in as {args.username}")

    if args.command == "logout":
        client.logout()
        return Response(status="success", message="signed out")

    data = await client.get_json(args.path)
    return Response(status="success", message=f"GET {args.path}", data=data)


def report(response: Response) -> int:
    """Print a command outcome; returns the process exit code."""
    if response.status == "error":
        print(f"error: {response.message}", file=sys.stderr)
        for suggestion in response.suggestions:
            print(f"  - {suggestion}", file=sys.stderr)
        return 1

    if response.data is not None:
        print(json.dumps(response.data, indent=2))
    else:
        print(response.message)
    return 0


async def run(args: argparse.Namespace, config: Config) -> int:
    """Execute one command; returns the process exit code."""
    async with SessionClient(config) as client:
        try:
            response = await execute(args, client)
        except (TaskboardClientError, httpx.HTTPError) as e:
            response = Response.from_error(e)
            logger.debug(f"{args.command} failed: {response.metadata}")
    return report(response)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    config = Config()
    setup_logging(config.log_level)
    logger.debug(f"Running {args.command}")
    return asyncio.run(run(args, config))


if __name__ == "__main__":
    sys.exit(main())
