"""Command line front end for the Fortune API client."""

import argparse
import sys

import httpx

from fortune.client.api_client import (
    FortuneApiClient,
    FortuneApiError,
    new_fortune_api_client,
)
from fortune.core.logging import configure_logging
from fortune.core.settings import ClientSettings


def _add_url(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-u",
        "--url",
        required=True,
        help="The base url of the Fortune API (e.g. http://fortune.shinton.net)",
    )


def _add_token(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-a",
        "--auth-token",
        required=True,
        help="The bearer token to use to authenticate this call",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with ``get``, ``get-all`` and ``add``."""
    parser = argparse.ArgumentParser(
        prog="fortune-client",
        description="Utility for querying the fortune api",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    get = subparsers.add_parser("get", help="Get a new fortune")
    _add_url(get)

    get_all = subparsers.add_parser("get-all", help="Get all fortunes")
    _add_url(get_all)
    _add_token(get_all)

    add = subparsers.add_parser("add", help="Add a new fortune to the list")
    _add_url(add)
    _add_token(add)
    add.add_argument("-f", "--fortune", required=True, help="The fortune to add")
    return parser


def run(args: argparse.Namespace, client: FortuneApiClient) -> int:
    """Execute the parsed command against ``client``."""
    if args.command == "get":
        print(client.get_fortune())
        return 0

    client.update_bearer_token(args.auth_token)
    if args.command == "get-all":
        for fortune in client.get_all_fortunes():
            print(fortune)
        return 0

    if client.add_fortune(args.fortune):
        print("Fortune successfully added")
    else:
        print("Unable to add fortune")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Console entry point for ``fortune-client``.

    TLS trust for self-signed servers comes from ``FORTUNE_SSL_CERTS``.
    """
    args = build_parser().parse_args(argv)
    settings = ClientSettings(url=args.url)
    configure_logging("WARNING")

    with new_fortune_api_client(settings) as client:
        try:
            return run(args, client)
        except (FortuneApiError, httpx.HTTPError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    sys.exit(main())
