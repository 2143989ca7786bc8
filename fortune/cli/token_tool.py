"""Operator CLI for minting bearer tokens and signing keys."""

import argparse
import sys

from fortune.crypto.bearer_token import BearerTokenAuthority, new_signing_key
from fortune.crypto.types import ConfigurationError

DEFAULT_EXPIRES_IN = 86400
DEFAULT_API_PATH = "/api/v1/fortune"


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with ``token`` and ``key`` subcommands."""
    parser = argparse.ArgumentParser(
        prog="fortune-token",
        description="Utility for working with bearer tokens",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    token = subparsers.add_parser("token", help="Generate a bearer token")
    token.add_argument(
        "-k",
        "--signing-key",
        required=True,
        help="A Base64 encoded HS512 signing key",
    )
    token.add_argument(
        "-p",
        "--public-host",
        required=True,
        help="The public hostname of the api (e.g. fortune.shinton.net)",
    )
    token.add_argument(
        "-e",
        "--expires-in",
        type=int,
        default=DEFAULT_EXPIRES_IN,
        help=f"Seconds the token stays valid (default: {DEFAULT_EXPIRES_IN})",
    )
    token.add_argument(
        "-a",
        "--api-path",
        default=DEFAULT_API_PATH,
        help=f"The API path for the token (default: {DEFAULT_API_PATH})",
    )

    subparsers.add_parser("key", help="Generate a signing key")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Console entry point for ``fortune-token``."""
    args = build_parser().parse_args(argv)

    if args.command == "key":
        print(new_signing_key())
        return 0

    try:
        authority = BearerTokenAuthority(args.signing_key, args.public_host)
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    print(authority.generate(args.expires_in, args.api_path))
    return 0


if __name__ == "__main__":
    sys.exit(main())
