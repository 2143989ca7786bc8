"""Path-scoped bearer tokens signed with HS512."""

import base64
import binascii
import logging
import secrets
import time

import jwt

from fortune.crypto.types import ConfigurationError, TokenClaims, ValidationFailure

logger = logging.getLogger(__name__)

ISSUER = "shinton.net"
TOKEN_PREFIX = "Bearer "
PATH_DELIMITER = "/"
ALGORITHM = "HS512"
SIGNING_KEY_BYTES = 64
REQUIRED_CLAIMS = ["iss", "aud", "iat", "exp"]


def join_path(first: str, second: str) -> str:
    """Join a host and a path with exactly one delimiter between them."""
    if first.endswith(PATH_DELIMITER):
        first = first[:-1]
    if second.startswith(PATH_DELIMITER):
        second = second[1:]
    return first + PATH_DELIMITER + second


def new_signing_key() -> str:
    """Generate a Base64 signing key long enough for HS512."""
    return base64.b64encode(secrets.token_bytes(SIGNING_KEY_BYTES)).decode()


def decode_signing_key(signing_key: str) -> bytes:
    """Decode a Base64 signing key, rejecting anything too short for HS512."""
    if not signing_key or not signing_key.strip():
        raise ConfigurationError("JWT signing key is not configured")
    try:
        key = base64.b64decode(signing_key.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ConfigurationError("JWT signing key is not valid Base64") from exc
    if len(key) < SIGNING_KEY_BYTES:
        raise ConfigurationError(
            f"JWT signing key must be at least {SIGNING_KEY_BYTES * 8} bits, "
            f"got {len(key) * 8}"
        )
    return key


class BearerTokenAuthority:
    """Issues and validates bearer tokens bound to one API path on one host.

    The signing key is decoded once at construction so that a bad key fails
    the process at startup instead of on every request. Instances hold no
    mutable state and may be shared between request handlers.
    """

    def __init__(self, signing_key: str, public_host: str) -> None:
        self._key = decode_signing_key(signing_key)
        self._public_host = public_host

    @property
    def public_host(self) -> str:
        return self._public_host

    def audience_for(self, api_path: str) -> str:
        """Return the audience a token for ``api_path`` must carry."""
        return join_path(self._public_host, api_path)

    def generate(self, expires_in: int, api_path: str) -> str:
        """Mint a token valid for ``expires_in`` seconds (may be negative)."""
        now = int(time.time())
        claims = TokenClaims(
            iss=ISSUER,
            aud=self.audience_for(api_path),
            iat=now,
            exp=now + expires_in,
        )
        return TOKEN_PREFIX + jwt.encode(
            claims.model_dump(), self._key, algorithm=ALGORITHM
        )

    def check(self, token: str | None, api_path: str) -> ValidationFailure | None:
        """Return why ``token`` is unacceptable for ``api_path``, or None."""
        if token is None or not token.strip():
            return ValidationFailure.EMPTY_TOKEN
        if not token.startswith(TOKEN_PREFIX):
            return ValidationFailure.MISSING_SCHEME_PREFIX

        try:
            raw = jwt.decode(
                token[len(TOKEN_PREFIX) :],
                self._key,
                algorithms=[ALGORITHM],
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_aud": False,
                    "verify_iat": False,
                    "verify_iss": False,
                },
            )
            claims = TokenClaims.model_validate(raw)
        except jwt.ExpiredSignatureError:
            return ValidationFailure.EXPIRED
        except jwt.InvalidSignatureError:
            return ValidationFailure.SIGNATURE_INVALID
        except (jwt.PyJWTError, ValueError):
            return ValidationFailure.MALFORMED_ENVELOPE

        if claims.iss != ISSUER:
            return ValidationFailure.ISSUER_MISMATCH
        if claims.aud.lower() != self.audience_for(api_path).lower():
            return ValidationFailure.AUDIENCE_MISMATCH
        return None

    def validate(self, token: str | None, api_path: str) -> bool:
        """Return True only for an unexpired token bound to ``api_path``."""
        try:
            failure = self.check(token, api_path)
        except Exception:
            logger.exception("Unexpected error while validating bearer token")
            return False
        if failure is not None:
            logger.warning(
                "Rejected bearer token for %s: %s", api_path, failure.value
            )
            return False
        return True
