"""FastAPI dependencies for bearer token authorization."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from fortune.crypto.bearer_token import BearerTokenAuthority

logger = logging.getLogger(__name__)


def get_authority(request: Request) -> BearerTokenAuthority:
    """Return the token authority built at startup."""
    return request.app.state.token_authority


def caller_address(request: Request) -> str:
    """Best guess at the caller's address, honouring X-Forwarded-For."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded.strip():
        return forwarded
    if request.client is None:
        return "unknown"
    return request.client.host


def require_bearer_token(api_path: str) -> Callable[..., str]:
    """Dependency factory: require a token bound to ``api_path``."""

    def _check(
        request: Request,
        authority: Annotated[BearerTokenAuthority, Depends(get_authority)],
        authorization: Annotated[str | None, Header()] = None,
    ) -> str:
        if not authority.validate(authorization, api_path):
            logger.warning(
                "Unauthorized %s %s (%s)",
                request.method,
                request.url.path,
                caller_address(request),
            )
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                headers={"WWW-Authenticate": "Bearer"},
            )
        return authorization or ""

    return _check
