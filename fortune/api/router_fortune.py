"""Fortune quote endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import JSONResponse

from fortune.api.deps import caller_address, require_bearer_token
from fortune.api.responses import envelope
from fortune.api.schemas import FortunePayload
from fortune.db.engine import get_session
from fortune.db.repo_fortune import (
    DuplicateFortuneError,
    add_fortune,
    get_all_fortunes,
    get_random_fortune,
)

logger = logging.getLogger(__name__)

FORTUNE_PATH = "/api/v1/fortune"
FORTUNE_ALL_PATH = "/api/v1/fortune/all"

router = APIRouter(tags=["fortune"])

DbSession = Annotated[AsyncSession, Depends(get_session)]
# Listing and adding share the audience of the base path.
FortuneToken = Annotated[str, Depends(require_bearer_token(FORTUNE_PATH))]


@router.get(FORTUNE_PATH)
async def get_fortune(request: Request, db: DbSession) -> JSONResponse:
    """GET /api/v1/fortune -- return one random fortune."""
    logger.debug("GET fortune (%s)", caller_address(request))
    fortune = await get_random_fortune(db)
    if fortune is None:
        return envelope(status.HTTP_404_NOT_FOUND, message="No fortunes available")
    return envelope(status.HTTP_200_OK, {"fortune": fortune})


@router.get(FORTUNE_ALL_PATH)
async def list_fortunes(
    request: Request, db: DbSession, _token: FortuneToken
) -> JSONResponse:
    """GET /api/v1/fortune/all -- return every fortune."""
    logger.debug("GET all fortunes (%s)", caller_address(request))
    return envelope(status.HTTP_200_OK, await get_all_fortunes(db))


@router.post(FORTUNE_PATH)
async def create_fortune(
    request: Request,
    db: DbSession,
    _token: FortuneToken,
) -> JSONResponse:
    """POST /api/v1/fortune -- add a fortune.

    The body is read here rather than declared as a parameter so that the
    bearer token is checked before any JSON is parsed.
    """
    logger.debug("POST fortune (%s)", caller_address(request))
    try:
        payload = FortunePayload.model_validate_json(await request.body())
    except ValidationError as exc:
        logger.info("Rejected malformed request body: %s", exc.errors())
        return envelope(status.HTTP_400_BAD_REQUEST, message="Malformed request body")

    if payload.fortune is None or not payload.fortune.strip():
        return envelope(
            status.HTTP_400_BAD_REQUEST, message="Parameter 'fortune' is required"
        )

    try:
        await add_fortune(db, payload.fortune)
    except DuplicateFortuneError:
        logger.info("Add failed due to duplicate fortune: %s", payload.fortune)
        return envelope(status.HTTP_409_CONFLICT)
    return envelope(status.HTTP_201_CREATED)
