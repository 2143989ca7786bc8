"""Helpers that render the REST envelope."""

from http import HTTPStatus
from typing import Any

from starlette.responses import JSONResponse

from fortune.api.schemas import RestResponse, RestResponseStatus


def envelope(
    code: int,
    data: Any = None,
    message: str | None = None,
) -> JSONResponse:
    """Wrap ``data`` in the envelope with the given HTTP status code.

    The message defaults to the standard reason phrase for ``code``.
    """
    outcome = (
        RestResponseStatus.SUCCESS
        if HTTPStatus.OK <= code < HTTPStatus.MULTIPLE_CHOICES
        else RestResponseStatus.ERROR
    )
    if message is None and data is None:
        message = HTTPStatus(code).phrase
    body = RestResponse(status=outcome, code=code, message=message, data=data)
    return JSONResponse(body.model_dump(mode="json"), status_code=code)
