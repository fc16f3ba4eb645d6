"""Exception handlers rendering `{"error": ...}` bodies."""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def create_json_error_response(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Create a JSON error response."""
    return JSONResponse(
        status_code=status_code, content={"error": message}, headers=headers
    )


async def http_error_handler(_: Request, exc: StarletteHTTPException) -> Response:
    """Render HTTP errors raised by routes, guards and routing."""
    return create_json_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        headers=exc.headers,
    )


async def validation_error_handler(_: Request, exc: RequestValidationError) -> Response:
    """Render malformed request bodies and parameters as 400."""
    logger.info("Rejected request: %s", exc)
    return create_json_error_response(
        status_code=400, message="Invalid request body"
    )
