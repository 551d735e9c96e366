"""
Exception handlers - map validation failures to the API envelope.

Request validation errors become 400 responses with one message per
offending field, instead of FastAPI's default 422 payload.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.models import ApiResponse

logger = logging.getLogger(__name__)


def error_response(
    message: str, errors: list[str] | tuple[str, ...] = (), status_code: int = 400
) -> JSONResponse:
    """Build a failure envelope response."""
    body = ApiResponse(success=False, message=message, errors=list(errors))
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def _format_error(error: dict) -> str:
    location = [str(part) for part in error.get("loc", ()) if part != "body"]
    message = error.get("msg", "Invalid value")
    return f"{'.'.join(location)}: {message}" if location else message


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [_format_error(error) for error in exc.errors()]
    logger.warning("Validation failed for %s: %s", request.url.path, ", ".join(errors))
    return error_response("Validation failed", errors, status.HTTP_400_BAD_REQUEST)


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
