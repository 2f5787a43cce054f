"""Map short link errors onto `{code, message}` JSON responses."""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shortlinks.errors import (
    CodeGenerationExhausted,
    DuplicateCode,
    InvalidInput,
    NotFound,
    ShortLinkError,
    StorageFailure,
)

logger = logging.getLogger("shortlinks.web")

STATUS_BY_ERROR = (
    (InvalidInput, status.HTTP_400_BAD_REQUEST),
    (DuplicateCode, status.HTTP_409_CONFLICT),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (CodeGenerationExhausted, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (StorageFailure, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"code": code, "message": message})


def exception_response(exc: ShortLinkError) -> JSONResponse:
    """Build the response for a short link error.

    Storage details are logged, never returned to the caller.
    """
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            break
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if isinstance(exc, StorageFailure):
        logger.error(f"{exc.operation} failed: {exc.detail}")
        return error_response(status_code, exc.code, "Storage failure, please retry later")
    return error_response(status_code, exc.code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", "invalid value")
    else:
        message = "Invalid request"
    return error_response(status.HTTP_400_BAD_REQUEST, InvalidInput.code, message)
