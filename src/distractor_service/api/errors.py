import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from distractor_service.api.schemas import ErrorDetail
from distractor_service.core.exceptions import InvalidInputError

logger = logging.getLogger(__name__)


class DataSizeExceededError(Exception):
    """Request is larger than the limits in `ApiSettings`."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def _get_request_id(request: Request) -> str | None:
    if hasattr(request.state, "request_id"):
        result: str = request.state.request_id
        return result
    return None


def _reject(request: Request, code: str, message: str) -> JSONResponse:
    request_id = _get_request_id(request)
    logger.warning(f"Rejected request {request_id} ({code}): {message}")
    detail = ErrorDetail(code=code, message=message, request_id=request_id)
    return JSONResponse(status_code=422, content=detail.model_dump())


async def invalid_input_handler(
    request: Request, exc: InvalidInputError
) -> JSONResponse:
    return _reject(request, "INVALID_INPUT", exc.message)


async def data_size_exceeded_handler(
    request: Request, exc: DataSizeExceededError
) -> JSONResponse:
    return _reject(request, "DATA_SIZE_EXCEEDED", exc.message)


async def validation_error_handler(
    request: Request, exc: ValidationError | RequestValidationError
) -> JSONResponse:
    return _reject(request, "VALIDATION_ERROR", str(exc))


async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    logger.exception("Unhandled exception")
    detail = ErrorDetail(
        code="INTERNAL_ERROR",
        message="Internal server error",
        request_id=_get_request_id(request),
    )
    return JSONResponse(status_code=500, content=detail.model_dump())
