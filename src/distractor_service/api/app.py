import uuid
from collections.abc import Awaitable, Callable
from typing import cast

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.types import ExceptionHandler

from distractor_service.api.config import ApiSettings
from distractor_service.api.dependencies import get_settings
from distractor_service.api.errors import (
    DataSizeExceededError,
    data_size_exceeded_handler,
    invalid_input_handler,
    unhandled_exception_handler,
    validation_error_handler,
)
from distractor_service.api.routes import router
from distractor_service.config import EvaluationConfig, get_preset
from distractor_service.core.exceptions import InvalidInputError


def create_app(
    settings: ApiSettings | None = None,
    evaluation_config: EvaluationConfig | None = None,
) -> FastAPI:
    if settings is None:
        settings = get_settings()
    if evaluation_config is None:
        evaluation_config = get_preset(settings.preset)

    app = FastAPI(title="Distractor Evaluation API")
    app.state.settings = settings
    app.state.evaluation_config = evaluation_config

    # Handlers take specific exception types; FastAPI is typed for Exception
    _eh = cast(ExceptionHandler, invalid_input_handler)
    app.add_exception_handler(InvalidInputError, _eh)
    _eh = cast(ExceptionHandler, data_size_exceeded_handler)
    app.add_exception_handler(DataSizeExceededError, _eh)
    _eh = cast(ExceptionHandler, validation_error_handler)
    app.add_exception_handler(ValidationError, _eh)
    app.add_exception_handler(RequestValidationError, _eh)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Request-ID middleware
    @app.middleware("http")
    async def request_id_middleware(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get("X-Request-ID", uuid.uuid4().hex[:12])
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    app.include_router(router)

    return app
