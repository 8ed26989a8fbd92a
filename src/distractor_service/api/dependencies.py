from functools import lru_cache

from fastapi import Request

from distractor_service.api.config import ApiSettings
from distractor_service.config import EvaluationConfig


@lru_cache(maxsize=1)
def get_settings() -> ApiSettings:
    return ApiSettings()


def get_app_settings(request: Request) -> ApiSettings:
    settings: ApiSettings = request.app.state.settings
    return settings


def get_evaluation_config(request: Request) -> EvaluationConfig:
    config: EvaluationConfig = request.app.state.evaluation_config
    return config


def get_version() -> str:
    from distractor_service.config import _get_backend_version

    return _get_backend_version()
