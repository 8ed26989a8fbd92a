from pydantic_settings import BaseSettings

DISTRACTOR_ENV_PREFIX = "DISTRACTOR_"


class ApiSettings(BaseSettings):
    model_config = {"env_prefix": DISTRACTOR_ENV_PREFIX}

    max_total_samples: int = 100_000
    max_personas: int = 12
    max_responses: int = 200_000
    preset: str = "default"
    host: str = "127.0.0.1"
    port: int = 8000
