import logging

import uvicorn

from distractor_service.api.app import create_app
from distractor_service.api.dependencies import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()
    app = create_app(settings)
    logger.info(
        f"Serving distractor evaluation on {settings.host}:{settings.port} "
        f"(preset '{settings.preset}')"
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
