import logging
import os
import sys

LOG_LEVEL_ENV = "DISTRACTOR_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    """
    Attach a stdout handler to the root logger.

    The level defaults to $DISTRACTOR_LOG_LEVEL, then INFO. Calling this
    again only updates the level.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level_name)

    if not any(
        getattr(h, "_distractor_service", False) for h in root_logger.handlers
    ):
        # Handler passes everything; filtering happens on the loggers
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._distractor_service = True  # type: ignore[attr-defined]
        root_logger.addHandler(handler)

    # Request logs from the test client and event loop are noise
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


configure_logging()
