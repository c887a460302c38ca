"""structlog configuration.

Call ``configure_logging()`` once from the composition root. Library modules
only do ``structlog.get_logger(__name__)``.
"""

import logging
import sys

import structlog

from swr_cache.config import settings


def configure_logging(level: str | None = None, json: bool | None = None) -> None:
    """Route structlog through stdlib logging with key/value rendering.

    Args:
        level: Log level name. Defaults to settings.
        json: Render JSON lines instead of console output. Defaults to settings.
    """
    level_name = (level or settings.log_level).upper()
    use_json = settings.log_json if json is None else json

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level_name, logging.INFO),
    )

    renderer = structlog.processors.JSONRenderer() if use_json else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
