"""Main entry point for running the Forum FastAPI application."""

import os

import uvicorn
from loguru import logger

from forum.api.main import app
from forum.core.config import get_settings
from forum.core.logging import setup_logging


def main() -> None:
    """Main entry point for the Forum application."""
    settings = get_settings()

    setup_logging(settings)

    # Managed platforms hand the listening port in PORT
    port = int(os.environ.get("PORT", settings.api_port))

    # Route uvicorn's own loggers through Loguru
    log_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "handlers": {
            "default": {
                "class": "forum.core.logging.InterceptHandler",
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.error": {
                "handlers": ["default"],
                "level": "INFO",
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": ["default"],
                "level": "INFO",
                "propagate": False,
            },
        },
    }

    # Reload needs the app as an import string
    if settings.debug:
        logger.info(
            "Starting Uvicorn on http://{}:{} (development mode with auto-reload)",
            settings.api_host,
            port,
        )
        uvicorn.run(
            "forum.api.main:app",
            host=settings.api_host,
            port=port,
            reload=True,
            log_config=log_config,
        )
    else:
        logger.info(
            "Starting Uvicorn on http://{}:{} (production mode)",
            settings.api_host,
            port,
        )
        uvicorn.run(
            app,
            host=settings.api_host,
            port=port,
            reload=False,
            log_config=log_config,
        )


if __name__ == "__main__":
    main()
