"""
App entrypoint.

- create_app() wires the middleware pipeline and the route table.
- main() is the console entrypoint: it runs the startup sequence and exits with
  its status (1 on missing MONGO_URI or a failed database connect).

Request pipeline (outermost first): admission filter (CORS) -> JSON body parser
-> route dispatch.
"""
from __future__ import annotations
import asyncio
import logging
import os
import sys
from typing import Optional

from fastapi import FastAPI

import routers
from config import Settings, load_settings
from cors import AdmissionMiddleware
from db.client import Database
from errors import ConfigurationError, register_exception_handlers
from json_body import JSONBodyMiddleware
from logging_config import setup_logging
from startup import StartupSequencer

logger = logging.getLogger(__name__)


def create_app(settings: Settings, database: Optional[Database] = None) -> FastAPI:
    app = FastAPI(
        title="Concept Map Learning Backend",
        version=settings.version,
        description="HTTP entrypoint mounting the learning backend route groups",
    )
    app.state.settings = settings
    app.state.db = database if database is not None else Database(settings.database_url)

    register_exception_handlers(app)
    routers.mount_routes(app)

    # Starlette runs the last added middleware first
    app.add_middleware(JSONBodyMiddleware, limit=settings.json_body_limit)
    app.add_middleware(AdmissionMiddleware, settings=settings)
    return app


def main() -> int:
    setup_logging(os.getenv("LOG_LEVEL", "INFO"))
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.critical("Invalid configuration for %s: %s", e.key, e)
        return 1
    # LOG_LEVEL may only be set in .env, which load_settings() has now read
    logging.getLogger().setLevel(settings.log_level)

    outcome = asyncio.run(StartupSequencer(settings, app_factory=create_app).run())
    return outcome.exit_code


if __name__ == "__main__":
    sys.exit(main())
