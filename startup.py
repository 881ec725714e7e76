"""
Startup sequence: configuration -> database -> listener.

    INITIALIZING -> CONFIG_VALIDATED -> DATABASE_CONNECTING -> LISTENING
    INITIALIZING -> CONFIG_MISSING -> TERMINATED
    DATABASE_CONNECTING -> DATABASE_CONNECT_FAILED -> TERMINATED

The listener is only bound after the database connect has succeeded; route
handlers assume a live connection on their first request. Failures are never
retried, the process supervisor is expected to restart us.
"""
from __future__ import annotations
import contextlib
import enum
import logging
import signal
import threading
from dataclasses import dataclass
from typing import Awaitable, Callable, Generator, List, Optional, Tuple

import uvicorn
from uvicorn.server import HANDLED_SIGNALS
from fastapi import FastAPI

from config import DATABASE_URL_ENV, Settings
from db.client import Database
from errors import DatabaseConnectError

logger = logging.getLogger(__name__)

AppFactory = Callable[[Settings, Database], FastAPI]
Serve = Callable[[FastAPI, Settings], Awaitable[None]]


class StartupState(str, enum.Enum):
    INITIALIZING = "initializing"
    CONFIG_VALIDATED = "config_validated"
    DATABASE_CONNECTING = "database_connecting"
    LISTENING = "listening"
    CONFIG_MISSING = "config_missing"
    DATABASE_CONNECT_FAILED = "database_connect_failed"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class StartupOutcome:
    state: StartupState
    exit_code: int
    reason: Optional[str] = None
    history: Tuple[StartupState, ...] = ()

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ListenerServer(uvicorn.Server):
    """
    uvicorn server used by the startup sequence.

    - SIGINT/SIGTERM end serving gracefully and are not re-raised afterwards, so
      the sequence can disconnect the database and exit 0.
    - The listening port is logged once the socket is bound.
    """

    @property
    def bound_port(self) -> Optional[int]:
        for server in getattr(self, "servers", None) or []:
            for sock in server.sockets or ():
                return sock.getsockname()[1]
        return None

    @contextlib.contextmanager
    def capture_signals(self) -> Generator[None, None, None]:
        if threading.current_thread() is not threading.main_thread():
            yield
            return
        original = {sig: signal.signal(sig, self.handle_exit) for sig in HANDLED_SIGNALS}
        try:
            yield
        finally:
            for sig, handler in original.items():
                signal.signal(sig, handler)

    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            logger.info("Server running on port %s", self.bound_port)


async def uvicorn_serve(app: FastAPI, settings: Settings) -> None:
    """Bind the listener and serve until a shutdown signal arrives."""
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,  # keep the root handlers from setup_logging
        log_level=settings.log_level.lower(),
    )
    await ListenerServer(config).serve()


class StartupSequencer:
    def __init__(self, settings: Settings, app_factory: AppFactory,
                 database: Optional[Database] = None,
                 serve: Serve = uvicorn_serve) -> None:
        self.settings = settings
        self.database = database if database is not None else Database(settings.database_url)
        self._app_factory = app_factory
        self._serve = serve
        self._history: List[StartupState] = [StartupState.INITIALIZING]

    @property
    def state(self) -> StartupState:
        return self._history[-1]

    def _enter(self, state: StartupState) -> None:
        logger.debug("startup: %s -> %s", self.state.value, state.value)
        self._history.append(state)

    def _terminate(self, reason: str) -> StartupOutcome:
        self._enter(StartupState.TERMINATED)
        return StartupOutcome(StartupState.TERMINATED, 1, reason, tuple(self._history))

    async def run(self) -> StartupOutcome:
        if self.state is not StartupState.INITIALIZING:
            raise RuntimeError("StartupSequencer.run() can only be called once")

        if not self.settings.has_database_url:
            logger.critical("%s not defined in environment or .env file", DATABASE_URL_ENV)
            self._enter(StartupState.CONFIG_MISSING)
            return self._terminate(f"{DATABASE_URL_ENV} not defined")
        self._enter(StartupState.CONFIG_VALIDATED)

        self._enter(StartupState.DATABASE_CONNECTING)
        try:
            await self.database.connect(self.settings.db_connect_timeout)
        except DatabaseConnectError as e:
            logger.critical("MongoDB connection error: %s", e.reason)
            self._enter(StartupState.DATABASE_CONNECT_FAILED)
            return self._terminate(e.reason)
        logger.info("MongoDB connected")

        app = self._app_factory(self.settings, self.database)
        self._enter(StartupState.LISTENING)
        try:
            await self._serve(app, self.settings)
        finally:
            await self.database.disconnect()
            logger.info("MongoDB disconnected")

        return StartupOutcome(StartupState.LISTENING, 0, None, tuple(self._history))
