"""
Shared database handle.

One client is connected at startup and shared by every route module through
`app.state.db` (see get_db). Pooling and concurrency are left to the driver.
"""
from __future__ import annotations
import asyncio
from datetime import timedelta
from typing import Any, Callable, Optional

from fastapi import Request

from errors import DatabaseConnectError


def prisma_factory(url: str) -> Any:
    # Imported lazily: the Prisma package only works once `prisma generate` has run
    from prisma import Prisma

    return Prisma(datasource={"url": url})


class Database:
    def __init__(self, url: Optional[str] = None,
                 client_factory: Callable[[str], Any] = prisma_factory) -> None:
        self._url = url
        self._client_factory = client_factory
        self._client: Any = None
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def client(self) -> Any:
        if not self._connected:
            raise RuntimeError("Database is not connected")
        return self._client

    async def connect(self, timeout: float) -> None:
        """
        Connect once, bounded by `timeout` seconds.

        Any failure, a timeout included, is raised as DatabaseConnectError.
        No retry: the process supervisor restarts us.
        """
        if self._connected:
            return
        if not self._url:
            raise DatabaseConnectError("no connection string configured")

        try:
            if self._client is None:
                self._client = self._client_factory(self._url)
            await asyncio.wait_for(
                self._client.connect(timeout=timedelta(seconds=timeout)), timeout=timeout
            )
        except asyncio.TimeoutError as e:
            raise DatabaseConnectError(f"timed out after {timeout:g}s") from e
        except DatabaseConnectError:
            raise
        except Exception as e:
            raise DatabaseConnectError(str(e) or e.__class__.__name__) from e
        self._connected = True

    async def disconnect(self) -> None:
        if not self._connected:
            return
        self._connected = False
        await self._client.disconnect()


def get_db(request: Request) -> Database:
    """FastAPI dependency for route modules."""
    return request.app.state.db
