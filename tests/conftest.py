from __future__ import annotations
import asyncio

import pytest
from fastapi.testclient import TestClient

from config import Settings
from db.client import Database
from main import create_app

ALLOWED = "http://localhost:3000"
DEPLOYED = "https://frontend-project-1-jlrj.onrender.com"
EVIL = "http://evil.example.com"


class FakePrisma:
    """Stands in for the generated Prisma client."""

    def __init__(self, fail: Exception | None = None, hang: bool = False) -> None:
        self.fail = fail
        self.hang = hang
        self.connect_calls = 0
        self.disconnect_calls = 0

    async def connect(self, timeout=None) -> None:
        self.connect_calls += 1
        if self.hang:
            await asyncio.sleep(60)
        if self.fail is not None:
            raise self.fail

    async def disconnect(self) -> None:
        self.disconnect_calls += 1


def make_database(fake: FakePrisma, url: str | None = "mongodb://localhost:27017/test") -> Database:
    return Database(url, client_factory=lambda _url: fake)


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="mongodb://localhost:27017/test")


@pytest.fixture
def app(settings):
    return create_app(settings, make_database(FakePrisma()))


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
