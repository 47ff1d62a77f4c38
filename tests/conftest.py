"""Test fixtures for the URL shortener application."""

import os

# Must be set before the settings singleton is created on first import
os.environ["ENVIRONMENT"] = "testing"
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.core.config import settings
from app.main import app as main_app
from app.repositories.url_repository import URLRepository, init_storage


@pytest.fixture
def storage_path(tmp_path) -> str:
    """Path of an SQLite database file private to the test."""
    return str(tmp_path / "storage" / "storage.db")


@pytest_asyncio.fixture
async def url_repository(storage_path) -> AsyncGenerator[URLRepository, None]:
    """Create an isolated, initialized URL store."""
    repository = await init_storage(storage_path)
    try:
        yield repository
    finally:
        await repository.dispose()


@pytest.fixture
def client(monkeypatch, storage_path) -> Generator[TestClient, None, None]:
    """Return a TestClient whose startup opens the test's private storage."""
    monkeypatch.setattr(settings, "DATABASE_URL", None)
    monkeypatch.setattr(settings, "STORAGE_PATH", storage_path)
    with TestClient(main_app) as test_client:
        yield test_client
