"""
Test configuration and fixtures for the Webinar Referral Bot API.

Every test gets a fresh in-memory store and app instance. Message delays
are scaled to zero so scripted messages reveal on the next loop iteration.
"""

import os
from typing import Generator

os.environ["STORAGE_BACKEND"] = "memory"
os.environ["MESSAGE_DELAY_SCALE"] = "0"
os.environ["PUBLIC_ORIGIN"] = ""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from webinar_bot.platform.storage.memory import InMemoryStore


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def test_app(store):
    """Create a FastAPI application bound to the test store."""
    from webinar_bot.main import create_app

    return create_app(store=store)


@pytest.fixture(scope="function")
def client(test_app) -> Generator[TestClient, None, None]:
    with TestClient(test_app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def async_client(test_app):
    """Client running on the test's event loop, so reveal timers fire between requests."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://testserver",
    ) as ac:
        yield ac
    test_app.state.chat_sessions.shutdown()
