"""
Global pytest configuration and fixtures.
Provides an in-memory Redis and the lobby collaborators built on top of it.
"""

import os

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis, FakeServer

# Keep test output readable
os.environ.setdefault("LOG_LEVEL", "WARNING")

from backend import LobbyRegistry
from dispatcher import LobbyDispatcher
from schemas.users import User


class RequestAsIdentityResolver:
    """Identity resolver for tests: the request context *is* the caller (or None)."""

    async def whoami(self, request):
        return request


@pytest_asyncio.fixture
async def redis_client():
    """Fresh fake Redis server per test."""
    client = FakeAsyncRedis(server=FakeServer(), decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def registry(redis_client):
    return LobbyRegistry(redis_client, ttl=600)


@pytest.fixture
def identity_resolver():
    return RequestAsIdentityResolver()


@pytest.fixture
def dispatcher(registry, identity_resolver):
    return LobbyDispatcher(registry=registry, identity_resolver=identity_resolver)


@pytest.fixture
def u1():
    return User(steamid="76561198000000001", username="alice")


@pytest.fixture
def u2():
    return User(steamid="76561198000000002", username="bob")
