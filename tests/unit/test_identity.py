"""
Unit tests for SessionIdentityResolver.
"""

import pytest
from starlette.requests import Request

from identity import SessionIdentityResolver


def make_request(headers=None):
    raw_headers = [(key.lower().encode(), value.encode()) for key, value in (headers or {}).items()]
    return Request({"type": "http", "method": "POST", "path": "/", "headers": raw_headers})


@pytest.mark.asyncio
class TestSessionIdentityResolver:
    """Test cases for resolving callers from session tokens."""

    async def test_bearer_token_resolves_user(self, redis_client):
        await redis_client.hset("session:tok1", mapping={"steamid": "U1", "username": "alice"})
        resolver = SessionIdentityResolver(redis_client)

        user = await resolver.whoami(make_request({"Authorization": "Bearer tok1"}))

        assert user.steamid == "U1"
        assert user.username == "alice"

    async def test_cookie_token_resolves_user(self, redis_client):
        await redis_client.hset("session:tok2", mapping={"steamid": "U2"})
        resolver = SessionIdentityResolver(redis_client)

        user = await resolver.whoami(make_request({"Cookie": "session=tok2"}))

        assert user.steamid == "U2"
        assert user.username is None

    async def test_no_token_is_anonymous(self, redis_client):
        resolver = SessionIdentityResolver(redis_client)

        assert await resolver.whoami(make_request()) is None

    async def test_unknown_token_is_anonymous(self, redis_client):
        resolver = SessionIdentityResolver(redis_client)

        assert await resolver.whoami(make_request({"Authorization": "Bearer missing"})) is None

    async def test_session_without_steamid_is_anonymous(self, redis_client):
        await redis_client.hset("session:tok3", mapping={"username": "ghost"})
        resolver = SessionIdentityResolver(redis_client)

        assert await resolver.whoami(make_request({"Authorization": "Bearer tok3"})) is None

    async def test_non_bearer_authorization_falls_back_to_cookie(self, redis_client):
        await redis_client.hset("session:tok4", mapping={"steamid": "U4"})
        resolver = SessionIdentityResolver(redis_client)

        request = make_request({"Authorization": "Basic abc", "Cookie": "session=tok4"})
        assert (await resolver.whoami(request)).steamid == "U4"
