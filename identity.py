from typing import Optional

import redis.asyncio as redis
from starlette.requests import HTTPConnection

from constants import SESSION_COOKIE_NAME
from logging_config import get_logger
from redis_keys import SESSION_KEY
from schemas.users import User

logger = get_logger(__name__)


class SessionIdentityResolver:
    """Resolves the caller of a request from a session record kept in Redis.

    Sessions are written by the login service; this side only reads them.
    The token comes from an ``Authorization: Bearer`` header, falling back to
    the session cookie.
    """

    def __init__(self, redis_client: redis.Redis, cookie_name: str = SESSION_COOKIE_NAME):
        self.redis_client = redis_client
        self.cookie_name = cookie_name

    def _extract_token(self, request: HTTPConnection) -> Optional[str]:
        authorization = request.headers.get("authorization", "")
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
        return request.cookies.get(self.cookie_name) or None

    async def whoami(self, request: HTTPConnection) -> Optional[User]:
        token = self._extract_token(request)
        if not token:
            return None
        session = await self.redis_client.hgetall(SESSION_KEY.format(token=token))
        if not session or not session.get("steamid"):
            logger.debug("Session token did not resolve to a user")
            return None
        return User(steamid=session["steamid"], username=session.get("username"))
