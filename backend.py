## Redis Schema / Keys


# **Key naming conventions**
# - `lobby:meta:{name}` - hash (name, owner, created_at, optional password digest)
# - `lobby:players:{name}` - sorted set of member ids scored by join time
# - `session:{token}` - hash written by the login service, read by identity.py


# **TTL**
# - Both lobby keys carry `LOBBY_TTL_SECONDS`, refreshed on every write.
# - A lobby nobody touches for that long is evicted by Redis itself.


# **Atomicity**
# - Writes are WATCH/MULTI transactions on the lobby's keys, retried on
#   conflict. A rename racing a join makes the join retry against the old
#   name and fail with LobbyNotFoundError instead of being dropped.
import time
from datetime import datetime
from typing import List, Optional

import redis.asyncio as redis
from redis.exceptions import WatchError

from constants import LOBBY_NAME_MAX_LENGTH, LOBBY_TTL_SECONDS, REDIS_TRANSACTION_RETRIES
from errors import InvalidLobbyNameError, InvalidPasswordError, LobbyConflictError, LobbyExistsError, LobbyNotFoundError
from logging_config import get_logger
from passwords import NO_PASSWORD, Credential, credential_matches
from redis_keys import LOBBY_META_KEY, LOBBY_META_PREFIX, LOBBY_PLAYERS_KEY
from schemas.lobbies import LobbyData, LobbySummary

logger = get_logger(__name__)


def validate_lobby_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidLobbyNameError("Lobby name is required")
    if len(name) > LOBBY_NAME_MAX_LENGTH:
        raise InvalidLobbyNameError(f"Lobby name must be at most {LOBBY_NAME_MAX_LENGTH} characters")
    return name


class LobbyRegistry:
    def __init__(self, redis_client: redis.Redis, ttl: int = LOBBY_TTL_SECONDS, max_retries: int = REDIS_TRANSACTION_RETRIES):
        self.redis_client = redis_client
        self.ttl = ttl
        self.max_retries = max_retries
        logger.info(f"Initializing LobbyRegistry with ttl={ttl}s, max_retries={max_retries}")

    @staticmethod
    def _meta_key(name: str) -> str:
        return LOBBY_META_KEY.format(name=name)

    @staticmethod
    def _players_key(name: str) -> str:
        return LOBBY_PLAYERS_KEY.format(name=name)

    def _queue_touch(self, pipe, *keys):
        for key in keys:
            pipe.expire(key, self.ttl)

    async def _transact(self, keys, body):
        """Run ``body(pipe)`` under WATCH on ``keys``, retrying when a concurrent write wins."""
        for attempt in range(1, self.max_retries + 1):
            async with self.redis_client.pipeline(transaction=True) as pipe:
                try:
                    await pipe.watch(*keys)
                    return await body(pipe)
                except WatchError:
                    logger.debug(f"Transaction on {keys} lost a race (attempt {attempt}/{self.max_retries})")
        logger.warning(f"Transaction on {keys} gave up after {self.max_retries} attempts")
        raise LobbyConflictError("Lobby is being modified concurrently, try again")

    async def list(self) -> List[LobbySummary]:
        logger.debug("Listing lobbies")
        summaries = []
        async for key in self.redis_client.scan_iter(match=f"{LOBBY_META_PREFIX}*", count=100):
            name = key[len(LOBBY_META_PREFIX):]
            try:
                summaries.append(await self.get(name))
            except LobbyNotFoundError:
                # Evicted or renamed between SCAN and fetch
                continue
        summaries.sort(key=lambda summary: summary.created_at, reverse=True)
        logger.debug(f"Found {len(summaries)} lobbies")
        return summaries

    async def create(self, name: str, password_hash: Optional[str], owner: str):
        """Create a lobby with ``owner`` as its first member in a single transaction."""
        validate_lobby_name(name)
        meta_key = self._meta_key(name)
        players_key = self._players_key(name)
        now = datetime.now()
        fields = {"name": name, "owner": owner, "created_at": now.isoformat()}
        if password_hash:
            fields["password"] = password_hash

        logger.info(f"Creating lobby {name!r} for owner {owner} (secured={bool(password_hash)})")
        async with self.redis_client.pipeline(transaction=True) as pipe:
            try:
                await pipe.watch(meta_key, players_key)
                if await pipe.exists(meta_key):
                    raise LobbyExistsError(name)
                pipe.multi()
                # Leftover members of an evicted lobby with the same name
                pipe.delete(players_key)
                pipe.hset(meta_key, mapping=fields)
                pipe.zadd(players_key, {owner: now.timestamp()})
                self._queue_touch(pipe, meta_key, players_key)
                await pipe.execute()
            except WatchError:
                raise LobbyExistsError(name) from None
        logger.debug(f"Lobby {name!r} created with key: {meta_key}")

    async def get(self, name: str) -> LobbySummary:
        validate_lobby_name(name)
        async with self.redis_client.pipeline(transaction=True) as pipe:
            pipe.hgetall(self._meta_key(name))
            pipe.zrange(self._players_key(name), 0, -1)
            meta, players = await pipe.execute()
        if not meta:
            logger.debug(f"Lobby {name!r} not found in Redis")
            raise LobbyNotFoundError(name)
        return LobbySummary(name=meta.get("name", name), players=players, created_at=meta.get("created_at", ""))

    async def getdata(self, name: str) -> LobbyData:
        validate_lobby_name(name)
        meta = await self.redis_client.hgetall(self._meta_key(name))
        if not meta:
            logger.debug(f"Lobby {name!r} not found in Redis")
            raise LobbyNotFoundError(name)
        return LobbyData(
            name=meta.get("name", name),
            owner=meta.get("owner"),
            created_at=meta.get("created_at", ""),
            password=meta.get("password"),
        )

    async def join(self, name: str, credential: Credential, member: str):
        validate_lobby_name(name)
        meta_key = self._meta_key(name)
        players_key = self._players_key(name)

        async def add_member(pipe):
            meta = await pipe.hgetall(meta_key)
            if not meta:
                raise LobbyNotFoundError(name)
            if not credential_matches(meta.get("password"), credential):
                detail = "Password required" if credential is NO_PASSWORD else "Invalid password"
                logger.warning(f"Join failed for {member} on lobby {name!r}: {detail}")
                raise InvalidPasswordError(detail)
            pipe.multi()
            # NX keeps the original join time when a member joins again
            pipe.zadd(players_key, {member: time.time()}, nx=True)
            self._queue_touch(pipe, meta_key, players_key)
            await pipe.execute()

        await self._transact([meta_key, players_key], add_member)
        logger.info(f"Member {member} joined lobby {name!r}")

    async def rename(self, name: str, new_name: str) -> str:
        validate_lobby_name(name)
        validate_lobby_name(new_name)
        if new_name == name:
            await self.getdata(name)
            return name

        meta_key, players_key = self._meta_key(name), self._players_key(name)
        new_meta_key, new_players_key = self._meta_key(new_name), self._players_key(new_name)

        async def move(pipe):
            if not await pipe.exists(meta_key):
                raise LobbyNotFoundError(name)
            if await pipe.exists(new_meta_key):
                raise LobbyExistsError(new_name)
            has_players = await pipe.exists(players_key)
            pipe.multi()
            pipe.rename(meta_key, new_meta_key)
            if has_players:
                pipe.rename(players_key, new_players_key)
            else:
                pipe.delete(new_players_key)
            pipe.hset(new_meta_key, "name", new_name)
            self._queue_touch(pipe, new_meta_key, new_players_key)
            await pipe.execute()
            return new_name

        result = await self._transact([meta_key, players_key, new_meta_key, new_players_key], move)
        logger.info(f"Lobby {name!r} renamed to {new_name!r}")
        return result

    async def password(self, name: str, password_hash: Optional[str]) -> bool:
        """Replace or clear a lobby's password digest. Returns whether the lobby is now secured."""
        validate_lobby_name(name)
        meta_key = self._meta_key(name)
        players_key = self._players_key(name)

        async def update(pipe):
            if not await pipe.exists(meta_key):
                raise LobbyNotFoundError(name)
            pipe.multi()
            if password_hash:
                pipe.hset(meta_key, "password", password_hash)
            else:
                pipe.hdel(meta_key, "password")
            self._queue_touch(pipe, meta_key, players_key)
            await pipe.execute()

        await self._transact([meta_key, players_key], update)
        secured = bool(password_hash)
        logger.info(f"Lobby {name!r} password {'set' if secured else 'cleared'}")
        return secured
