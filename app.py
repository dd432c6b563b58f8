from contextlib import asynccontextmanager

import redis.asyncio as redis
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.exceptions import RedisError

from backend import LobbyRegistry
from constants import LOG_FILE, LOG_LEVEL, REDIS_DB, REDIS_HOST, REDIS_PASSWORD, REDIS_PORT
from dispatcher import LobbyDispatcher
from identity import SessionIdentityResolver
from logging_config import get_logger, setup_logging
from routers.lobbies import lobbies_router

# Setup logging
setup_logging(log_level=LOG_LEVEL, log_file=LOG_FILE)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    redis_client = app.state.redis
    try:
        await redis_client.ping()
        logger.info("Redis client connected successfully")
    except RedisError as e:
        logger.error(f"Failed to connect to Redis: {e}", exc_info=True)
        raise
    yield
    await redis_client.aclose()
    logger.info("Redis client closed")


def create_app(redis_client: redis.Redis = None) -> FastAPI:
    if redis_client is None:
        redis_client = redis.Redis(host=REDIS_HOST, port=REDIS_PORT, password=REDIS_PASSWORD, db=REDIS_DB, decode_responses=True)

    app = FastAPI(lifespan=lifespan)

    # Configure CORS to allow all origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Allow all origins
        allow_credentials=True,
        allow_methods=["*"],  # Allow all HTTP methods
        allow_headers=["*"],  # Allow all headers
    )

    app.state.redis = redis_client
    app.state.dispatcher = LobbyDispatcher(
        registry=LobbyRegistry(redis_client),
        identity_resolver=SessionIdentityResolver(redis_client),
    )
    app.include_router(lobbies_router)

    logger.info("FastAPI application initialized")
    return app


app = create_app()
