from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError

from dispatcher import LobbyDispatcher
from errors import InvalidLobbyNameError, InvalidPasswordError, LobbyConflictError, LobbyExistsError, LobbyNotFoundError, LobbyRegistryError
from logging_config import get_logger
from schemas.lobbies import LobbyCommandRequest

logger = get_logger(__name__)

lobbies_router = APIRouter(prefix="/api/lobbies", tags=["lobbies"])

REGISTRY_ERROR_STATUS = {
    InvalidLobbyNameError: 400,
    InvalidPasswordError: 401,
    LobbyNotFoundError: 404,
    LobbyExistsError: 409,
    LobbyConflictError: 409,
}


def get_dispatcher(request: Request) -> LobbyDispatcher:
    return request.app.state.dispatcher


@lobbies_router.post("/{command}")
async def lobbies_command(command: str, request: Request, body: Optional[LobbyCommandRequest] = None):
    # POST /api/lobbies/{command} Body: { "args": ["name", "password-or-new-password-or-new-name"] }
    # Response 200: the command result, with status codes as bare strings ("SUCCESS", "ERR_LOGIN", ...)
    args = body.args if body else []
    client_host = request.client.host if request.client else "unknown"
    logger.info(f"Lobbies command {command!r} from {client_host} with {len(args)} args")

    try:
        result = await get_dispatcher(request).handle(command, args, request)
    except LobbyRegistryError as e:
        status_code = REGISTRY_ERROR_STATUS.get(type(e), 400)
        logger.warning(f"Lobbies command {command!r} failed: {e.detail}")
        raise HTTPException(status_code=status_code, detail=e.detail)
    except RedisError as e:
        logger.error(f"Redis error handling lobbies command {command!r}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Lobby store unavailable")

    # ApiResult members encode to their literal values here and nowhere else
    return JSONResponse(content=jsonable_encoder(result))
