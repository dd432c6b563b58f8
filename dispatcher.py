"""
Command dispatcher for the lobbies API.

Routes ``(command, args)`` pairs to the lobby registry, enforcing who may do
what:

- ``list`` and ``secure`` are public.
- ``create`` and ``join`` need a logged-in caller.
- ``get``, ``rename`` and ``password`` need a logged-in caller who is already
  a member of the lobby.

Plaintext passwords never leave this module; the registry only ever receives
``hash_password`` digests or the ``NO_PASSWORD`` marker.

Gate failures come back as ``ApiResult`` members. Registry failures (missing
lobby, duplicate name, wrong password) are raised by the registry and
propagate unchanged. Nothing is cached between calls: every membership check
reads the lobby again, so the only check-then-act window left is the one
between that read and the registry write, which the registry's own
transactions bound.
"""

from enum import Enum
from typing import Optional, Sequence

from logging_config import get_logger
from passwords import optional_hash, password_credential
from schemas.lobbies import LobbyDetails
from schemas.users import User

logger = get_logger(__name__)


class ApiResult(str, Enum):
    """Status values returned to callers. The values are the exact wire strings."""
    SUCCESS = "SUCCESS"
    ERR_LOGIN = "ERR_LOGIN"
    ERR_PERMS = "ERR_PERMS"
    ERR_COMMAND = "ERR_COMMAND"


def _arg(args: Sequence[str], index: int) -> Optional[str]:
    return args[index] if index < len(args) else None


class LobbyDispatcher:
    def __init__(self, registry, identity_resolver):
        self.registry = registry
        self.identity_resolver = identity_resolver
        self._handlers = {
            "list": self._list,
            "create": self._create,
            "join": self._join,
            "secure": self._secure,
            "get": self._get,
            "rename": self._rename,
            "password": self._password,
        }

    async def handle(self, command: str, args: Sequence[str], request):
        handler = self._handlers.get(command)
        if handler is None:
            logger.warning(f"Unknown lobbies command: {command!r}")
            return ApiResult.ERR_COMMAND
        logger.info(f"Handling lobbies command {command!r} for lobby {_arg(args, 0)!r}")
        return await handler(args, request)

    async def _member_view(self, name: str, user: User):
        """Fetch the lobby summary, or None when ``user`` is not one of its players."""
        summary = await self.registry.get(name)
        if user.steamid not in summary.players:
            logger.warning(f"User {user.steamid} is not a member of lobby {name!r}")
            return None
        return summary

    async def _list(self, args, request):
        return await self.registry.list()

    async def _create(self, args, request):
        user = await self.identity_resolver.whoami(request)
        if not user:
            return ApiResult.ERR_LOGIN
        name, password = _arg(args, 0), _arg(args, 1)
        await self.registry.create(name, optional_hash(password), user.steamid)
        return ApiResult.SUCCESS

    async def _join(self, args, request):
        user = await self.identity_resolver.whoami(request)
        if not user:
            return ApiResult.ERR_LOGIN
        name, password = _arg(args, 0), _arg(args, 1)
        await self.registry.join(name, password_credential(password), user.steamid)
        return ApiResult.SUCCESS

    async def _secure(self, args, request):
        data = await self.registry.getdata(_arg(args, 0))
        return data.password is not None

    async def _get(self, args, request):
        user = await self.identity_resolver.whoami(request)
        if not user:
            return ApiResult.ERR_LOGIN
        name = _arg(args, 0)
        list_entry = await self._member_view(name, user)
        if list_entry is None:
            return ApiResult.ERR_PERMS
        data = await self.registry.getdata(name)
        return LobbyDetails(listEntry=list_entry, data=data)

    async def _rename(self, args, request):
        user = await self.identity_resolver.whoami(request)
        if not user:
            return ApiResult.ERR_LOGIN
        name, new_name = _arg(args, 0), _arg(args, 1)
        if await self._member_view(name, user) is None:
            return ApiResult.ERR_PERMS
        return await self.registry.rename(name, new_name)

    async def _password(self, args, request):
        user = await self.identity_resolver.whoami(request)
        if not user:
            return ApiResult.ERR_LOGIN
        name, new_password = _arg(args, 0), _arg(args, 1)
        if await self._member_view(name, user) is None:
            return ApiResult.ERR_PERMS
        # Hashed here like create/join so the registry never sees plaintext
        return await self.registry.password(name, optional_hash(new_password))
