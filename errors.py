class LobbyRegistryError(Exception):
    """Base class for failures raised by the lobby registry."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidLobbyNameError(LobbyRegistryError):
    pass


class LobbyNotFoundError(LobbyRegistryError):
    def __init__(self, name):
        super().__init__(f"Lobby {name!r} not found")
        self.name = name


class LobbyExistsError(LobbyRegistryError):
    def __init__(self, name):
        super().__init__(f"Lobby {name!r} already exists")
        self.name = name


class InvalidPasswordError(LobbyRegistryError):
    pass


class LobbyConflictError(LobbyRegistryError):
    """Raised when an optimistic transaction keeps losing to concurrent writers."""
    pass
