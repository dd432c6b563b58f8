from pydantic import BaseModel
from typing import Optional


class LobbyCommandRequest(BaseModel):
    # Positional arguments after the command: name, password / new password, new name
    args: list[str] = []

class LobbySummary(BaseModel):
    name: str
    players: list[str]
    created_at: str

class LobbyData(BaseModel):
    name: str
    owner: Optional[str] = None
    created_at: str
    password: Optional[str] = None

class LobbyDetails(BaseModel):
    listEntry: LobbySummary
    data: LobbyData
