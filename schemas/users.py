from pydantic import BaseModel
from typing import Optional


class User(BaseModel):
    steamid: str
    username: Optional[str] = None
