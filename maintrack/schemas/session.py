from typing import Literal

from pydantic import BaseModel


class EmptySession(BaseModel):
    kind: Literal["empty"] = "empty"

    model_config = {"frozen": True}

    @property
    def is_active(self) -> bool:
        return False

    @property
    def user_id(self) -> None:
        return None


class ActiveSession(BaseModel):
    kind: Literal["active"] = "active"
    user_id: str
    email: str = ""

    model_config = {"frozen": True}

    @property
    def is_active(self) -> bool:
        return True


Session = EmptySession | ActiveSession

EMPTY_SESSION = EmptySession()
