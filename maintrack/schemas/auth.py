from typing import Any

from pydantic import BaseModel


class AuthForm(BaseModel):
    email: str = ""
    password: str = ""

    model_config = {"validate_assignment": True}


class ConfirmRequest(BaseModel):
    token: str


class FormFieldUpdate(BaseModel):
    field: str
    value: Any = None
