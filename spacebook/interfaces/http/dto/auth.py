from __future__ import annotations

import re

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")


def _required(value: str, label: str) -> str:
    if not value or not value.strip():
        raise PydanticCustomError(
            "required",
            "The {label} field is required.",
            {"label": label},
        )
    return value


def _email(value: str) -> str:
    value = _required(value, "Email").strip()
    if not _EMAIL_RE.match(value):
        raise PydanticCustomError(
            "email_invalid",
            "The Email field is not a valid e-mail address.",
            {},
        )
    return value


class LoginRequestDTO(BaseModel):
    email: str = Field(max_length=256)
    password: str = Field(max_length=128)  # No strength check on login
    remember_me: bool = Field(
        False, validation_alias=AliasChoices("remember_me", "rememberMe")
    )

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _email(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _required(value, "Password")


class RegisterRequestDTO(BaseModel):
    username: str = Field(max_length=256)
    email: str = Field(max_length=256)
    # strength rules belong to the credential store's password policy
    password: str = Field(max_length=128)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _required(value, "Username").strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _email(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _required(value, "Password")
