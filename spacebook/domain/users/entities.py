# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True)
class User:

    id: int | None = None
    username: str | None = None
    normalized_username: str | None = None
    email: str | None = None
    normalized_email: str | None = None
    password_hash: str | None = None
    created_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class SessionToken:

    user_id: int
    token: str
    expires_at: datetime
    persistent: bool = False


@dataclass(slots=True, frozen=True)
class IdentityError:
    code: str
    description: str


@dataclass(slots=True, frozen=True)
class IdentityResult:
    succeeded: bool
    errors: tuple[IdentityError, ...] = field(default_factory=tuple)

    @classmethod
    def success(cls) -> IdentityResult:
        return cls(succeeded=True)

    @classmethod
    def failed(cls, *errors: IdentityError) -> IdentityResult:
        return cls(succeeded=False, errors=tuple(errors))


@dataclass(slots=True, frozen=True)
class SignInResult:
    succeeded: bool
    session: SessionToken | None = None

    @classmethod
    def failed(cls) -> SignInResult:
        return cls(succeeded=False)


def normalize(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip().upper()
