# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .users.entities import (IdentityError, IdentityResult, SessionToken,
                             SignInResult, User)
from .users.exceptions import UserAlreadyExistsError
from .users.repositories import (CredentialStore, PasswordHasher,
                                 SessionAuthority, SessionTokenRepository,
                                 UserStore)

__all__ = [
    "CredentialStore",
    "IdentityError",
    "IdentityResult",
    "PasswordHasher",
    "SessionAuthority",
    "SessionToken",
    "SessionTokenRepository",
    "SignInResult",
    "User",
    "UserAlreadyExistsError",
    "UserStore",
]
