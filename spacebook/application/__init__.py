# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .use_cases.users.login_user import LoginUserUseCase
from .use_cases.users.logout_user import LogoutUserUseCase
from .use_cases.users.prepare_login import PrepareLoginViewUseCase
from .use_cases.users.register_user import RegisterUserUseCase
from .use_cases.users.results import AuthOutcome

__all__ = [
    "AuthOutcome",
    "LoginUserUseCase",
    "LogoutUserUseCase",
    "PrepareLoginViewUseCase",
    "RegisterUserUseCase",
]
