# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterable

from spacebook.application.use_cases.users.results import AuthOutcome
from spacebook.shared.utils.redirects import resolve_local_url


class PrepareLoginViewUseCase:
    def __init__(self, *, default_return_url: str = "/") -> None:
        self._default_return_url = default_return_url

    def execute(
        self, return_url: str | None = None, staged_errors: Iterable[str] = ()
    ) -> AuthOutcome:
        errors = [message for message in staged_errors if message]
        return AuthOutcome.rejected(
            *errors, return_url=resolve_local_url(return_url, self._default_return_url)
        )
