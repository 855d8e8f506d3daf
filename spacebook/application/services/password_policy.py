# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from spacebook.domain.users.entities import IdentityError
from spacebook.shared.config.settings import PasswordPolicyConfig


@dataclass(slots=True, frozen=True)
class PasswordPolicy:
    required_length: int = 6
    required_unique_chars: int = 1
    require_digit: bool = True
    require_lowercase: bool = True
    require_uppercase: bool = True
    require_non_alphanumeric: bool = True

    @classmethod
    def from_config(cls, config: PasswordPolicyConfig) -> PasswordPolicy:
        return cls(
            required_length=config.required_length,
            required_unique_chars=config.required_unique_chars,
            require_digit=config.require_digit,
            require_lowercase=config.require_lowercase,
            require_uppercase=config.require_uppercase,
            require_non_alphanumeric=config.require_non_alphanumeric,
        )

    def validate(self, password: str | None) -> list[IdentityError]:
        """Return every rule the password breaks, in a stable order."""
        password = password or ""
        errors: list[IdentityError] = []

        if len(password) < self.required_length:
            errors.append(
                IdentityError(
                    "PasswordTooShort",
                    f"Passwords must be at least {self.required_length} characters.",
                )
            )
        if self.require_non_alphanumeric and all(_is_ascii_alnum(ch) for ch in password):
            errors.append(
                IdentityError(
                    "PasswordRequiresNonAlphanumeric",
                    "Passwords must have at least one non alphanumeric character.",
                )
            )
        if self.require_digit and not any("0" <= ch <= "9" for ch in password):
            errors.append(
                IdentityError(
                    "PasswordRequiresDigit",
                    "Passwords must have at least one digit ('0'-'9').",
                )
            )
        if self.require_lowercase and not any("a" <= ch <= "z" for ch in password):
            errors.append(
                IdentityError(
                    "PasswordRequiresLower",
                    "Passwords must have at least one lowercase ('a'-'z').",
                )
            )
        if self.require_uppercase and not any("A" <= ch <= "Z" for ch in password):
            errors.append(
                IdentityError(
                    "PasswordRequiresUpper",
                    "Passwords must have at least one uppercase ('A'-'Z').",
                )
            )
        if self.required_unique_chars >= 1 and len(set(password)) < self.required_unique_chars:
            errors.append(
                IdentityError(
                    "PasswordRequiresUniqueChars",
                    "Passwords must use at least "
                    f"{self.required_unique_chars} different characters.",
                )
            )
        return errors


def _is_ascii_alnum(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


__all__ = ["PasswordPolicy"]
