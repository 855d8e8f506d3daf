# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    validate_by_name=True,
    extra="ignore",
)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///spacebook.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _SECTION_CONFIG


class SecurityConfig(BaseSettings):
    # Cookies
    session_cookie_name: str = Field("spacebook_auth", alias="SESSION_COOKIE_NAME")
    external_cookie_name: str = Field("spacebook_external", alias="EXTERNAL_COOKIE_NAME")
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("Lax", alias="COOKIE_SAMESITE")
    session_lifetime: int = Field(60 * 60 * 24 * 14, ge=60, alias="SESSION_LIFETIME")

    # CSRF protection
    enable_csrf: bool = Field(False, alias="ENABLE_CSRF")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, alias="RL_WINDOW")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _SECTION_CONFIG

    @field_validator(
        "cookie_secure", "enable_csrf", "enable_rate_limit", "enable_hsts", mode="before"
    )
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)


class RedirectConfig(BaseSettings):
    login_path: str = Field("/Auth/Index", alias="LOGIN_PATH")
    default_return_url: str = Field("/", alias="DEFAULT_RETURN_URL")
    logout_redirect_path: str = Field("/Auth/Index", alias="LOGOUT_REDIRECT_PATH")

    model_config = _SECTION_CONFIG

    @field_validator(
        "login_path", "default_return_url", "logout_redirect_path"
    )
    @classmethod
    def _must_be_local(cls, value: str) -> str:
        if not value.startswith("/") or value.startswith("//"):
            raise ValueError("redirect paths must be local absolute paths")
        return value


class PasswordPolicyConfig(BaseSettings):
    required_length: int = Field(6, ge=1, alias="PASSWORD_REQUIRED_LENGTH")
    required_unique_chars: int = Field(1, ge=0, alias="PASSWORD_REQUIRED_UNIQUE_CHARS")
    require_digit: bool = Field(True, alias="PASSWORD_REQUIRE_DIGIT")
    require_lowercase: bool = Field(True, alias="PASSWORD_REQUIRE_LOWERCASE")
    require_uppercase: bool = Field(True, alias="PASSWORD_REQUIRE_UPPERCASE")
    require_non_alphanumeric: bool = Field(True, alias="PASSWORD_REQUIRE_NON_ALPHANUMERIC")

    model_config = _SECTION_CONFIG


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


def _redirect_config_factory() -> RedirectConfig:
    return RedirectConfig()  # type: ignore[call-arg]


def _password_policy_config_factory() -> PasswordPolicyConfig:
    return PasswordPolicyConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)
    redirects: RedirectConfig = Field(default_factory=_redirect_config_factory)
    password_policy: PasswordPolicyConfig = Field(
        default_factory=_password_policy_config_factory
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.secret_key in ("dev", "development", "test", ""):
            print(
                "\nCRITICAL SECURITY ERROR: Insecure SECRET_KEY detected in production!\n"
                "   SECRET_KEY must be a strong random value in production.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if not self.security.enable_csrf:
            warnings.append("CSRF protection is DISABLED")
        if not self.security.cookie_secure:
            warnings.append("Cookie Secure flag is DISABLED (use HTTPS!)")
        if not self.security.enable_hsts:
            warnings.append("HSTS is DISABLED (recommended for HTTPS)")

        if warnings:
            print("\nPRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)
            print(
                "   Consider enabling these security features in production.\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "PasswordPolicyConfig",
    "RedirectConfig",
    "SecurityConfig",
    "load_config",
]
