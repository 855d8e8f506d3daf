import pytest
from pydantic import ValidationError

from spacebook.shared.config.settings import (AppConfig, RedirectConfig,
                                              SecurityConfig)


def test_defaults() -> None:
    config = RedirectConfig()

    assert config.login_path == "/Auth/Index"
    assert config.default_return_url == "/"
    assert config.logout_redirect_path == "/Auth/Index"


@pytest.mark.parametrize("path", ["https://evil.example/", "//evil.example", "Auth/Index"])
def test_redirect_paths_must_be_local(path: str) -> None:
    with pytest.raises(ValidationError):
        RedirectConfig(LOGIN_PATH=path)


def test_security_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SESSION_COOKIE_NAME", "custom_auth")
    monkeypatch.setenv("COOKIE_SECURE", "yes")

    config = SecurityConfig()

    assert config.session_cookie_name == "custom_auth"
    assert config.cookie_secure is True
    assert config.enable_rate_limit is False


def test_production_refuses_insecure_secret_key() -> None:
    with pytest.raises(SystemExit):
        AppConfig(APP_ENV="production", SECRET_KEY="dev")


def test_production_with_strong_key() -> None:
    config = AppConfig(APP_ENV="prod", SECRET_KEY="x" * 40)

    assert config.is_production() is True
