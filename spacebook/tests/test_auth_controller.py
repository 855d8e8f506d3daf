from __future__ import annotations

import pytest
from flask.testing import FlaskClient

from spacebook.app import create_app
from spacebook.application.use_cases.users.results import AuthOutcome
from spacebook.auth import SESSION_EXPIRED_MESSAGE
from spacebook.infrastructure.container import Container
from spacebook.interfaces.http.controllers.auth_controller import \
    _redirect_with_session
from spacebook.shared.config.settings import AppConfig, RedirectConfig
from spacebook.tests.fakes import VALID_PASSWORD, AuthStack

COOKIE = "spacebook_auth"


@pytest.fixture
def stack() -> AuthStack:
    return AuthStack()


@pytest.fixture
def client(stack: AuthStack) -> FlaskClient:
    container = Container(
        credential_store=stack.credentials, session_authority=stack.sessions
    )
    app = create_app(container)
    app.config.update(TESTING=True)
    return app.test_client()


def _set_cookies(resp) -> list[str]:
    return resp.headers.getlist("Set-Cookie")


def _session_cookie_header(resp) -> str | None:
    return next((h for h in _set_cookies(resp) if h.startswith(f"{COOKIE}=")), None)


class TestLoginPage:
    def test_index_renders_and_drops_external_cookie(self, client: FlaskClient) -> None:
        resp = client.get("/Auth/Index?returnUrl=/Profile")

        assert resp.status_code == 200
        assert b"Log in" in resp.data
        assert b"returnUrl=/Profile" in resp.data or b"returnUrl=%2FProfile" in resp.data
        external = [h for h in _set_cookies(resp) if h.startswith("spacebook_external=")]
        assert external and "Max-Age=0" in external[0]

    def test_index_replaces_foreign_return_url(self, client: FlaskClient) -> None:
        resp = client.get("/Auth?returnUrl=https://evil.example/")

        assert resp.status_code == 200
        assert b"evil.example" not in resp.data

    def test_access_denied(self, client: FlaskClient) -> None:
        resp = client.get("/Auth/AccessDenied")

        assert resp.status_code == 200


class TestLogin:
    def test_unknown_email(self, client: FlaskClient) -> None:
        resp = client.post(
            "/Auth/Login", data={"email": "nobody@example.com", "password": VALID_PASSWORD}
        )

        assert resp.status_code == 200
        assert b"Invalid email address." in resp.data
        assert b"nobody@example.com" in resp.data
        assert _session_cookie_header(resp) is None

    def test_wrong_password(self, client: FlaskClient, stack: AuthStack) -> None:
        stack.add_user()

        resp = client.post(
            "/Auth/Login", data={"email": "alice@example.com", "password": "Wrong!pass1"}
        )

        assert resp.status_code == 200
        assert b"Invalid login attempt." in resp.data
        assert _session_cookie_header(resp) is None
        assert stack.tokens.tokens == {}

    def test_missing_fields(self, client: FlaskClient) -> None:
        resp = client.post("/Auth/Login", data={"email": "alice@example.com"})

        assert resp.status_code == 200
        assert b"The Password field is required." in resp.data
        assert b"alice@example.com" in resp.data

    def test_malformed_email(self, client: FlaskClient) -> None:
        resp = client.post("/Auth/Login", data={"email": "alice", "password": "x"})

        assert resp.status_code == 200
        assert b"The Email field is not a valid e-mail address." in resp.data

    def test_success_sets_browser_session_cookie(
        self, client: FlaskClient, stack: AuthStack
    ) -> None:
        stack.add_user()

        resp = client.post(
            "/Auth/Login?returnUrl=/Home/Index",
            data={"email": "alice@example.com", "password": VALID_PASSWORD},
        )

        assert resp.status_code == 302
        assert resp.headers["Location"] == "/Home/Index"
        header = _session_cookie_header(resp)
        assert header is not None
        assert "HttpOnly" in header
        assert "Max-Age" not in header
        assert "Expires" not in header

    def test_remember_me_sets_persistent_cookie(
        self, client: FlaskClient, stack: AuthStack
    ) -> None:
        stack.add_user()

        resp = client.post(
            "/Auth/Login",
            data={
                "email": "alice@example.com",
                "password": VALID_PASSWORD,
                "rememberMe": "true",
            },
        )

        assert resp.status_code == 302
        header = _session_cookie_header(resp)
        assert header is not None
        assert "Max-Age=" in header

    @pytest.mark.parametrize(
        "return_url", ["https://evil.example/", "//evil.example/x", "/\\evil.example"]
    )
    def test_foreign_return_url_redirects_home(
        self, client: FlaskClient, stack: AuthStack, return_url: str
    ) -> None:
        stack.add_user()

        resp = client.post(
            "/Auth/Login",
            query_string={"returnUrl": return_url},
            data={"email": "alice@example.com", "password": VALID_PASSWORD},
        )

        assert resp.status_code == 302
        assert resp.headers["Location"] == "/"


class TestRegister:
    def test_form_renders(self, client: FlaskClient) -> None:
        resp = client.get("/Auth/Register")

        assert resp.status_code == 200
        assert b"Register" in resp.data

    def test_success_signs_in(self, client: FlaskClient, stack: AuthStack) -> None:
        resp = client.post(
            "/Auth/Register?returnUrl=/Home/Index",
            data={"username": "alice", "email": "alice@example.com", "password": VALID_PASSWORD},
        )

        assert resp.status_code == 302
        assert resp.headers["Location"] == "/Home/Index"
        header = _session_cookie_header(resp)
        assert header is not None
        assert "Max-Age" not in header
        assert stack.credentials.find_by_email("alice@example.com") is not None
        assert len(stack.users.users) == 1

    def test_duplicate_email(self, client: FlaskClient, stack: AuthStack) -> None:
        stack.add_user()

        resp = client.post(
            "/Auth/Register",
            data={"username": "bob", "email": "alice@example.com", "password": VALID_PASSWORD},
        )

        assert resp.status_code == 200
        assert b"is already taken." in resp.data
        assert b"bob" in resp.data
        assert _session_cookie_header(resp) is None
        assert len(stack.users.users) == 1

    def test_weak_password(self, client: FlaskClient, stack: AuthStack) -> None:
        resp = client.post(
            "/Auth/Register",
            data={"username": "bob", "email": "bob@example.com", "password": "abc"},
        )

        assert resp.status_code == 200
        assert b"Passwords must be at least 6 characters." in resp.data
        assert stack.users.users == {}

    def test_malformed_request(self, client: FlaskClient, stack: AuthStack) -> None:
        resp = client.post(
            "/Auth/Register", data={"username": "bob", "email": "not-an-email"}
        )

        assert resp.status_code == 200
        assert b"Invalid registration attempt." in resp.data
        assert b'value="bob"' in resp.data
        assert stack.users.users == {}


class TestLogout:
    def test_revokes_session_and_clears_cookie(
        self, client: FlaskClient, stack: AuthStack
    ) -> None:
        session = stack.sessions.sign_in(stack.add_user(), persistent=False)
        client.set_cookie(COOKIE, session.token)

        resp = client.post("/Auth/Logout")

        assert resp.status_code == 302
        assert resp.headers["Location"] == "/Auth/Index"
        header = _session_cookie_header(resp)
        assert header is not None and "Max-Age=0" in header
        assert stack.sessions.authenticate(session.token) is None

    def test_anonymous_with_foreign_return_url(self, client: FlaskClient) -> None:
        resp = client.post("/Auth/Logout?returnUrl=https://evil.example/")

        assert resp.status_code == 302
        assert resp.headers["Location"] == "/Auth/Index"
        header = _session_cookie_header(resp)
        assert header is not None and "Max-Age=0" in header

    def test_local_return_url_is_honoured(self, client: FlaskClient) -> None:
        resp = client.post("/Auth/Logout?returnUrl=/Goodbye")

        assert resp.headers["Location"] == "/Goodbye"


class TestHome:
    def test_anonymous_is_sent_to_login(self, client: FlaskClient) -> None:
        resp = client.get("/")

        assert resp.status_code == 302
        assert resp.headers["Location"] == "/Auth/Index?returnUrl=%2F"

    def test_signed_in_user_is_welcomed(self, client: FlaskClient, stack: AuthStack) -> None:
        session = stack.sessions.sign_in(stack.add_user(), persistent=False)
        client.set_cookie(COOKIE, session.token)

        resp = client.get("/Home/Index")

        assert resp.status_code == 200
        assert b"Welcome, alice" in resp.data

    def test_expired_session_message_is_shown_on_login_page(
        self, client: FlaskClient, stack: AuthStack
    ) -> None:
        session = stack.sessions.sign_in(stack.add_user(), persistent=False)
        stack.tokens.expire_all()
        client.set_cookie(COOKIE, session.token)

        resp = client.get("/", follow_redirects=True)

        assert resp.status_code == 200
        assert SESSION_EXPIRED_MESSAGE.encode() in resp.data
        assert client.get_cookie(COOKIE) is None

    def test_security_headers(self, client: FlaskClient) -> None:
        resp = client.get("/Auth/Index")

        assert resp.headers["X-Frame-Options"] == "DENY"
        assert resp.headers["X-Content-Type-Options"] == "nosniff"


def test_register_form_uses_container_configuration(stack: AuthStack) -> None:
    config = AppConfig(redirects=RedirectConfig(DEFAULT_RETURN_URL="/Welcome"))
    container = Container(
        config, credential_store=stack.credentials, session_authority=stack.sessions
    )
    client = create_app(container).test_client()

    resp = client.get("/Auth/Register?returnUrl=https://evil.example/")

    assert resp.status_code == 200
    assert b"returnUrl=/Welcome" in resp.data or b"returnUrl=%2FWelcome" in resp.data
    assert b"evil.example" not in resp.data


def test_redirect_requires_a_target() -> None:
    with pytest.raises(ValueError):
        _redirect_with_session(AuthOutcome.rejected("nope", return_url="/"))
