from __future__ import annotations

import pytest

from spacebook.application.use_cases.users.login_user import LoginUserUseCase
from spacebook.application.use_cases.users.logout_user import LogoutUserUseCase
from spacebook.application.use_cases.users.prepare_login import \
    PrepareLoginViewUseCase
from spacebook.application.use_cases.users.register_user import \
    RegisterUserUseCase
from spacebook.application.use_cases.users.results import (
    INVALID_EMAIL_MESSAGE, INVALID_LOGIN_MESSAGE, INVALID_REGISTRATION_MESSAGE)
from spacebook.domain.users.entities import User
from spacebook.shared.errors import ConfigurationError
from spacebook.tests.fakes import VALID_PASSWORD, AuthStack


@pytest.fixture
def stack() -> AuthStack:
    return AuthStack()


def _login(stack: AuthStack) -> LoginUserUseCase:
    return LoginUserUseCase(credentials=stack.credentials, sessions=stack.sessions)


def _register(stack: AuthStack, **kwargs) -> RegisterUserUseCase:
    return RegisterUserUseCase(
        credentials=stack.credentials, sessions=stack.sessions, **kwargs
    )


class _UsernameOnlyStore:
    supports_user_email = False


class TestLogin:
    def test_unknown_email_issues_no_session(self, stack: AuthStack) -> None:
        outcome = _login(stack).execute("nobody@example.com", VALID_PASSWORD)

        assert outcome.succeeded is False
        assert outcome.errors == (INVALID_EMAIL_MESSAGE,)
        assert outcome.session is None
        assert stack.tokens.tokens == {}

    def test_wrong_password_issues_no_session(self, stack: AuthStack) -> None:
        stack.add_user()

        outcome = _login(stack).execute(
            "alice@example.com", "Wrong!pass1", return_url="/Profile"
        )

        assert outcome.errors == (INVALID_LOGIN_MESSAGE,)
        assert outcome.return_url == "/Profile"
        assert outcome.form == {"email": "alice@example.com"}
        assert stack.tokens.tokens == {}

    def test_success_redirects_to_local_return_url(self, stack: AuthStack) -> None:
        user = stack.add_user()

        outcome = _login(stack).execute(
            "alice@example.com", VALID_PASSWORD, return_url="/Profile?tab=2"
        )

        assert outcome.succeeded is True
        assert outcome.redirect_to == "/Profile?tab=2"
        assert outcome.session is not None
        assert outcome.session.user_id == user.id
        assert outcome.session.persistent is False

    @pytest.mark.parametrize(
        "return_url",
        ["https://evil.example/", "//evil.example", "/\\evil.example", None, ""],
    )
    def test_non_local_return_url_falls_back_to_root(
        self, stack: AuthStack, return_url: str | None
    ) -> None:
        stack.add_user()

        outcome = _login(stack).execute(
            "alice@example.com", VALID_PASSWORD, return_url=return_url
        )

        assert outcome.redirect_to == "/"

    def test_remember_me_issues_persistent_session(self, stack: AuthStack) -> None:
        stack.add_user()

        outcome = _login(stack).execute(
            "ALICE@example.com", VALID_PASSWORD, remember_me=True
        )

        assert outcome.session is not None
        assert outcome.session.persistent is True

    def test_requires_email_capable_store(self, stack: AuthStack) -> None:
        with pytest.raises(ConfigurationError):
            LoginUserUseCase(credentials=_UsernameOnlyStore(), sessions=stack.sessions)


class TestRegister:
    def test_success_signs_in_with_browser_session(self, stack: AuthStack) -> None:
        outcome = _register(stack).execute(
            "alice", "alice@example.com", VALID_PASSWORD, return_url="~/welcome"
        )

        assert outcome.succeeded is True
        assert outcome.redirect_to == "/welcome"
        assert outcome.session is not None
        assert outcome.session.persistent is False
        assert stack.credentials.find_by_email("alice@example.com") is not None

    def test_duplicate_email_reports_store_error(self, stack: AuthStack) -> None:
        stack.add_user()

        outcome = _register(stack).execute("bob", "alice@example.com", VALID_PASSWORD)

        assert outcome.succeeded is False
        assert outcome.errors == ("Email 'alice@example.com' is already taken.",)
        assert outcome.form == {"username": "bob", "email": "alice@example.com"}
        assert len(stack.users.users) == 1

    def test_weak_password_lists_every_rule(self, stack: AuthStack) -> None:
        outcome = _register(stack).execute("bob", "bob@example.com", "abc")

        assert outcome.errors == (
            "Passwords must be at least 6 characters.",
            "Passwords must have at least one non alphanumeric character.",
            "Passwords must have at least one digit ('0'-'9').",
            "Passwords must have at least one uppercase ('A'-'Z').",
        )
        assert stack.tokens.tokens == {}

    def test_uses_injected_user_factory(self, stack: AuthStack) -> None:
        created: list[User] = []

        def factory() -> User:
            user = User()
            created.append(user)
            return user

        _register(stack, user_factory=factory).execute(
            "alice", "alice@example.com", VALID_PASSWORD
        )

        assert len(created) == 1
        assert created[0].normalized_email == "ALICE@EXAMPLE.COM"

    def test_prepare_form_resolves_return_url(self, stack: AuthStack) -> None:
        use_case = _register(stack, default_return_url="/Welcome")

        assert use_case.prepare_form("~/Profile").return_url == "/Profile"
        assert use_case.prepare_form("https://evil.example/").return_url == "/Welcome"
        assert use_case.prepare_form().errors == ()

    def test_reject_malformed_keeps_form(self, stack: AuthStack) -> None:
        outcome = _register(stack).reject_malformed(
            username="bob", email="nope", return_url="//evil.example"
        )

        assert outcome.errors == (INVALID_REGISTRATION_MESSAGE,)
        assert outcome.form == {"username": "bob", "email": "nope"}
        assert outcome.return_url == "/"

    def test_requires_email_capable_store(self, stack: AuthStack) -> None:
        with pytest.raises(ConfigurationError):
            RegisterUserUseCase(credentials=_UsernameOnlyStore(), sessions=stack.sessions)


class TestLogout:
    def test_revokes_session_and_uses_local_return_url(self, stack: AuthStack) -> None:
        session = stack.sessions.sign_in(stack.add_user(), persistent=True)
        use_case = LogoutUserUseCase(sessions=stack.sessions, default_redirect="/Auth/Index")

        outcome = use_case.execute(session.token, "/Goodbye")

        assert outcome.redirect_to == "/Goodbye"
        assert stack.sessions.authenticate(session.token) is None

    @pytest.mark.parametrize("return_url", [None, "https://evil.example/"])
    def test_anonymous_or_foreign_target_goes_to_login(
        self, stack: AuthStack, return_url: str | None
    ) -> None:
        use_case = LogoutUserUseCase(sessions=stack.sessions, default_redirect="/Auth/Index")

        outcome = use_case.execute(None, return_url)

        assert outcome.redirect_to == "/Auth/Index"
        assert outcome.session is None


class TestPrepareLogin:
    def test_defaults_return_url_and_drops_blank_errors(self) -> None:
        outcome = PrepareLoginViewUseCase().execute(None, ["", "Session expired."])

        assert outcome.return_url == "/"
        assert outcome.errors == ("Session expired.",)

    def test_keeps_local_return_url(self) -> None:
        outcome = PrepareLoginViewUseCase().execute("/Home/Index")

        assert outcome.return_url == "/Home/Index"
        assert outcome.errors == ()
