# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import (Blueprint, Response, get_flashed_messages, make_response,
                   redirect, render_template, request)
from pydantic import ValidationError

from spacebook.application.use_cases.users.login_user import LoginUserUseCase
from spacebook.application.use_cases.users.logout_user import LogoutUserUseCase
from spacebook.application.use_cases.users.prepare_login import \
    PrepareLoginViewUseCase
from spacebook.application.use_cases.users.register_user import \
    RegisterUserUseCase
from spacebook.application.use_cases.users.results import AuthOutcome
from spacebook.infrastructure.audit import AuditAction, audit_log
from spacebook.interfaces.http.cookies import (clear_external_cookie,
                                               clear_session_cookie,
                                               read_session_token,
                                               write_session_cookie)
from spacebook.interfaces.http.dto.auth import (LoginRequestDTO,
                                                RegisterRequestDTO)
from spacebook.shared.errors.validation import (error_fields,
                                                format_pydantic_errors)
from spacebook.shared.logging import logger
from spacebook.shared.middleware.csrf import csrf_protect
from spacebook.shared.middleware.rate_limit import rate_limit


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def _requested_return_url() -> str | None:
    return request.values.get("returnUrl") or request.values.get("ReturnUrl") or None


def _redirect_with_session(outcome: AuthOutcome) -> Response:
    if outcome.redirect_to is None:
        raise ValueError("outcome carries no redirect target")
    response = redirect(outcome.redirect_to)
    if outcome.session is not None:
        write_session_cookie(response, outcome.session)
    return response


class AuthController:
    def __init__(
        self,
        *,
        prepare_login_use_case: PrepareLoginViewUseCase,
        login_use_case: LoginUserUseCase,
        register_use_case: RegisterUserUseCase,
        logout_use_case: LogoutUserUseCase,
    ) -> None:
        self._prepare_login_use_case = prepare_login_use_case
        self._login_use_case = login_use_case
        self._register_use_case = register_use_case
        self._logout_use_case = logout_use_case

    def index(self) -> Response:
        staged = get_flashed_messages(category_filter=["error"])
        outcome = self._prepare_login_use_case.execute(_requested_return_url(), staged)
        response = make_response(self._render_login(outcome))
        # drop any half-finished external sign-in before showing the form
        clear_external_cookie(response)
        return response

    def access_denied(self) -> str:
        return render_template("auth/access_denied.html")

    @rate_limit(limit=10, window_seconds=60.0)
    @csrf_protect
    def login(self):
        return_url = _requested_return_url()
        try:
            dto = LoginRequestDTO.model_validate(request.form.to_dict())
        except ValidationError as exc:
            logger.info(f"auth.login: invalid form fields={error_fields(exc)}")
            outcome = self._prepare_login_use_case.execute(
                return_url, format_pydantic_errors(exc)
            )
            return self._render_login(outcome, email=request.form.get("email", ""))

        outcome = self._login_use_case.execute(
            dto.email,
            dto.password,
            remember_me=dto.remember_me,
            return_url=return_url,
        )

        if not outcome.succeeded:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=_get_client_ip(),
                details={"reason": outcome.errors[0] if outcome.errors else None},
                success=False,
            )
            return self._render_login(outcome)

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=outcome.session.user_id if outcome.session else None,
            ip_address=_get_client_ip(),
            details={"remember_me": dto.remember_me},
            success=True,
        )
        return _redirect_with_session(outcome)

    def register_form(self) -> str:
        outcome = self._register_use_case.prepare_form(_requested_return_url())
        return self._render_register(outcome)

    @rate_limit(limit=5, window_seconds=60.0)
    @csrf_protect
    def register(self):
        return_url = _requested_return_url()
        try:
            dto = RegisterRequestDTO.model_validate(request.form.to_dict())
        except ValidationError as exc:
            logger.info(f"auth.register: invalid form fields={error_fields(exc)}")
            outcome = self._register_use_case.reject_malformed(
                username=request.form.get("username", ""),
                email=request.form.get("email", ""),
                return_url=return_url,
            )
            return self._render_register(outcome)

        outcome = self._register_use_case.execute(
            dto.username, dto.email, dto.password, return_url=return_url
        )

        if not outcome.succeeded:
            audit_log(
                AuditAction.REGISTER_FAILED,
                ip_address=_get_client_ip(),
                details={"username": dto.username, "errors": len(outcome.errors)},
                success=False,
            )
            return self._render_register(outcome)

        audit_log(
            AuditAction.REGISTER,
            user_id=outcome.session.user_id if outcome.session else None,
            ip_address=_get_client_ip(),
            details={"username": dto.username},
            success=True,
        )
        return _redirect_with_session(outcome)

    @csrf_protect
    def logout(self) -> Response:
        outcome = self._logout_use_case.execute(
            read_session_token(request), _requested_return_url()
        )

        audit_log(
            AuditAction.LOGOUT,
            ip_address=_get_client_ip(),
            success=True,
        )

        response = _redirect_with_session(outcome)
        clear_session_cookie(response)
        return response

    def _render_login(self, outcome: AuthOutcome, *, email: str | None = None) -> str:
        return render_template(
            "auth/index.html",
            errors=outcome.errors,
            return_url=outcome.return_url,
            email=email if email is not None else outcome.form.get("email", ""),
        )

    def _render_register(self, outcome: AuthOutcome) -> str:
        return render_template(
            "auth/register.html",
            errors=outcome.errors,
            return_url=outcome.return_url,
            username=outcome.form.get("username", ""),
            email=outcome.form.get("email", ""),
        )

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/Auth")
        bp.add_url_rule("", view_func=self.index, methods=["GET"], endpoint="index")
        bp.add_url_rule("/Index", view_func=self.index, methods=["GET"], endpoint="index")
        bp.add_url_rule("/AccessDenied", view_func=self.access_denied, methods=["GET"])
        bp.add_url_rule("/Login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/Register", view_func=self.register_form, methods=["GET"])
        bp.add_url_rule("/Register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/Logout", view_func=self.logout, methods=["POST"])
        return bp
