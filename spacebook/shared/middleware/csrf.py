# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hmac
import secrets
from collections.abc import Callable
from functools import wraps

from flask import Flask, abort, g, request

from spacebook.shared.config import load_config

SAFE_METHODS: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")
CSRF_COOKIE = "csrf_token"
CSRF_FIELD = "csrf_token"


def _is_enabled() -> bool:
    return load_config().security.enable_csrf


def csrf_token() -> str:
    """Token for the current request, reusing the cookie when one exists."""
    token = getattr(g, "_csrf_token", None)
    if token is None:
        token = request.cookies.get(CSRF_COOKIE, "") or secrets.token_urlsafe(32)
        g._csrf_token = token
    return token


def configure_csrf(app: Flask) -> None:
    @app.context_processor
    def _inject_csrf():
        return {"csrf_enabled": _is_enabled(), "csrf_token": csrf_token}

    if not _is_enabled():
        return

    @app.after_request
    def _ensure_csrf_cookie(resp):
        token = getattr(g, "_csrf_token", None)
        if token and token != request.cookies.get(CSRF_COOKIE):
            config = load_config()
            resp.set_cookie(
                CSRF_COOKIE,
                token,
                httponly=True,
                samesite=config.security.cookie_samesite,
                secure=config.security.cookie_secure,
                max_age=60 * 60 * 24 * 7,
            )
        return resp


def csrf_protect(f: Callable):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if not _is_enabled():
            return f(*args, **kwargs)
        if request.method in SAFE_METHODS:
            return f(*args, **kwargs)
        submitted = (
            request.form.get(CSRF_FIELD) or request.headers.get("X-CSRF-Token") or ""
        ).strip()
        cookie = (request.cookies.get(CSRF_COOKIE) or "").strip()
        if not submitted or not cookie or not hmac.compare_digest(submitted, cookie):
            abort(400, description="csrf")
        return f(*args, **kwargs)

    return wrapper


__all__ = ["configure_csrf", "csrf_protect", "csrf_token"]
