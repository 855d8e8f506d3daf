# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import secrets
import time
from collections.abc import Mapping

from flask import Flask, Response, g, request

from spacebook.shared.config import load_config
from spacebook.shared.logging import clear_correlation_id, logger, set_correlation_id

_SENSITIVE_HEADERS = frozenset(
    {"authorization", "cookie", "set-cookie", "x-csrf-token", "x-api-key"}
)


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def _digest(value: str) -> str:
    return f"<hashed:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"


def _scrub_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {
        key: _digest(value) if key.lower() in _SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


def _describe_request(debug_mode: bool) -> str:
    line = f"{request.method} {request.path} from {_client_ip()}"
    if not debug_mode:
        return line
    # form values carry passwords; only the field names are logged
    return (
        f"{line}, user={getattr(g, 'user_id', None)}, "
        f"args={sorted(request.args)}, form_fields={sorted(request.form)}, "
        f"headers={_scrub_headers(dict(request.headers))}"
    )


def configure_request_logging(app: Flask) -> None:
    debug_mode = load_config().debug_logging

    @app.before_request
    def _before_request() -> None:
        set_correlation_id(request.headers.get("X-Request-ID") or secrets.token_urlsafe(8))
        g.request_start_time = time.perf_counter()
        logger.info(f"Request: {_describe_request(debug_mode)}")

    @app.after_request
    def _after_request(response: Response) -> Response:
        started = getattr(g, "request_start_time", time.perf_counter())
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        logger.info(
            f"Response: {request.method} {request.path} "
            f"status={response.status_code} in {elapsed_ms:.1f} ms"
        )
        return response

    @app.teardown_request
    def _teardown_request(exc: BaseException | None) -> None:
        if exc is not None:
            if debug_mode:
                logger.opt(exception=exc).error(
                    f"Request error: {_describe_request(debug_mode)}"
                )
            else:
                logger.error(
                    f"Request error: {type(exc).__name__} on {request.method} {request.path}"
                )
        clear_correlation_id()


__all__ = ["configure_request_logging"]
