# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from datetime import timedelta

from flask import Flask

from spacebook.auth import EXTENSION_KEY
from spacebook.infrastructure.container import Container
from spacebook.infrastructure.db import init_db
from spacebook.interfaces.http.controllers import HomeController
from spacebook.shared.config import load_config
from spacebook.shared.logging import logger, setup_logging
from spacebook.shared.middleware.csrf import configure_csrf
from spacebook.shared.middleware.error_handler import configure_error_handling
from spacebook.shared.middleware.request_logger import configure_request_logging


def create_app(container: Container | None = None) -> Flask:
    config = load_config()
    setup_logging("DEBUG" if config.debug_logging else None)
    init_db()

    container = container or Container(config)
    # fail at startup, not on the first login, when the wiring is unusable
    controller = container.auth_controller

    app = Flask(__name__)
    configure_error_handling(app)
    configure_csrf(app)
    configure_request_logging(app)

    app.config.update(
        SECRET_KEY=config.secret_key,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SECURE=config.security.cookie_secure,
        SESSION_COOKIE_SAMESITE=config.security.cookie_samesite,
        PERMANENT_SESSION_LIFETIME=timedelta(seconds=config.security.session_lifetime),
    )
    app.extensions[EXTENSION_KEY] = container.session_authority

    app.register_blueprint(controller.as_blueprint())
    app.register_blueprint(HomeController().as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")

        resp.headers.setdefault("Referrer-Policy", "no-referrer")

        resp.headers.setdefault("X-Content-Type-Options", "nosniff")

        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=2592000; includeSubDomains",
            )

        return resp

    logger.info("Flask app initialized")
    return app


if __name__ == "__main__":
    create_app().run(host="127.0.0.1", port=5000, debug=True)
