# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, render_template

from spacebook.auth import auth_required, authed_request


class HomeController:
    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("home", __name__)
        bp.add_url_rule("/", view_func=self.index, methods=["GET"])
        bp.add_url_rule("/Home/Index", view_func=self.index, methods=["GET"])
        bp.add_url_rule("/Home/Error", view_func=self.error, methods=["GET"])
        return bp

    @auth_required
    def index(self):
        return render_template("home/index.html", user=authed_request().user)

    def error(self):
        return render_template("error.html", error="internal_error", status=500), 500
