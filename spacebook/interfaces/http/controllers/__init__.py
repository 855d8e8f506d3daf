# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .auth_controller import AuthController
from .home_controller import HomeController

__all__ = ["AuthController", "HomeController"]
