# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Return URL handling.

Only same-origin paths are ever followed. Anything else is replaced by the
caller's default so a crafted ``returnUrl`` cannot bounce a user to another
host after signing in or out.
"""

from __future__ import annotations

MAX_RETURN_URL_LENGTH = 2048


def is_local_url(url: str | None) -> bool:
    if not url or len(url) > MAX_RETURN_URL_LENGTH:
        return False
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in url):
        return False

    if url[0] == "/":
        if len(url) == 1:
            return True
        # "//host" and "/\host" are treated as scheme-relative by browsers
        return url[1] not in ("/", "\\")

    if url.startswith("~/"):
        return len(url) == 2 or url[2] not in ("/", "\\")

    return False


def resolve_local_url(url: str | None, default: str) -> str:
    """Return ``url`` when it is local, ``default`` otherwise.

    The application-root prefix ``~/`` is rewritten to ``/``.
    """
    if url is None or not is_local_url(url):
        return default
    if url.startswith("~/"):
        return url[1:]
    return url


__all__ = ["MAX_RETURN_URL_LENGTH", "is_local_url", "resolve_local_url"]
