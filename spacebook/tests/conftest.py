from __future__ import annotations

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="spacebook-tests-")

# must be in place before spacebook.shared.config is first loaded
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["LOG_FILE"] = os.path.join(_TMP_DIR, "app.log")
os.environ["ENABLE_RATE_LIMIT"] = "false"
os.environ["ENABLE_CSRF"] = "false"
os.environ["APP_ENV"] = "test"

import pytest  # noqa: E402

from spacebook.infrastructure.db import ENGINE, Base  # noqa: E402
from spacebook.infrastructure.db import models  # noqa: E402,F401


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=ENGINE)
    Base.metadata.create_all(bind=ENGINE)
    yield
    Base.metadata.drop_all(bind=ENGINE)
