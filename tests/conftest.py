"""
This file contains shared fixtures and configuration for the test suite.

Pytest will automatically discover and use the fixtures defined in this file.

The environment is pointed at a throwaway directory before any linkshelf
module is imported, because settings, the engine and the log directory are
all resolved at import time.
"""

import os
import tempfile
from pathlib import Path

_TEST_ROOT = Path(tempfile.mkdtemp(prefix="linkshelf-tests-"))

os.environ["LINKSHELF_DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_ROOT / 'test.db'}"
os.environ["LOG_DIR"] = str(_TEST_ROOT / "logs")
os.environ["MEDIA_ROOT"] = str(_TEST_ROOT / "storage")
os.environ["APP_URL"] = "http://test"
os.environ["SECRET_KEY"] = "linkshelf-test-secret"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402


@pytest.fixture(scope="session")
def media_root() -> Path:
    return _TEST_ROOT / "storage"
