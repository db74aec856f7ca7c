"""
Root pytest configuration for apple-jwt.

Bootstraps logging and keeps APPLE_* variables from the developer's shell out of the tests.
"""

import pytest

from apple_jwt.logging import bootstrap_logging
from .unit.keys import APPLE_ENV_VARS

bootstrap_logging()


@pytest.fixture(autouse=True)
def clean_apple_env(monkeypatch):
    """Remove APPLE_* variables so each test starts from an empty environment."""
    for name in APPLE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
