# tests/conftest.py

"""Shared pytest fixtures for all provider tests."""

import os
from collections.abc import Generator
from unittest.mock import patch

import pytest

from src.config.settings import Settings

_SETTINGS_ENV = {name.upper() for name in Settings.model_fields}


@pytest.fixture(autouse=True)
def no_real_sessions() -> Generator[None, None, None]:
    """Patch curl_cffi sessions globally so no test reaches the network."""
    with patch("src.providers.base_provider.curl_requests.Session"):
        yield


@pytest.fixture(autouse=True)
def isolated_settings() -> Generator[None, None, None]:
    """Hide the developer's env vars and .env file from Settings()."""
    env = {
        key: value
        for key, value in os.environ.items()
        if key.upper() not in _SETTINGS_ENV
    }
    with patch.dict(os.environ, env, clear=True), patch.dict(
        Settings.model_config, {"env_file": None}
    ):
        yield
