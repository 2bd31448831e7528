"""Root conftest.py for the SSO client models test suite.

This file contains project-wide fixtures and pytest configuration.
"""

import os
from collections.abc import Generator

import pytest

import sso_client
from sso_client.core.config import get_settings
from sso_client.core.error_context import _get_sensitive_fields


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test multiple components"
    )


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear cached settings and serializers before and after each test."""
    caches = (
        get_settings,
        _get_sensitive_fields,
        sso_client.get_serializer,
        sso_client.get_codec,
    )
    for cached in caches:
        cached.cache_clear()
    yield
    for cached in caches:
        cached.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove settings-related environment variables for the test.

    The log level variable is kept since pytest-env provides it.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        pytest.MonkeyPatch: The monkeypatch instance for env manipulation.
    """
    env_prefixes = ["SSO_CLIENT_", "K_SERVICE", "AWS_EXECUTION_ENV"]
    kept = {"SSO_CLIENT_LOG_CONFIG__LOG_LEVEL"}
    for key in list(os.environ.keys()):
        if key in kept:
            continue
        if any(key.startswith(prefix) for prefix in env_prefixes):
            monkeypatch.delenv(key, raising=False)

    return monkeypatch
