"""
Pytest configuration for trelloclient tests.
"""

import pytest

from .test_utils import RecordingTransport


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep TRELLOCLIENT_* variables from the developer's shell out of the tests."""
    for name in (
        "TRELLOCLIENT_BASE_URI",
        "TRELLOCLIENT_USER_AGENT",
        "TRELLOCLIENT_HTTP_TIMEOUT",
        "TRELLOCLIENT_API_VERSION",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def transport():
    return RecordingTransport()
