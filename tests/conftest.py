"""
Shared pytest fixtures for Usabilla client tests.
"""

from datetime import datetime, timezone

import pytest

from usabilla import Credentials, Signer

# Frozen instant used by the golden fixtures
FIXED_INSTANT = datetime(2017, 1, 2, 15, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def credentials() -> Credentials:
    """Test key pair."""
    return Credentials(access_key="AK", secret_key="SK")


@pytest.fixture
def signer(credentials: Credentials) -> Signer:
    """Signer for the production host."""
    return Signer(credentials, host="data.usabilla.com")


@pytest.fixture
def instant() -> datetime:
    """Fixed signing instant, 2017-01-02T15:04:05Z."""
    return FIXED_INSTANT


@pytest.fixture
def api_env(monkeypatch):
    """Credentials in the environment, as the CLI expects them."""
    monkeypatch.setenv("USABILLA_ACCESS_KEY", "AK")
    monkeypatch.setenv("USABILLA_SECRET_KEY", "SK")
