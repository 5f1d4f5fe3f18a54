# usabilla/config.py
"""
Centralized configuration for the Usabilla API client.

All configurable values are read from environment variables with sensible defaults.
Values passed to a client explicitly always win over these defaults.

Usage:
    from usabilla.config import API_HOST, API_PROTOCOL

    url = get_base_url(API_PROTOCOL, API_HOST)

Environment Variables:
    USABILLA_HOST: API host name (default: data.usabilla.com)
    USABILLA_PROTOCOL: URL scheme (default: https)
    USABILLA_BASE_PATH: Path prefix of every resource (default: /live)
    USABILLA_TIMEOUT: HTTP timeout in seconds (default: 30.0)
    USABILLA_ACCESS_KEY / USABILLA_SECRET_KEY: Credentials picked up by the CLI
"""

import os
from typing import Dict, Final

# =============================================================================
# API Endpoint
# =============================================================================

API_HOST: Final[str] = os.getenv("USABILLA_HOST", "data.usabilla.com")

API_PROTOCOL: Final[str] = os.getenv("USABILLA_PROTOCOL", "https")

# Every resource path hangs off this prefix
BASE_PATH: Final[str] = os.getenv("USABILLA_BASE_PATH", "/live")

TIMEOUT: Final[float] = float(os.getenv("USABILLA_TIMEOUT", "30.0"))

# =============================================================================
# Credentials (names only, values are read by the CLI at call time)
# =============================================================================

ACCESS_KEY_ENV: Final[str] = "USABILLA_ACCESS_KEY"
SECRET_KEY_ENV: Final[str] = "USABILLA_SECRET_KEY"

# =============================================================================
# Helper Functions
# =============================================================================


def get_base_url(protocol: str = API_PROTOCOL, host: str = API_HOST) -> str:
    """
    Build the scheme and authority part of every request URL.

    Args:
        protocol: URL scheme, e.g. "https"
        host: API host name, e.g. "data.usabilla.com"

    Returns:
        Base URL without trailing slash (e.g., "https://data.usabilla.com")
    """
    return f"{protocol}://{host.rstrip('/')}"


def describe_config() -> Dict[str, str]:
    """Effective configuration, safe to print (secrets are reported as set/unset)."""
    return {
        "host": API_HOST,
        "protocol": API_PROTOCOL,
        "base_path": BASE_PATH,
        "timeout": str(TIMEOUT),
        "access_key": os.environ.get(ACCESS_KEY_ENV, "") or "<unset>",
        "secret_key": "<set>" if os.environ.get(SECRET_KEY_ENV) else "<unset>",
    }
