"""
Usabilla API client - USBL1 request signing for the Usabilla public data API.

Requests are authenticated with a date-scoped HMAC-SHA256 signature that the
server recomputes from the raw request; no handshake or session is involved.
"""

__version__ = "1.0.0"

# Core signing
from .canonical import build_query_string, canonical_string, resolve_path
from .signer import (
    Credentials,
    SignedRequest,
    Signer,
    SigningContext,
    SigningDates,
    derive_signing_key,
)

# Clients
from .client import AsyncUsabillaClient, UsabillaClient
from .resources import Resource, ResourceSpec

# Exceptions
from .exceptions import (
    SigningError,
    UsabillaConnectionError,
    UsabillaError,
    UsabillaRequestError,
)

__all__ = [
    "__version__",
    # Core
    "Signer",
    "Credentials",
    "SigningContext",
    "SigningDates",
    "SignedRequest",
    "derive_signing_key",
    "resolve_path",
    "build_query_string",
    "canonical_string",
    # Clients
    "UsabillaClient",
    "AsyncUsabillaClient",
    "Resource",
    "ResourceSpec",
    # Exceptions
    "UsabillaError",
    "SigningError",
    "UsabillaConnectionError",
    "UsabillaRequestError",
]
