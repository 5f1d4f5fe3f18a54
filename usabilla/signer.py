"""
USBL1 request signer - authenticates API requests using an HMAC-SHA256 key chain.

A per-request signing key is derived from the secret key and the request date,
the canonical request is hashed into a string to sign, and the resulting
signature is packed into the ``Authorization`` header. No handshake or session
is needed: the server recomputes the same signature from the raw request.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Dict, Mapping, Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac

from .canonical import (
    DEFAULT_METHOD,
    SIGNED_HEADERS,
    build_query_string,
    canonical_string,
    resolve_path,
    sha256_hex,
)
from .exceptions import SigningError

logger = logging.getLogger(__name__)

ALGORITHM = "USBL1-HMAC-SHA256"
KEY_PREFIX = "USBL1"
SCOPE_SUFFIX = "usbl1_request"


@dataclass(frozen=True)
class Credentials:
    """API key pair. The secret never shows up in repr() or logs."""

    access_key: str
    secret_key: str = field(repr=False)


@dataclass(frozen=True)
class SigningDates:
    """One instant rendered in the three formats the protocol needs."""

    usbldate: str  # date header, e.g. "Mon, 02 Jan 2017 15:04:05 GMT"
    shortdate: str  # key scope, YYYYMMDD
    longdate: str  # string to sign, YYYYMMDDTHHmmssZ

    @classmethod
    def from_instant(cls, instant: Optional[datetime] = None) -> "SigningDates":
        """
        Format a single instant three ways.

        Args:
            instant: Moment of signing. Defaults to now; naive datetimes are
                     taken as UTC, aware ones are converted to UTC.
        """
        if instant is None:
            instant = datetime.now(timezone.utc)
        elif instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        else:
            instant = instant.astimezone(timezone.utc)

        return cls(
            usbldate=format_datetime(instant, usegmt=True),
            shortdate=instant.strftime("%Y%m%d"),
            longdate=instant.strftime("%Y%m%dT%H%M%SZ"),
        )

    @property
    def scope(self) -> str:
        """Credential scope, ``<shortdate>/usbl1_request``."""
        return f"{self.shortdate}/{SCOPE_SUFFIX}"


@dataclass(frozen=True)
class SigningContext:
    """Everything one signing call needs. Built fresh for every request."""

    path: str
    query_string: str
    host: str
    dates: SigningDates
    method: str = DEFAULT_METHOD
    protocol: str = "https"

    @property
    def url(self) -> str:
        """Request target, with the query suffix only when there is a query."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    def canonical_request(self) -> str:
        return canonical_string(
            self.method, self.path, self.query_string, self.dates.usbldate, self.host
        )


@dataclass(frozen=True)
class SignedRequest:
    """Signed URL and headers, valid for one request at the signing instant."""

    url: str
    headers: Dict[str, str]


def _hmac(key: bytes, message: str) -> bytes:
    try:
        h = hmac.HMAC(key, hashes.SHA256())
        h.update(message.encode("utf-8"))
        return h.finalize()
    except UnsupportedAlgorithm as e:
        raise SigningError(f"HMAC-SHA256 is not available: {e}") from e


def derive_signing_key(secret_key: str, shortdate: str) -> bytes:
    """
    Derive the date-scoped signing key.

    kDate = HMAC("USBL1" + secret, shortdate)
    kSigning = HMAC(kDate, "usbl1_request")

    Args:
        secret_key: The account secret key.
        shortdate: Signing date as YYYYMMDD.

    Returns:
        Raw 32-byte signing key.
    """
    k_date = _hmac(f"{KEY_PREFIX}{secret_key}".encode("utf-8"), shortdate)
    return _hmac(k_date, SCOPE_SUFFIX)


def string_to_sign(canonical_request: str, dates: SigningDates) -> str:
    """Algorithm tag, long date, credential scope and canonical request hash."""
    return "\n".join(
        [
            ALGORITHM,
            dates.longdate,
            dates.scope,
            sha256_hex(canonical_request),
        ]
    )


def compute_signature(signing_key: bytes, to_sign: str) -> str:
    """Lowercase hex HMAC-SHA256 of the string to sign."""
    return _hmac(signing_key, to_sign).hex()


def authorization_header(access_key: str, dates: SigningDates, signature: str) -> str:
    return ", ".join(
        [
            f"{ALGORITHM} Credential={access_key}/{dates.scope}",
            f"SignedHeaders={SIGNED_HEADERS}",
            f"Signature={signature}",
        ]
    )


class Signer:
    """
    Signs Usabilla API requests with the USBL1 scheme.

    The signer only holds immutable credentials and the target host, so one
    instance can be shared across threads and tasks.

    Example:
        >>> signer = Signer(Credentials("AK", "SK"), host="data.usabilla.com")
        >>> signed = signer.sign("/live/websites/button/:id/feedback", id="42",
        ...                      params={"limit": 5})
        >>> signed.url
        '/live/websites/button/42/feedback?limit=5'
    """

    def __init__(self, credentials: Credentials, host: str, protocol: str = "https"):
        """
        Initialize the Signer.

        Args:
            credentials: Access and secret key. Not validated here; empty keys
                         give a well-formed signature the server will reject.
            host: Host name that goes into the signed ``host`` header.
            protocol: URL scheme used by the transport.
        """
        self._credentials = credentials
        self.host = host
        self.protocol = protocol

    @property
    def access_key(self) -> str:
        return self._credentials.access_key

    def context(
        self,
        path_template: str,
        id: Optional[Any] = None,
        params: Optional[Mapping[str, Any]] = None,
        instant: Optional[datetime] = None,
        method: str = DEFAULT_METHOD,
    ) -> SigningContext:
        """
        Build a fresh signing context for one request.

        The clock is read once here (unless an instant is injected), so the
        date header, the key scope and the string to sign always agree.
        """
        return SigningContext(
            path=resolve_path(path_template, id),
            query_string=build_query_string(params),
            host=self.host,
            dates=SigningDates.from_instant(instant),
            method=method,
            protocol=self.protocol,
        )

    def sign_context(self, context: SigningContext) -> SignedRequest:
        """
        Sign a prepared context.

        Returns:
            SignedRequest with the request target and the ``date`` and
            ``Authorization`` headers.

        Raises:
            SigningError: If a hashing primitive fails. Nothing partial is returned.
        """
        canonical = context.canonical_request()
        to_sign = string_to_sign(canonical, context.dates)
        signing_key = derive_signing_key(self._credentials.secret_key, context.dates.shortdate)
        signature = compute_signature(signing_key, to_sign)

        logger.debug(
            f"Signed {context.method} {context.url} for scope {context.dates.scope}, "
            f"canonical request hash {sha256_hex(canonical)}"
        )

        return SignedRequest(
            url=context.url,
            headers={
                "date": context.dates.usbldate,
                "Authorization": authorization_header(
                    self._credentials.access_key, context.dates, signature
                ),
            },
        )

    def sign(
        self,
        path_template: str,
        id: Optional[Any] = None,
        params: Optional[Mapping[str, Any]] = None,
        instant: Optional[datetime] = None,
    ) -> SignedRequest:
        """
        Sign a GET request for a path template.

        Args:
            path_template: Resource path, optionally with an ``:id`` placeholder.
            id: Value for the placeholder; ``"*"`` selects every resource.
            params: Query parameters supported by the endpoint.
            instant: Signing time (default: now).

        Returns:
            SignedRequest ready to hand to the HTTP transport.
        """
        return self.sign_context(self.context(path_template, id, params, instant))
