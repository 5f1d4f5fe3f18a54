"""
USBL1 request canonicalization.

Builds the canonical request string that the client signs and that the
Usabilla API recomputes from the raw HTTP request. Both sides must agree
byte for byte, so every function here is pure and locale independent.
"""

from typing import Any, List, Mapping, Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes

from .exceptions import SigningError

DEFAULT_METHOD = "GET"

ID_PLACEHOLDER = ":id"

# The API decodes the wildcard id only in its percent-encoded form
WILDCARD_ID = "*"
WILDCARD_ID_ENCODED = "%2A"

# Only these two headers take part in the signature
SIGNED_HEADERS = "date;host"


def sha256_hex(data: Union[str, bytes]) -> str:
    """
    Lowercase hex SHA-256 digest of a UTF-8 string or raw bytes.

    Raises:
        SigningError: If the SHA-256 primitive is unavailable.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    try:
        digest = hashes.Hash(hashes.SHA256())
        digest.update(data)
        return digest.finalize().hex()
    except UnsupportedAlgorithm as e:
        raise SigningError(f"SHA-256 is not available: {e}") from e


# Requests are bodiless GETs, so the payload hash is always the empty-string hash
EMPTY_BODY_HASH = sha256_hex(b"")


def resolve_path(template: str, id: Optional[Any] = None) -> str:
    """
    Substitute a resource id into the ``:id`` placeholder of a path template.

    Example:
        >>> resolve_path("/live/websites/button/:id/feedback", "42")
        '/live/websites/button/42/feedback'
        >>> resolve_path("/x/:id/y", "*")
        '/x/%2A/y'

    An absent or empty id leaves the template untouched. A template without
    a placeholder is returned as is.
    """
    if id is None:
        return template

    value = str(id)
    if value == "":
        return template

    if value == WILDCARD_ID:
        value = WILDCARD_ID_ENCODED

    return template.replace(ID_PLACEHOLDER, value, 1)


def _format_value(value: Any) -> str:
    # Render scalars the way the API's own clients do
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    return str(value)


def build_query_string(params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Join query parameters as sorted ``key=value`` pairs.

    Keys are sorted ascending; values are passed through verbatim, without
    URL encoding, because the server canonicalizes the raw query the same way.

    Example:
        >>> build_query_string({"b": 2, "a": 1})
        'a=1&b=2'
    """
    if not params:
        return ""

    return "&".join(f"{key}={_format_value(params[key])}" for key in sorted(params))


def canonical_headers(date: str, host: str) -> List[str]:
    """
    Canonical header lines for the signed ``date`` and ``host`` headers.

    The host line carries its own trailing newline, which leaves a blank
    line before the signed-headers list once the request is joined.
    """
    return [f"date:{date}", f"host:{host}\n"]


def canonical_string(
    method: Optional[str],
    path: str,
    query_string: str,
    date: str,
    host: str,
) -> str:
    """
    Build the canonical request string.

    Lines, in order: method, path, query string, the canonical ``date`` and
    ``host`` headers, the signed-headers list and the body hash.

    Args:
        method: HTTP method, ``GET`` when empty.
        path: Resolved request path.
        query_string: Output of build_query_string().
        date: Value of the ``date`` request header.
        host: API host name.

    Returns:
        The canonical request, ready to be hashed into the string to sign.
    """
    return "\n".join(
        [
            method or DEFAULT_METHOD,
            path,
            query_string,
            *canonical_headers(date, host),
            SIGNED_HEADERS,
            EMPTY_BODY_HASH,
        ]
    )
