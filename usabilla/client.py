"""
Usabilla API client.

Provides both synchronous (UsabillaClient) and asynchronous (AsyncUsabillaClient)
clients. Each request is signed with the USBL1 scheme and sent as a GET with
exactly the signed headers.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping

import httpx

from . import config
from .exceptions import UsabillaConnectionError, UsabillaRequestError
from .resources import PRODUCTS, Resource, build_tree
from .signer import Credentials, SignedRequest, Signer

logger = logging.getLogger(__name__)

# Options accepted by configure()
CONFIG_OPTIONS = frozenset({"host", "protocol", "timeout"})


# =============================================================================
# Shared Base
# =============================================================================


class _BaseClient(ABC):
    """Credentials, signer, configuration and resource tree shared by both clients."""

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        host: str = config.API_HOST,
        protocol: str = config.API_PROTOCOL,
        timeout: float = config.TIMEOUT,
        base_path: str = config.BASE_PATH,
    ):
        if not access_key or not secret_key:
            logger.warning("Usabilla client created with an empty access or secret key")

        self._credentials = Credentials(access_key=access_key, secret_key=secret_key)
        self.host = host
        self.protocol = protocol
        self.timeout = timeout
        self.base_path = base_path
        self._signer = Signer(self._credentials, host=host, protocol=protocol)
        self._resources = build_tree(PRODUCTS, base_path, self.signed_get)

    def __getattr__(self, name: str) -> Resource:
        resources = self.__dict__.get("_resources", {})
        if name in resources:
            return resources[name]
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    @property
    def resources(self) -> dict[str, Resource]:
        """Top-level products (e.g. ``websites``)."""
        return dict(self._resources)

    @property
    def base_url(self) -> str:
        return config.get_base_url(self.protocol, self.host)

    def configure(self, **options: Any) -> None:
        """
        Update host, protocol or timeout.

        The signer is rebuilt so the signed ``host`` header always matches the
        host the request is sent to.

        Raises:
            ValueError: If an unknown option is given.
        """
        unknown = set(options) - CONFIG_OPTIONS
        if unknown:
            raise ValueError(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")

        for key, value in options.items():
            setattr(self, key, value)

        self._signer = Signer(self._credentials, host=self.host, protocol=self.protocol)
        logger.info(f"Usabilla client configured for {self.base_url}")

    def sign(
        self,
        path_template: str,
        id: Any | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> SignedRequest:
        """Sign a GET request without sending it."""
        return self._signer.sign(path_template, id=id, params=params)

    @abstractmethod
    def signed_get(
        self,
        path_template: str,
        id: Any | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Sign and send a GET request; the resource tree calls this."""
        pass

    def _handle_response(self, response: httpx.Response, url: str) -> Any:
        """Decode a 200 body; anything else fails with the raw body as payload."""
        if response.status_code != 200:
            logger.debug(f"GET {url} failed with HTTP {response.status_code}")
            raise UsabillaRequestError(response.status_code, response.text, url=url)
        return response.json()


# =============================================================================
# Synchronous Client
# =============================================================================


class UsabillaClient(_BaseClient):
    """
    Synchronous client for the Usabilla public API.

    Example:
        ```python
        from usabilla import UsabillaClient

        with UsabillaClient("ACCESS_KEY", "SECRET_KEY") as client:
            feedback = client.websites.buttons.feedback.get(id="*", params={"limit": 5})
        ```
    """

    def __init__(self, access_key: str, secret_key: str, **options: Any):
        """
        Initialize the Usabilla client.

        Args:
            access_key: Account access key.
            secret_key: Account secret key.
            **options: host, protocol, timeout or base_path overrides.
        """
        super().__init__(access_key, secret_key, **options)
        self._client = httpx.Client(timeout=httpx.Timeout(self.timeout))

    def signed_get(
        self,
        path_template: str,
        id: Any | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """
        Sign and send a GET request.

        Args:
            path_template: Resource path, optionally with an ``:id`` placeholder.
            id: Value for the placeholder.
            params: Query parameters.

        Returns:
            The decoded JSON body.

        Raises:
            SigningError: If signing fails.
            UsabillaConnectionError: If the host cannot be reached.
            UsabillaRequestError: If the response is not HTTP 200.
        """
        signed = self.sign(path_template, id=id, params=params)
        url = f"{self.base_url}{signed.url}"
        logger.debug(f"GET {url}")

        try:
            response = self._client.get(url, headers=signed.headers, timeout=self.timeout)
        except httpx.TransportError as e:
            raise UsabillaConnectionError(f"Connection failed: {e}") from e

        return self._handle_response(response, url)

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> "UsabillaClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


# =============================================================================
# Asynchronous Client
# =============================================================================


class AsyncUsabillaClient(_BaseClient):
    """
    Asynchronous client for the Usabilla public API.

    Resource ``get()`` calls return awaitables.

    Example:
        ```python
        from usabilla import AsyncUsabillaClient

        async with AsyncUsabillaClient("ACCESS_KEY", "SECRET_KEY") as client:
            stats = await client.websites.campaigns.stats.get(id="abc123")
        ```
    """

    def __init__(self, access_key: str, secret_key: str, **options: Any):
        super().__init__(access_key, secret_key, **options)
        self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))

    async def signed_get(
        self,
        path_template: str,
        id: Any | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Sign and send a GET request. See UsabillaClient.signed_get()."""
        signed = self.sign(path_template, id=id, params=params)
        url = f"{self.base_url}{signed.url}"
        logger.debug(f"GET {url}")

        try:
            response = await self._client.get(url, headers=signed.headers, timeout=self.timeout)
        except httpx.TransportError as e:
            raise UsabillaConnectionError(f"Connection failed: {e}") from e

        return self._handle_response(response, url)

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncUsabillaClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
