"""Synchronous HTTP transport for document submission."""

import json
import logging
import threading
from dataclasses import dataclass, field
from typing import Any

import httpx

from crpt_client.errors import TransportError

logger = logging.getLogger(__name__)


@dataclass
class DocumentResponse:
    """Response returned by the registration service."""

    status_code: int
    """HTTP status code."""

    body: str
    """Raw response body."""

    headers: dict[str, str] = field(default_factory=dict)
    """Response headers."""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json.loads(self.body)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status_code": self.status_code,
            "body": self.body,
            "headers": dict(self.headers),
        }


class HttpTransport:
    """
    Thin wrapper around httpx.Client for one-shot POST requests.

    The underlying client is thread-safe and shared between callers.
    Requests are never retried; failures surface as TransportError.
    """

    DEFAULT_TIMEOUT = httpx.Timeout(
        connect=10.0,
        read=30.0,
        write=10.0,
        pool=10.0,
    )

    def __init__(
        self,
        timeout: httpx.Timeout | None = None,
        headers: dict[str, str] | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            timeout: Request timeout configuration
            headers: Default headers for all requests
            client: Preconfigured client to use instead of creating one
        """
        self._timeout = timeout or self.DEFAULT_TIMEOUT
        self._default_headers = headers or {}
        self._client = client
        self._client_lock = threading.Lock()

    def _get_client(self) -> httpx.Client:
        """Get or create the sync HTTP client, once across threads."""
        client = self._client
        if client is not None and not client.is_closed:
            return client
        with self._client_lock:
            if self._client is None or self._client.is_closed:
                self._client = httpx.Client(
                    timeout=self._timeout,
                    headers=self._default_headers,
                )
            return self._client

    def post(
        self,
        url: str,
        body: bytes,
        signature: str,
        content_type: str = "application/json",
    ) -> DocumentResponse:
        """
        POST a request body.

        Args:
            url: Target URL
            body: Serialized request body
            signature: Value of the Signature header
            content_type: Value of the Content-type header

        Returns:
            DocumentResponse for any HTTP status

        Raises:
            TransportError: On connection, timeout or protocol failure
        """
        headers = {
            "Content-type": content_type,
            "Signature": signature,
        }
        logger.debug(f"Sending HTTP request to URL: {url}")

        try:
            response = self._get_client().post(url, content=body, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Request to {url} failed: {e}")
            raise TransportError(f"Request to {url} failed: {e}", url=url) from e

        return DocumentResponse(
            status_code=response.status_code,
            body=response.text,
            headers=dict(response.headers),
        )

    def close(self) -> None:
        """Close the HTTP client."""
        with self._client_lock:
            if self._client is not None and not self._client.is_closed:
                self._client.close()
                self._client = None
                logger.info("HTTP client closed")

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
