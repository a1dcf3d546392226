"""Rate-limited client for the document registration service."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from crpt_client.config import DEFAULT_API_URL, Settings, get_settings
from crpt_client.documents import Document, DocumentEncoder
from crpt_client.http import DocumentResponse, HttpTransport
from crpt_client.quota import (
    AdmissionGate,
    GateStatus,
    QuotaWindow,
    TimeUnit,
    WindowResetScheduler,
)

logger = logging.getLogger(__name__)


class CrptApi:
    """
    Thread-safe client that submits documents under a request quota.

    At most ``request_limit`` documents are submitted per ``interval``
    of ``time_unit``. Callers beyond the limit block until the next window
    reset. A finished request does not free its slot; only the reset does.

    Example:
        ```python
        with CrptApi(TimeUnit.SECONDS, 2, 5) as api:
            response = api.create_document(document, "signature")
        ```
    """

    def __init__(
        self,
        time_unit: TimeUnit | str,
        request_limit: int,
        interval: float,
        *,
        api_url: str | None = None,
        encoder: DocumentEncoder | None = None,
        transport: HttpTransport | None = None,
        scheduler_timezone: str = "UTC",
    ) -> None:
        """
        Initialize the client and start the window reset scheduler.

        Args:
            time_unit: Unit of ``interval``
            request_limit: Maximum submissions per window
            interval: Window length in ``time_unit``
            api_url: Document creation endpoint
            encoder: Document encoder (JSON by default)
            transport: HTTP transport (a new httpx-backed one by default)
            scheduler_timezone: Timezone of the reset scheduler

        Raises:
            ConfigurationError: If the limit or interval is invalid
        """
        self._window = QuotaWindow.from_units(request_limit, interval, time_unit)
        self._api_url = api_url or DEFAULT_API_URL
        self._encoder = encoder or DocumentEncoder()
        self._owns_transport = transport is None
        self._transport = transport or HttpTransport()
        self._gate = AdmissionGate(self._window.limit)
        self._scheduler = WindowResetScheduler(
            self._gate,
            self._window.duration,
            timezone=scheduler_timezone,
        )
        self._scheduler.start()

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs: Any) -> CrptApi:
        """Build a client from environment-backed settings."""
        settings = settings or get_settings()
        owns_transport = "transport" not in kwargs
        if owns_transport:
            kwargs["transport"] = HttpTransport(
                timeout=httpx.Timeout(
                    settings.http_timeout_read,
                    connect=settings.http_timeout_connect,
                )
            )
        api = cls(
            settings.time_unit,
            settings.request_limit,
            settings.interval,
            api_url=settings.api_url,
            scheduler_timezone=settings.scheduler_timezone,
            **kwargs,
        )
        api._owns_transport = owns_transport
        return api

    @property
    def api_url(self) -> str:
        return self._api_url

    @property
    def window(self) -> QuotaWindow:
        return self._window

    @property
    def gate(self) -> AdmissionGate:
        return self._gate

    @property
    def scheduler(self) -> WindowResetScheduler:
        return self._scheduler

    @property
    def admitted_count(self) -> int:
        """Submissions admitted since the last window reset."""
        return self._gate.count

    def status(self) -> GateStatus:
        return self._gate.status()

    def create_document(
        self,
        document: Document | Mapping[str, Any],
        signature: str,
    ) -> DocumentResponse:
        """
        Submit a document, blocking while the quota is exhausted.

        Args:
            document: Document to register
            signature: Value of the Signature header

        Returns:
            DocumentResponse with the service's status code and body

        Raises:
            InterruptedWait: If the client is shut down with cancel_waiters
                while this call is blocked
            EncodingError: If the document cannot be serialized; the quota
                slot stays spent
            TransportError: On network failure; the quota slot stays spent
        """
        if isinstance(document, Mapping):
            doc_id = document.get("doc_id")
        else:
            doc_id = getattr(document, "doc_id", None)
        logger.info(f"Creating document with ID: {doc_id}")

        self._gate.acquire()

        body = self._encoder.encode(document)
        response = self._transport.post(
            self._api_url,
            body,
            signature,
            content_type=self._encoder.content_type,
        )

        logger.info(f"Received response with status code: {response.status_code}")
        logger.debug(f"Response body: {response.body}")
        return response

    def shutdown(self, cancel_waiters: bool = False) -> None:
        """
        Stop the window reset scheduler.

        Args:
            cancel_waiters: Also close the gate so that blocked callers raise
                InterruptedWait. Without it they stay blocked for good.
        """
        self._scheduler.stop()
        if cancel_waiters:
            self._gate.close()
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> CrptApi:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.shutdown()
