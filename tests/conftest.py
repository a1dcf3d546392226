"""Pytest configuration and fixtures."""

import threading
import time
from collections.abc import Callable, Generator

import httpx
import pytest

from crpt_client.documents import Description, Document, Product
from crpt_client.http import HttpTransport


class RecordingHandler:
    """httpx mock handler that records requests and returns a fixed response."""

    def __init__(self, status_code: int = 200, body: str = '{"value": "ok"}') -> None:
        self.status_code = status_code
        self.body = body
        self.requests: list[httpx.Request] = []
        self._lock = threading.Lock()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        with self._lock:
            self.requests.append(request)
        return httpx.Response(self.status_code, text=self.body)


@pytest.fixture
def wait_until() -> Callable[..., bool]:
    """Poll a predicate until it holds or the timeout expires."""

    def _wait(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.01)
        return predicate()

    return _wait


@pytest.fixture
def recording_handler() -> RecordingHandler:
    """Handler answering every request with 200."""
    return RecordingHandler()


@pytest.fixture
def mock_transport(
    recording_handler: RecordingHandler,
) -> Generator[HttpTransport, None, None]:
    """Transport backed by httpx.MockTransport."""
    client = httpx.Client(transport=httpx.MockTransport(recording_handler))
    transport = HttpTransport(client=client)
    yield transport
    transport.close()


@pytest.fixture
def sample_document() -> Document:
    """Document with every field populated."""
    return Document(
        description=Description(participant_inn="1234567890"),
        doc_id="example_id",
        doc_status="example_status",
        doc_type="LP_INTRODUCE_GOODS",
        import_request=True,
        owner_inn="1234567890",
        participant_inn="0987654321",
        producer_inn="1122334455",
        production_date="2020-01-23",
        production_type="example_type",
        products=[
            Product(
                certificate_document="example_document",
                certificate_document_date="2020-01-23",
                certificate_document_number="12345",
                owner_inn="1234567890",
                producer_inn="1122334455",
                production_date="2020-01-23",
                tnved_code="example_code",
                uit_code="example_uit_code",
                uitu_code="example_uitu_code",
            )
        ],
        reg_date="2020-01-23",
        reg_number="example_reg_number",
    )
