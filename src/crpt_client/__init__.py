"""
Rate-limited client for the document registration service.

Submissions are counted against a fixed per-window quota that is shared by
every thread using the same client.
"""

from crpt_client.api import CrptApi
from crpt_client.documents import Description, Document, DocumentEncoder, Product
from crpt_client.errors import (
    ConfigurationError,
    CrptApiError,
    EncodingError,
    InterruptedWait,
    TransportError,
)
from crpt_client.http import DocumentResponse, HttpTransport
from crpt_client.quota import (
    AdmissionGate,
    GateStatus,
    QuotaWindow,
    TimeUnit,
    WindowResetScheduler,
)

__all__ = [
    "AdmissionGate",
    "ConfigurationError",
    "CrptApi",
    "CrptApiError",
    "Description",
    "Document",
    "DocumentEncoder",
    "DocumentResponse",
    "EncodingError",
    "GateStatus",
    "HttpTransport",
    "InterruptedWait",
    "Product",
    "QuotaWindow",
    "TimeUnit",
    "TransportError",
    "WindowResetScheduler",
]
