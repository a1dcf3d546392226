"""HTTP transport for the registration service."""

from crpt_client.http.transport import DocumentResponse, HttpTransport

__all__ = ["DocumentResponse", "HttpTransport"]
