"""Document models and their JSON encoding."""

from crpt_client.documents.encoder import DocumentEncoder
from crpt_client.documents.models import Description, Document, Product

__all__ = [
    "Description",
    "Document",
    "DocumentEncoder",
    "Product",
]
