"""JSON encoding of registration documents."""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from crpt_client.documents.models import Document
from crpt_client.errors import EncodingError

logger = logging.getLogger(__name__)


class DocumentEncoder:
    """
    Serializes documents to the JSON request body.

    Accepts either a Document or a plain mapping, which is validated into a
    Document first so that malformed input never reaches the network.
    """

    content_type = "application/json"

    def encode(self, document: Document | Mapping[str, Any]) -> bytes:
        """
        Encode a document to UTF-8 JSON.

        Args:
            document: Document model or mapping with wire field names

        Returns:
            Serialized request body

        Raises:
            EncodingError: If the document cannot be validated or serialized
        """
        try:
            if not isinstance(document, Document):
                if not isinstance(document, Mapping):
                    raise EncodingError(
                        f"Cannot encode {type(document).__name__} as a document"
                    )
                document = Document.model_validate(dict(document))
            payload = document.model_dump_json(by_alias=True)
        except (ValidationError, PydanticSerializationError) as e:
            logger.warning(f"Failed to encode document: {e}")
            raise EncodingError(f"Failed to encode document: {e}") from e

        return payload.encode("utf-8")
