"""
Pydantic models for registration documents.

Field aliases follow the wire names expected by the registration service.
"""

from pydantic import BaseModel, ConfigDict, Field


class Description(BaseModel):
    """Document description block."""

    model_config = ConfigDict(populate_by_name=True)

    participant_inn: str | None = Field(default=None, alias="participantInn")


class Product(BaseModel):
    """A single product line of a document."""

    model_config = ConfigDict(populate_by_name=True)

    certificate_document: str | None = None
    certificate_document_date: str | None = None
    certificate_document_number: str | None = None
    owner_inn: str | None = None
    producer_inn: str | None = None
    production_date: str | None = None
    tnved_code: str | None = None
    uit_code: str | None = None
    uitu_code: str | None = None


class Document(BaseModel):
    """Document submitted to the registration service."""

    model_config = ConfigDict(populate_by_name=True)

    description: Description | None = None
    doc_id: str | None = None
    doc_status: str | None = None
    doc_type: str | None = None
    import_request: bool = Field(default=False, alias="importRequest")
    owner_inn: str | None = None
    participant_inn: str | None = None
    producer_inn: str | None = None
    production_date: str | None = None
    production_type: str | None = None
    products: list[Product] = Field(default_factory=list)
    reg_date: str | None = None
    reg_number: str | None = None
