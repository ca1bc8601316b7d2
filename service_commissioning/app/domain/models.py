"""
Wire models for commissioning documents and registry replies.
"""

from typing import Any, List, Optional
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductGroup(str, Enum):
    """Registry product groups."""
    CLOTHES = "clothes"
    SHOES = "shoes"
    TOBACCO = "tobacco"
    PERFUMERY = "perfumery"
    TIRES = "tires"
    ELECTRONICS = "electronics"
    PHARMA = "pharma"
    MILK = "milk"
    BICYCLE = "bicycle"
    WHEELCHAIRS = "wheelchairs"


class DocumentFormat(str, Enum):
    """Submission formats."""
    MANUAL = "MANUAL"
    XML = "XML"
    CSV = "CSV"


class DocumentType(str, Enum):
    """Commissioning document types."""
    LP_INTRODUCE_GOODS = "LP_INTRODUCE_GOODS"
    LP_INTRODUCE_GOODS_CSV = "LP_INTRODUCE_GOODS_CSV"
    LP_INTRODUCE_GOODS_XML = "LP_INTRODUCE_GOODS_XML"

    @classmethod
    def from_hint(cls, hint: str) -> "DocumentType":
        """Derive the document type from a free-form hint such as a file name."""
        upper = hint.upper()
        if "CSV" in upper:
            return cls.LP_INTRODUCE_GOODS_CSV
        if "XML" in upper:
            return cls.LP_INTRODUCE_GOODS_XML
        return cls.LP_INTRODUCE_GOODS


class ProductionType(str, Enum):
    """Who produced the goods."""
    OWN_PRODUCTION = "OWN_PRODUCTION"
    CONTRACT_PRODUCTION = "CONTRACT_PRODUCTION"


class CertificateDocument(str, Enum):
    """Kinds of conformity documents a product may reference."""
    CONFORMITY_CERTIFICATE = "CONFORMITY_CERTIFICATE"
    CONFORMITY_DECLARATION = "CONFORMITY_DECLARATION"


class WireModel(BaseModel):
    """Base for models exchanged with the registry."""

    model_config = ConfigDict(populate_by_name=True)


class Description(WireModel):
    """Document description block."""
    participant_inn: str = Field(..., alias="participantInn", frozen=True)


class Product(WireModel):
    """One item within a commissioning document.

    ``uitu_code`` is the only field the registry fills in after construction.
    """
    certificate_document: Optional[CertificateDocument] = Field(None, frozen=True)
    certificate_document_date: Optional[str] = Field(None, frozen=True)
    certificate_document_number: Optional[str] = Field(None, frozen=True)
    owner_inn: str = Field(..., frozen=True)
    producer_inn: str = Field(..., frozen=True)
    production_date: str = Field(..., frozen=True)
    tnved_code: str = Field(..., frozen=True)
    uit_code: Optional[str] = Field(None, frozen=True)
    uitu_code: Optional[str] = None


class Document(WireModel):
    """Commissioning document.

    ``doc_type`` accepts any hint string and is narrowed to a DocumentType
    once, at construction. Registration outcome fields (``doc_status``,
    ``import_request``, ``reg_date``, ``reg_number``) stay assignable.
    """
    description: Optional[Description] = Field(None, frozen=True)
    doc_id: str = Field(..., frozen=True)
    doc_status: Optional[str] = None
    doc_type: DocumentType = Field(DocumentType.LP_INTRODUCE_GOODS, frozen=True)
    import_request: Optional[str] = None
    owner_inn: str = Field(..., frozen=True)
    participant_inn: str = Field(..., frozen=True)
    producer_inn: str = Field(..., frozen=True)
    production_date: str = Field(..., frozen=True)
    production_type: ProductionType = Field(..., frozen=True)
    products: List[Product] = Field(default_factory=list, frozen=True)
    reg_date: Optional[str] = None
    reg_number: Optional[str] = None

    @field_validator("doc_type", mode="before")
    @classmethod
    def _derive_doc_type(cls, value: Any) -> DocumentType:
        if isinstance(value, DocumentType):
            return value
        return DocumentType.from_hint("" if value is None else str(value))

    @field_validator("products", mode="before")
    @classmethod
    def _default_products(cls, value: Any) -> Any:
        return [] if value is None else value


class RequestBody(WireModel):
    """Submission envelope posted to the registry."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    document_format: DocumentFormat = DocumentFormat.MANUAL
    product_document: str
    product_group: ProductGroup = ProductGroup.MILK
    signature: str
    type: DocumentType


class Response(WireModel):
    """Registry reply: ``value`` on success, ``error_message`` otherwise."""
    value: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.value is not None
