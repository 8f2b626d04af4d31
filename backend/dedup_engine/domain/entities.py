"""
Domain entities - Core business objects.
These represent the business concepts, not database models.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Union

from .value_objects import (
    ContentHash,
    DocumentType,
    DuplicateStatus,
    InvoiceFingerprint,
    TenantId,
)


@dataclass
class FileRecord:
    """
    File record - the subset of a stored file the engine reads and writes.
    Owned by the external file store.
    """
    id: str
    tenant_id: TenantId
    content_hash: Optional[ContentHash] = None
    file_size_bytes: Optional[int] = None
    file_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def has_hash(self) -> bool:
        """Check if the content hash has been calculated."""
        return self.content_hash is not None


@dataclass
class ExtractedField:
    """A single extracted value with the extractor's confidence."""
    value: Any
    confidence: float = 1.0


@dataclass
class ExtractionRecord:
    """
    Extraction record - output of field extraction for one file.
    The engine only mutates the duplicate fields.
    """
    id: str
    file_id: str
    tenant_id: Optional[TenantId] = None
    extracted_fields: Dict[str, ExtractedField] = field(default_factory=dict)
    document_type: DocumentType = DocumentType.INVOICE
    invoice_fingerprint: Optional[InvoiceFingerprint] = None
    duplicate_confidence: float = 0.0
    duplicate_candidate_id: Optional[str] = None
    duplicate_status: DuplicateStatus = DuplicateStatus.UNIQUE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_duplicate(self) -> bool:
        """Check if the last dedup check flagged this extraction."""
        return self.duplicate_status != DuplicateStatus.UNIQUE


@dataclass(frozen=True)
class InvoiceData:
    """Key invoice fields used for fingerprinting and scoring."""
    vendor_name: Optional[str]
    invoice_number: Optional[str]
    invoice_date: Optional[Union[str, date, datetime]]
    total_amount: Optional[Union[str, int, float, Decimal]]
    currency: str

    def has_anchor(self) -> bool:
        """Fuzzy matching needs a vendor name or an invoice number to search on."""
        return bool(self.vendor_name) or bool(self.invoice_number)
