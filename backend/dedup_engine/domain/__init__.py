"""
Domain layer - Contains business entities and domain logic.
This layer is independent of infrastructure and storage.
"""
from .entities import ExtractedField, ExtractionRecord, FileRecord, InvoiceData
from .outcome import Err, Ok, Outcome, capture
from .value_objects import (
    ContentHash,
    DocumentType,
    DuplicateStatus,
    DuplicateType,
    FUZZY_DOCUMENT_TYPES,
    InvoiceFingerprint,
    TenantId,
)

__all__ = [
    "ExtractedField",
    "ExtractionRecord",
    "FileRecord",
    "InvoiceData",
    "Ok",
    "Err",
    "Outcome",
    "capture",
    "ContentHash",
    "DocumentType",
    "DuplicateStatus",
    "DuplicateType",
    "FUZZY_DOCUMENT_TYPES",
    "InvoiceFingerprint",
    "TenantId",
]
