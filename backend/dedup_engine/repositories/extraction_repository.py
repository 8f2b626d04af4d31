"""
Extraction Repository - Concrete implementation of extraction record access.
Maps between domain entities and database adapters.
"""
from typing import Any, Dict, List, Optional

from .base import BaseRepository, parse_timestamp
from .interfaces import IExtractionRepository
from ..api.exceptions import InvalidInputError, NotFoundError
from ..domain.entities import ExtractedField, ExtractionRecord
from ..domain.value_objects import (
    DocumentType,
    DuplicateStatus,
    FUZZY_DOCUMENT_TYPES,
    InvoiceFingerprint,
    TenantId,
)

DUPLICATE_FIELDS = frozenset({
    "invoice_fingerprint",
    "duplicate_confidence",
    "duplicate_candidate_id",
    "duplicate_status",
})


def _field_to_entity(entry: Any) -> ExtractedField:
    if isinstance(entry, dict):
        return ExtractedField(value=entry.get("value"), confidence=float(entry.get("confidence", 1.0)))
    return ExtractedField(value=entry)


class ExtractionRepository(BaseRepository, IExtractionRepository):
    """
    Repository for extraction records.
    The engine writes only the duplicate fields.
    """

    def _to_entity(self, data: dict) -> ExtractionRecord:
        """Convert database record to domain entity."""
        return ExtractionRecord(
            id=data["id"],
            file_id=data["file_id"],
            tenant_id=data.get("tenant_id"),
            extracted_fields={
                name: _field_to_entity(entry)
                for name, entry in (data.get("extracted_fields") or {}).items()
            },
            document_type=DocumentType(data.get("document_type", DocumentType.INVOICE.value)),
            invoice_fingerprint=data.get("invoice_fingerprint"),
            duplicate_confidence=float(data.get("duplicate_confidence") or 0.0),
            duplicate_candidate_id=data.get("duplicate_candidate_id"),
            duplicate_status=DuplicateStatus(data.get("duplicate_status") or DuplicateStatus.UNIQUE.value),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at"))
        )

    def _to_dict(self, extraction: ExtractionRecord) -> dict:
        """Convert domain entity to database record."""
        return {
            "id": extraction.id,
            "file_id": extraction.file_id,
            "tenant_id": str(extraction.tenant_id) if extraction.tenant_id else None,
            "extracted_fields": {
                name: {"value": entry.value, "confidence": entry.confidence}
                for name, entry in extraction.extracted_fields.items()
            },
            "document_type": DocumentType(extraction.document_type).value,
            "invoice_fingerprint": extraction.invoice_fingerprint,
            "duplicate_confidence": extraction.duplicate_confidence,
            "duplicate_candidate_id": extraction.duplicate_candidate_id,
            "duplicate_status": DuplicateStatus(extraction.duplicate_status).value,
            "created_at": extraction.created_at.isoformat() if extraction.created_at else None,
            "updated_at": extraction.updated_at.isoformat() if extraction.updated_at else None
        }

    async def create(self, extraction: ExtractionRecord) -> ExtractionRecord:
        """Create a new extraction record."""
        result = await self._run("create_extraction", self._db.create_extraction(self._to_dict(extraction)))
        return self._to_entity(result)

    async def get_extraction(self, extraction_id: str) -> Optional[ExtractionRecord]:
        """Get extraction by ID."""
        data = await self._run("get_extraction", self._db.get_extraction(extraction_id))
        return self._to_entity(data) if data else None

    async def find_extractions_by_fingerprint(
        self,
        tenant_id: TenantId,
        fingerprint: InvoiceFingerprint,
        exclude_id: Optional[str] = None
    ) -> List[ExtractionRecord]:
        """Other extractions of a tenant with this fingerprint, oldest first."""
        data_list = await self._run(
            "find_extractions_by_fingerprint",
            self._db.find_extractions_by_fingerprint(str(fingerprint), str(tenant_id), exclude_id)
        )
        return [self._to_entity(data) for data in data_list]

    async def find_candidate_extractions(
        self,
        tenant_id: TenantId,
        vendor_name_like: Optional[str] = None,
        invoice_number_exact: Optional[str] = None,
        exclude_id: Optional[str] = None,
        limit: int = 10
    ) -> List[ExtractionRecord]:
        """Fuzzy-match candidates of invoice-like document types, newest first."""
        data_list = await self._run(
            "find_candidate_extractions",
            self._db.find_candidate_extractions(
                str(tenant_id),
                document_types=[doc_type.value for doc_type in FUZZY_DOCUMENT_TYPES],
                vendor_name_like=vendor_name_like,
                invoice_number_exact=invoice_number_exact,
                exclude_id=exclude_id,
                limit=limit
            )
        )
        return [self._to_entity(data) for data in data_list]

    async def update_extraction_duplicate_fields(self, extraction_id: str, fields: Dict[str, Any]) -> ExtractionRecord:
        """Overwrite the duplicate fields of an extraction."""
        unknown = set(fields) - DUPLICATE_FIELDS
        if unknown:
            raise InvalidInputError(f"Not a duplicate field: {', '.join(sorted(unknown))}")

        updates = dict(fields)
        if isinstance(updates.get("duplicate_status"), DuplicateStatus):
            updates["duplicate_status"] = updates["duplicate_status"].value

        result = await self._run("update_extraction", self._db.update_extraction(extraction_id, updates))
        if result is None:
            raise NotFoundError(f"Extraction {extraction_id} not found")
        return self._to_entity(result)

    async def find_extractions_by_fingerprint_ordered(
        self,
        fingerprint: InvoiceFingerprint,
        tenant_id: Optional[TenantId] = None
    ) -> List[ExtractionRecord]:
        """All extractions with this fingerprint by creation time ascending."""
        data_list = await self._run(
            "find_extractions_by_fingerprint",
            self._db.find_extractions_by_fingerprint(str(fingerprint), str(tenant_id) if tenant_id else None)
        )
        return [self._to_entity(data) for data in data_list]

    async def list_by_tenant(self, tenant_id: TenantId) -> List[ExtractionRecord]:
        """All extractions of a tenant, newest first."""
        data_list = await self._run("get_extractions_by_tenant", self._db.get_extractions_by_tenant(str(tenant_id)))
        return [self._to_entity(data) for data in data_list]
