"""
Mappers between domain entities and DTOs.
"""
from typing import List

from ..domain.entities import ExtractionRecord
from ..utils.fields import extract_invoice_data
from .dto import DuplicateSummaryDTO


class DuplicateSummaryMapper:
    """Maps flagged ExtractionRecords to DuplicateSummaryDTOs."""

    @staticmethod
    def to_dto(extraction: ExtractionRecord) -> DuplicateSummaryDTO:
        """Convert domain entity to DTO."""
        invoice = extract_invoice_data(extraction.extracted_fields)
        return DuplicateSummaryDTO(
            id=extraction.id,
            file_id=extraction.file_id,
            document_type=extraction.document_type,
            duplicate_status=extraction.duplicate_status,
            duplicate_confidence=extraction.duplicate_confidence,
            duplicate_candidate_id=extraction.duplicate_candidate_id,
            invoice_fingerprint=extraction.invoice_fingerprint,
            created_at=extraction.created_at.isoformat() if extraction.created_at else None,
            key_fields={
                "vendorName": invoice.vendor_name,
                "invoiceNumber": invoice.invoice_number,
                "invoiceDate": str(invoice.invoice_date) if invoice.invoice_date is not None else None,
                "totalAmount": str(invoice.total_amount) if invoice.total_amount is not None else None,
            },
        )

    @staticmethod
    def to_dto_list(extractions: List[ExtractionRecord]) -> List[DuplicateSummaryDTO]:
        """Convert list of entities to DTOs."""
        return [DuplicateSummaryMapper.to_dto(extraction) for extraction in extractions]
