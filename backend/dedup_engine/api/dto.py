"""
Data Transfer Objects (DTOs) returned by the engine.
Separates caller-facing result contracts from domain entities.
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from ..domain.value_objects import DocumentType, DuplicateStatus, DuplicateType


class FileDeduplicationResult(BaseModel):
    """Result of a stage-1 (content hash) check."""
    is_duplicate: bool
    duplicate_file_id: Optional[str] = None
    content_hash: str
    confidence: float = Field(ge=0.0, le=1.0)


class ProcessFileDecision(BaseModel):
    """Whether a file should go on to extraction."""
    should_process: bool
    reason: Optional[str] = None
    duplicate_file_id: Optional[str] = None


class SimilarityScores(BaseModel):
    """Per-field similarity of a fuzzy candidate."""
    vendor_match: float = 0.0
    invoice_number_match: float = 0.0
    date_proximity: float = 0.0
    amount_match: float = 0.0
    overall_score: float = 0.0


class InvoiceDeduplicationResult(BaseModel):
    """Result of a stage-2 (invoice) check."""
    is_duplicate: bool
    duplicate_extraction_id: Optional[str] = None
    fingerprint: str
    confidence: float = Field(ge=0.0, le=1.0)
    type: DuplicateType
    scores: Optional[SimilarityScores] = None

    @property
    def duplicate_status(self) -> DuplicateStatus:
        return self.type.to_status()


class FullDeduplicationResult(BaseModel):
    """Combined decision of the full deduplication flow."""
    file_result: FileDeduplicationResult
    invoice_result: Optional[InvoiceDeduplicationResult] = None
    should_process: bool
    error: Optional[str] = None


class DuplicateSummaryDTO(BaseModel):
    """One flagged extraction in a duplicate listing."""
    id: str
    file_id: str
    document_type: DocumentType
    duplicate_status: DuplicateStatus
    duplicate_confidence: float
    duplicate_candidate_id: Optional[str]
    invoice_fingerprint: Optional[str]
    created_at: Optional[str]
    key_fields: Dict[str, Any]

    class Config:
        from_attributes = True


class DuplicateListDTO(BaseModel):
    """Page of flagged extractions."""
    duplicates: List[DuplicateSummaryDTO]
    total: int
    has_more: bool


class DuplicateStatsDTO(BaseModel):
    """Duplicate statistics for one tenant."""
    total_files: int
    files_with_hash: int
    total_extractions: int
    exact_duplicates: int
    possible_duplicates: int
    unique_invoices: int
    duplicates_by_document_type: Dict[str, int]
