"""
Deduplication Service - Orchestrates file-level and invoice-level checks.

The stages fail closed (they raise). This service fails open: if any stage
errors during the full flow, processing is allowed to continue.
"""
from typing import List, Mapping, Optional

from ...api.dto import (
    FileDeduplicationResult,
    FullDeduplicationResult,
    InvoiceDeduplicationResult,
    ProcessFileDecision,
)
from ...core.logging_config import get_logger
from ...domain.entities import ExtractionRecord
from ...domain.outcome import Err, capture
from ...domain.value_objects import ContentHash, DuplicateType, TenantId
from .file_deduplication_service import FileDeduplicationService
from .invoice_deduplication_service import InvoiceDeduplicationService

logger = get_logger(__name__)

# Classifications that let a document continue downstream; "possible" is only flagged for review
PROCESSABLE_TYPES = frozenset({DuplicateType.UNIQUE, DuplicateType.POSSIBLE})


class DeduplicationService:
    """
    Single entry point for deduplication decisions.
    Both stage services are injected.
    """

    def __init__(
        self,
        file_service: FileDeduplicationService,
        invoice_service: InvoiceDeduplicationService
    ):
        """
        Initialize deduplication service with dependencies.

        Args:
            file_service: Stage-1 service (dependency injection)
            invoice_service: Stage-2 service (dependency injection)
        """
        self._file_service = file_service
        self._invoice_service = invoice_service

    async def check_file_duplicate(
        self,
        content_hash: ContentHash,
        file_size: int,
        tenant_id: TenantId,
        exclude_file_id: Optional[str] = None
    ) -> FileDeduplicationResult:
        """Stage 1: check file-level duplication."""
        return await self._file_service.check_file_duplicate(content_hash, file_size, tenant_id, exclude_file_id)

    async def calculate_and_store_file_hash(self, file_id: str, data: bytes) -> ContentHash:
        """Calculate and store file hash."""
        return await self._file_service.calculate_and_store_file_hash(file_id, data)

    async def should_process_file(
        self,
        file_id: str,
        content_hash: ContentHash,
        file_size: int,
        tenant_id: TenantId
    ) -> ProcessFileDecision:
        """Check if a file should be processed."""
        return await self._file_service.should_process_file(file_id, content_hash, file_size, tenant_id)

    async def check_invoice_duplicate(
        self,
        extraction_id: str,
        extracted_fields: Mapping,
        tenant_id: TenantId
    ) -> InvoiceDeduplicationResult:
        """Stage 2: check invoice-level duplication."""
        return await self._invoice_service.check_invoice_duplicate(extraction_id, extracted_fields, tenant_id)

    async def update_invoice_duplicate_status(
        self,
        extraction_id: str,
        result: InvoiceDeduplicationResult
    ) -> ExtractionRecord:
        """Persist an invoice check result on the extraction."""
        return await self._invoice_service.update_duplicate_status(extraction_id, result)

    async def get_duplicate_chain(self, extraction_id: str) -> List[ExtractionRecord]:
        """Get duplicate chain for an extraction."""
        return await self._invoice_service.get_duplicate_chain(extraction_id)

    async def perform_full_deduplication(
        self,
        file_id: str,
        file_bytes: bytes,
        tenant_id: TenantId,
        extracted_fields: Optional[Mapping] = None,
        extraction_id: Optional[str] = None
    ) -> FullDeduplicationResult:
        """
        Full deduplication flow for a file.

        1. Hash the bytes and check for an exact file duplicate; a duplicate
           stops here with should_process=False.
        2. With extracted fields and an extraction id, run and persist the
           invoice check; only likely and exact matches block processing.
        3. Otherwise only the file was checked and processing continues.

        Any stage error yields should_process=True with an empty file result.
        """
        hashed = await capture("File hashing", self._file_service.calculate_and_store_file_hash(file_id, file_bytes))
        if isinstance(hashed, Err):
            return self._fail_open(file_id, hashed)

        file_check = await capture(
            "File duplicate check",
            self._file_service.check_file_duplicate(hashed.value, len(file_bytes), tenant_id, exclude_file_id=file_id)
        )
        if isinstance(file_check, Err):
            return self._fail_open(file_id, file_check)
        file_result = file_check.value

        if file_result.is_duplicate:
            logger.info(
                f"File {file_id} is an exact duplicate of {file_result.duplicate_file_id}, skipping processing"
            )
            return FullDeduplicationResult(file_result=file_result, should_process=False)

        if extracted_fields is None or not extraction_id:
            return FullDeduplicationResult(file_result=file_result, should_process=True)

        invoice_check = await capture(
            "Invoice duplicate check",
            self._invoice_service.check_invoice_duplicate(extraction_id, extracted_fields, tenant_id)
        )
        if isinstance(invoice_check, Err):
            return self._fail_open(file_id, invoice_check)
        invoice_result = invoice_check.value

        stored = await capture(
            "Duplicate status update",
            self._invoice_service.update_duplicate_status(extraction_id, invoice_result)
        )
        if isinstance(stored, Err):
            return self._fail_open(file_id, stored)

        should_process = invoice_result.type in PROCESSABLE_TYPES
        if not should_process:
            logger.info(
                f"Extraction {extraction_id} is a {invoice_result.type.value} duplicate "
                f"(confidence {invoice_result.confidence:.3f}), processing blocked"
            )

        return FullDeduplicationResult(
            file_result=file_result,
            invoice_result=invoice_result,
            should_process=should_process
        )

    def _fail_open(self, file_id: str, failure: Err) -> FullDeduplicationResult:
        """Deduplication failures never block processing."""
        logger.error(f"Error in full deduplication flow for file {file_id}: {failure.reason}")
        return FullDeduplicationResult(
            file_result=FileDeduplicationResult(is_duplicate=False, content_hash="", confidence=0.0),
            should_process=True,
            error=failure.reason
        )
