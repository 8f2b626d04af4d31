"""
Duplicate Reporting Service - Read-only views over stored duplicate status.
"""
from collections import Counter
from typing import Optional

from ...api.dto import DuplicateListDTO, DuplicateStatsDTO
from ...api.exceptions import InvalidInputError
from ...api.mappers import DuplicateSummaryMapper
from ...domain.value_objects import DuplicateStatus, TenantId
from ...repositories.interfaces import IExtractionRepository, IFileRepository
from ...utils.validators import validate_identifier

MAX_PAGE_SIZE = 100


class DuplicateReportingService:
    """Lists flagged extractions and summarizes duplicate counts per tenant."""

    def __init__(self, file_repo: IFileRepository, extraction_repo: IExtractionRepository):
        self._file_repo = file_repo
        self._extraction_repo = extraction_repo

    async def list_duplicates(
        self,
        tenant_id: TenantId,
        limit: int = 20,
        offset: int = 0,
        duplicate_status: Optional[DuplicateStatus] = None
    ) -> DuplicateListDTO:
        """
        Page through the tenant's flagged extractions, newest first.

        Args:
            tenant_id: Tenant scope
            limit: Page size, clamped to [1, 100]
            offset: Number of flagged extractions to skip
            duplicate_status: Only this status (duplicate or possible_duplicate)
        """
        validate_identifier(tenant_id, "tenant_id")
        if offset < 0:
            raise InvalidInputError("offset cannot be negative")
        if duplicate_status is not None:
            duplicate_status = DuplicateStatus(duplicate_status)
            if duplicate_status == DuplicateStatus.UNIQUE:
                raise InvalidInputError("Unique extractions are not duplicates")
        limit = max(1, min(limit, MAX_PAGE_SIZE))

        extractions = await self._extraction_repo.list_by_tenant(tenant_id)
        flagged = [
            extraction for extraction in extractions
            if extraction.is_duplicate()
            and (duplicate_status is None or extraction.duplicate_status == duplicate_status)
        ]

        page = flagged[offset:offset + limit]
        return DuplicateListDTO(
            duplicates=DuplicateSummaryMapper.to_dto_list(page),
            total=len(flagged),
            has_more=offset + limit < len(flagged)
        )

    async def get_duplicate_stats(self, tenant_id: TenantId) -> DuplicateStatsDTO:
        """Duplicate statistics for one tenant."""
        validate_identifier(tenant_id, "tenant_id")
        files = await self._file_repo.list_by_tenant(tenant_id)
        extractions = await self._extraction_repo.list_by_tenant(tenant_id)

        statuses = Counter(extraction.duplicate_status for extraction in extractions)
        by_type = Counter(
            extraction.document_type.value for extraction in extractions if extraction.is_duplicate()
        )

        return DuplicateStatsDTO(
            total_files=len(files),
            files_with_hash=sum(1 for file_record in files if file_record.has_hash()),
            total_extractions=len(extractions),
            exact_duplicates=statuses[DuplicateStatus.DUPLICATE],
            possible_duplicates=statuses[DuplicateStatus.POSSIBLE_DUPLICATE],
            unique_invoices=len({e.invoice_fingerprint for e in extractions if e.invoice_fingerprint}),
            duplicates_by_document_type=dict(by_type)
        )
