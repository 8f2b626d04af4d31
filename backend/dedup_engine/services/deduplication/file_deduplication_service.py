"""
File Deduplication Service - Stage 1, exact content-hash matching.

Errors always propagate: an undetermined file hash must never pass as unique.
"""
from typing import Optional

from ...api.dto import FileDeduplicationResult, ProcessFileDecision
from ...domain.entities import FileRecord
from ...domain.value_objects import ContentHash, TenantId
from ...repositories.interfaces import IFileRepository
from ...utils.hash_utils import calculate_file_hash
from ...utils.validators import validate_content_hash, validate_file_size, validate_identifier
from ...core.logging_config import get_logger

logger = get_logger(__name__)

DUPLICATE_FILE_REASON = "Duplicate file already processed"


class FileDeduplicationService:
    """
    Detects byte-identical files within a tenant.
    Hash equality is treated as certainty.
    """

    def __init__(self, file_repo: IFileRepository):
        """
        Initialize file deduplication service.

        Args:
            file_repo: File repository (dependency injection)
        """
        self._repo = file_repo

    async def check_file_duplicate(
        self,
        content_hash: ContentHash,
        file_size: int,
        tenant_id: TenantId,
        exclude_file_id: Optional[str] = None
    ) -> FileDeduplicationResult:
        """
        Look for another file of the tenant with the same hash and size.

        Args:
            content_hash: SHA-256 of the file content
            file_size: File size in bytes
            tenant_id: Tenant scope
            exclude_file_id: The file performing the check, if any

        Returns:
            Result referencing the earliest matching file, confidence 1.0 on a match
        """
        validate_content_hash(content_hash)
        validate_file_size(file_size)
        validate_identifier(tenant_id, "tenant_id")

        try:
            duplicates = await self._repo.find_files_by_tenant_hash_size(
                tenant_id, content_hash, file_size, exclude_id=exclude_file_id
            )
        except Exception as e:
            logger.error(f"Error checking file duplicate for hash {content_hash[:12]}: {e}")
            raise

        if duplicates:
            duplicate = duplicates[0]
            logger.info(f"File duplicate found: {duplicate.id} (hash {content_hash[:12]}, tenant {tenant_id})")
            return FileDeduplicationResult(
                is_duplicate=True,
                duplicate_file_id=duplicate.id,
                content_hash=content_hash,
                confidence=1.0
            )

        logger.info(f"No file duplicate found for hash {content_hash[:12]}")
        return FileDeduplicationResult(
            is_duplicate=False,
            content_hash=content_hash,
            confidence=0.0
        )

    async def calculate_and_store_file_hash(self, file_id: str, data: bytes) -> ContentHash:
        """
        Hash file bytes and persist hash and size on the file record.
        Calling it again with the same bytes stores the same values.

        Raises:
            InvalidInputError: If the content is empty
            NotFoundError: If the file record does not exist
        """
        validate_identifier(file_id, "file_id")
        content_hash = calculate_file_hash(data)
        file_size = len(data)

        try:
            await self._repo.update_file_hash_and_size(file_id, content_hash, file_size)
        except Exception as e:
            logger.error(f"Error storing file hash for {file_id}: {e}")
            raise

        logger.info(f"File hash calculated and stored for {file_id}: {content_hash[:12]} ({file_size} bytes)")
        return content_hash

    async def get_file_by_hash(self, content_hash: ContentHash, tenant_id: TenantId) -> Optional[FileRecord]:
        """Oldest file of the tenant with this content hash."""
        validate_content_hash(content_hash)
        validate_identifier(tenant_id, "tenant_id")
        return await self._repo.find_by_hash(tenant_id, content_hash)

    async def should_process_file(
        self,
        file_id: str,
        content_hash: ContentHash,
        file_size: int,
        tenant_id: TenantId
    ) -> ProcessFileDecision:
        """Decide whether a file should be processed, excluding the file itself from the lookup."""
        result = await self.check_file_duplicate(content_hash, file_size, tenant_id, exclude_file_id=file_id)

        if result.is_duplicate:
            return ProcessFileDecision(
                should_process=False,
                reason=DUPLICATE_FILE_REASON,
                duplicate_file_id=result.duplicate_file_id
            )

        return ProcessFileDecision(should_process=True)
