"""
Repository interfaces - Define contracts for data access.
Follows Interface Segregation Principle - specific interfaces for specific needs.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..domain.entities import ExtractionRecord, FileRecord
from ..domain.value_objects import ContentHash, InvoiceFingerprint, TenantId


class IFileRepository(ABC):
    """
    Interface for file record access.
    Business logic depends on this interface, not concrete implementations.
    """

    @abstractmethod
    async def create(self, file_record: FileRecord) -> FileRecord:
        """Create a new file record."""
        pass

    @abstractmethod
    async def get_by_id(self, file_id: str) -> Optional[FileRecord]:
        """Get file record by ID."""
        pass

    @abstractmethod
    async def find_files_by_tenant_hash_size(
        self,
        tenant_id: TenantId,
        content_hash: ContentHash,
        file_size: int,
        exclude_id: Optional[str] = None
    ) -> List[FileRecord]:
        """Files of a tenant with equal hash and size, oldest first."""
        pass

    @abstractmethod
    async def update_file_hash_and_size(self, file_id: str, content_hash: ContentHash, file_size: int) -> FileRecord:
        """Persist hash and size. Raises NotFoundError for unknown files."""
        pass

    @abstractmethod
    async def find_by_hash(self, tenant_id: TenantId, content_hash: ContentHash) -> Optional[FileRecord]:
        """Oldest file of a tenant with this hash."""
        pass

    @abstractmethod
    async def list_by_tenant(self, tenant_id: TenantId) -> List[FileRecord]:
        """All files of a tenant."""
        pass


class IExtractionRepository(ABC):
    """
    Interface for extraction record access.
    """

    @abstractmethod
    async def create(self, extraction: ExtractionRecord) -> ExtractionRecord:
        """Create a new extraction record."""
        pass

    @abstractmethod
    async def get_extraction(self, extraction_id: str) -> Optional[ExtractionRecord]:
        """Get extraction by ID."""
        pass

    @abstractmethod
    async def find_extractions_by_fingerprint(
        self,
        tenant_id: TenantId,
        fingerprint: InvoiceFingerprint,
        exclude_id: Optional[str] = None
    ) -> List[ExtractionRecord]:
        """Other extractions of a tenant with this fingerprint, oldest first."""
        pass

    @abstractmethod
    async def find_candidate_extractions(
        self,
        tenant_id: TenantId,
        vendor_name_like: Optional[str] = None,
        invoice_number_exact: Optional[str] = None,
        exclude_id: Optional[str] = None,
        limit: int = 10
    ) -> List[ExtractionRecord]:
        """Fuzzy-match candidates of invoice-like document types, newest first."""
        pass

    @abstractmethod
    async def update_extraction_duplicate_fields(self, extraction_id: str, fields: Dict[str, Any]) -> ExtractionRecord:
        """Overwrite duplicate fields. Raises NotFoundError for unknown extractions."""
        pass

    @abstractmethod
    async def find_extractions_by_fingerprint_ordered(
        self,
        fingerprint: InvoiceFingerprint,
        tenant_id: Optional[TenantId] = None
    ) -> List[ExtractionRecord]:
        """All extractions with this fingerprint by creation time ascending."""
        pass

    @abstractmethod
    async def list_by_tenant(self, tenant_id: TenantId) -> List[ExtractionRecord]:
        """All extractions of a tenant, newest first."""
        pass
