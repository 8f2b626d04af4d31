"""
Abstract base class for database adapters.
All database implementations must inherit from this class.
"""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional


class DatabaseInterface(ABC):
    """
    Abstract interface for database operations on file and extraction records.
    Records are plain dicts; extraction tenancy comes from the owning file.
    This allows plug-and-play storage without changing business logic.
    """

    # File operations
    @abstractmethod
    async def create_file(self, file_data: Dict) -> Dict:
        """Create a new file record."""
        pass

    @abstractmethod
    async def get_file(self, file_id: str) -> Optional[Dict]:
        """Get a file by ID."""
        pass

    @abstractmethod
    async def update_file(self, file_id: str, updates: Dict) -> Optional[Dict]:
        """Update a file. Returns None if the file does not exist."""
        pass

    @abstractmethod
    async def find_files_by_hash(
        self,
        tenant_id: str,
        content_hash: str,
        file_size: Optional[int] = None,
        exclude_id: Optional[str] = None
    ) -> List[Dict]:
        """Files of a tenant with this hash (and size, if given), oldest first."""
        pass

    @abstractmethod
    async def get_files_by_tenant(self, tenant_id: str) -> List[Dict]:
        """All files of a tenant."""
        pass

    # Extraction operations
    @abstractmethod
    async def create_extraction(self, extraction_data: Dict) -> Dict:
        """Create a new extraction record."""
        pass

    @abstractmethod
    async def get_extraction(self, extraction_id: str) -> Optional[Dict]:
        """Get an extraction by ID, with its tenant resolved."""
        pass

    @abstractmethod
    async def update_extraction(self, extraction_id: str, updates: Dict) -> Optional[Dict]:
        """Update an extraction. Returns None if the extraction does not exist."""
        pass

    @abstractmethod
    async def find_extractions_by_fingerprint(
        self,
        fingerprint: str,
        tenant_id: Optional[str] = None,
        exclude_id: Optional[str] = None
    ) -> List[Dict]:
        """Extractions with this fingerprint, oldest first."""
        pass

    @abstractmethod
    async def find_candidate_extractions(
        self,
        tenant_id: str,
        document_types: Iterable[str],
        vendor_name_like: Optional[str] = None,
        invoice_number_exact: Optional[str] = None,
        exclude_id: Optional[str] = None,
        limit: int = 10
    ) -> List[Dict]:
        """
        Extractions of a tenant whose vendor name contains ``vendor_name_like``
        or whose invoice number equals ``invoice_number_exact``, newest first.
        """
        pass

    @abstractmethod
    async def get_extractions_by_tenant(self, tenant_id: str) -> List[Dict]:
        """All extractions of a tenant, newest first."""
        pass

    @abstractmethod
    async def initialize(self):
        """Initialize database (create tables/collections, indexes, etc.)."""
        pass

    @abstractmethod
    async def close(self):
        """Close database connection."""
        pass
