"""
In-memory adapter implementing DatabaseInterface.
Perfect for tests and embedding - stores all data in memory using Python dicts.
Data is lost on restart (no persistence).
"""
from typing import Dict, Iterable, List, Optional, Tuple
from datetime import datetime
import copy

from .base import DatabaseInterface
from ...utils.normalization import normalize_invoice_number, normalize_vendor_name
from ...core.logging_config import get_logger

logger = get_logger(__name__)

VENDOR_FIELD_KEYS = ("vendorName", "supplierName")
INVOICE_NUMBER_FIELD_KEYS = ("invoiceNumber", "invoiceNo")


def _field_value(extraction: Dict, key: str):
    entry = (extraction.get("extracted_fields") or {}).get(key)
    if isinstance(entry, dict):
        return entry.get("value")
    return entry


class MemoryAdapter(DatabaseInterface):
    """
    In-memory database adapter using Python dictionaries.
    Keeps a content-hash index and a fingerprint index for fast lookups.
    """

    def __init__(self):
        """
        Initialize in-memory adapter.
        Creates empty data structures for files and extractions.
        """
        self._files: Dict[str, Dict] = {}
        self._extractions: Dict[str, Dict] = {}

        # Insertion order breaks ties between equal created_at values
        self._sequence: Dict[str, int] = {}
        self._next_sequence = 0

        # Indexes for fast lookups
        self._hash_index: Dict[Tuple[str, str], List[str]] = {}  # (tenant_id, content_hash) -> [file_ids]
        self._fingerprint_index: Dict[str, List[str]] = {}  # fingerprint -> [extraction_ids]

    async def initialize(self):
        """Initialize database (clears any existing data)."""
        self._files.clear()
        self._extractions.clear()
        self._sequence.clear()
        self._next_sequence = 0
        self._hash_index.clear()
        self._fingerprint_index.clear()

    async def close(self):
        """Close database connection (no-op for in-memory)."""
        pass

    # Helpers
    def _stamp(self, data: Dict) -> None:
        now = datetime.now().isoformat()
        if not data.get("created_at"):
            data["created_at"] = now
        if not data.get("updated_at"):
            data["updated_at"] = now

    def _register(self, record_id: str) -> None:
        if record_id not in self._sequence:
            self._sequence[record_id] = self._next_sequence
            self._next_sequence += 1

    def _order_key(self, record: Dict):
        return (record.get("created_at") or "", self._sequence.get(record["id"], 0))

    def _index_file(self, file_data: Dict) -> None:
        content_hash = file_data.get("content_hash")
        if content_hash:
            key = (file_data["tenant_id"], content_hash)
            ids = self._hash_index.setdefault(key, [])
            if file_data["id"] not in ids:
                ids.append(file_data["id"])

    def _unindex_file(self, file_data: Dict) -> None:
        content_hash = file_data.get("content_hash")
        if content_hash:
            ids = self._hash_index.get((file_data["tenant_id"], content_hash), [])
            if file_data["id"] in ids:
                ids.remove(file_data["id"])

    def _index_extraction(self, extraction: Dict) -> None:
        fingerprint = extraction.get("invoice_fingerprint")
        if fingerprint:
            ids = self._fingerprint_index.setdefault(fingerprint, [])
            if extraction["id"] not in ids:
                ids.append(extraction["id"])

    def _unindex_extraction(self, extraction: Dict) -> None:
        fingerprint = extraction.get("invoice_fingerprint")
        if fingerprint:
            ids = self._fingerprint_index.get(fingerprint, [])
            if extraction["id"] in ids:
                ids.remove(extraction["id"])

    def _tenant_of(self, extraction: Dict) -> Optional[str]:
        """Tenant of an extraction is the tenant of its file."""
        file_data = self._files.get(extraction.get("file_id"))
        if file_data:
            return file_data.get("tenant_id")
        return extraction.get("tenant_id")

    def _resolved(self, extraction: Dict) -> Dict:
        result = copy.deepcopy(extraction)
        result["tenant_id"] = self._tenant_of(extraction)
        return result

    # File operations
    async def create_file(self, file_data: Dict) -> Dict:
        """Create a new file record."""
        file_id = file_data.get("id")
        if not file_id:
            raise ValueError("File must have an 'id' field")
        if not file_data.get("tenant_id"):
            raise ValueError("File must have a 'tenant_id' field")

        data = copy.deepcopy(file_data)
        self._stamp(data)

        if file_id in self._files:
            self._unindex_file(self._files[file_id])
        self._files[file_id] = data
        self._register(file_id)
        self._index_file(data)

        return copy.deepcopy(data)

    async def get_file(self, file_id: str) -> Optional[Dict]:
        """Get a file by ID."""
        file_data = self._files.get(file_id)
        return copy.deepcopy(file_data) if file_data else None

    async def update_file(self, file_id: str, updates: Dict) -> Optional[Dict]:
        """Update a file."""
        if file_id not in self._files:
            return None

        file_data = self._files[file_id]
        self._unindex_file(file_data)
        for key, value in updates.items():
            file_data[key] = value
        file_data["updated_at"] = datetime.now().isoformat()
        self._index_file(file_data)

        return copy.deepcopy(file_data)

    async def find_files_by_hash(
        self,
        tenant_id: str,
        content_hash: str,
        file_size: Optional[int] = None,
        exclude_id: Optional[str] = None
    ) -> List[Dict]:
        """Files of a tenant with this hash (and size, if given), oldest first."""
        results = []
        for file_id in self._hash_index.get((tenant_id, content_hash), []):
            file_data = self._files.get(file_id)
            if not file_data or file_id == exclude_id:
                continue
            if file_size is not None and file_data.get("file_size_bytes") != file_size:
                continue
            results.append(file_data)

        results.sort(key=self._order_key)
        return [copy.deepcopy(file_data) for file_data in results]

    async def get_files_by_tenant(self, tenant_id: str) -> List[Dict]:
        """All files of a tenant."""
        return [
            copy.deepcopy(file_data)
            for file_data in self._files.values()
            if file_data.get("tenant_id") == tenant_id
        ]

    # Extraction operations
    async def create_extraction(self, extraction_data: Dict) -> Dict:
        """Create a new extraction record."""
        extraction_id = extraction_data.get("id")
        if not extraction_id:
            raise ValueError("Extraction must have an 'id' field")
        if not extraction_data.get("file_id"):
            raise ValueError("Extraction must have a 'file_id' field")

        data = copy.deepcopy(extraction_data)
        self._stamp(data)

        if extraction_id in self._extractions:
            self._unindex_extraction(self._extractions[extraction_id])
        self._extractions[extraction_id] = data
        self._register(extraction_id)
        self._index_extraction(data)

        return self._resolved(data)

    async def get_extraction(self, extraction_id: str) -> Optional[Dict]:
        """Get an extraction by ID."""
        extraction = self._extractions.get(extraction_id)
        return self._resolved(extraction) if extraction else None

    async def update_extraction(self, extraction_id: str, updates: Dict) -> Optional[Dict]:
        """Update an extraction."""
        if extraction_id not in self._extractions:
            return None

        extraction = self._extractions[extraction_id]
        self._unindex_extraction(extraction)
        for key, value in updates.items():
            extraction[key] = value
        extraction["updated_at"] = datetime.now().isoformat()
        self._index_extraction(extraction)

        return self._resolved(extraction)

    async def find_extractions_by_fingerprint(
        self,
        fingerprint: str,
        tenant_id: Optional[str] = None,
        exclude_id: Optional[str] = None
    ) -> List[Dict]:
        """Extractions with this fingerprint, oldest first."""
        results = []
        for extraction_id in self._fingerprint_index.get(fingerprint, []):
            extraction = self._extractions.get(extraction_id)
            if not extraction or extraction_id == exclude_id:
                continue
            if tenant_id is not None and self._tenant_of(extraction) != tenant_id:
                continue
            results.append(extraction)

        results.sort(key=self._order_key)
        return [self._resolved(extraction) for extraction in results]

    async def find_candidate_extractions(
        self,
        tenant_id: str,
        document_types: Iterable[str],
        vendor_name_like: Optional[str] = None,
        invoice_number_exact: Optional[str] = None,
        exclude_id: Optional[str] = None,
        limit: int = 10
    ) -> List[Dict]:
        """Loose vendor-name or exact invoice-number matches, newest first."""
        vendor_pattern = normalize_vendor_name(vendor_name_like)
        invoice_number = normalize_invoice_number(invoice_number_exact)
        if not vendor_pattern and not invoice_number:
            return []

        allowed_types = set(document_types)
        results = []
        for extraction_id, extraction in self._extractions.items():
            if extraction_id == exclude_id:
                continue
            if extraction.get("document_type") not in allowed_types:
                continue
            if self._tenant_of(extraction) != tenant_id:
                continue

            matched = False
            if vendor_pattern:
                for key in VENDOR_FIELD_KEYS:
                    vendor = normalize_vendor_name(_field_value(extraction, key))
                    if vendor and vendor_pattern in vendor:
                        matched = True
                        break
            if not matched and invoice_number:
                for key in INVOICE_NUMBER_FIELD_KEYS:
                    if normalize_invoice_number(_field_value(extraction, key)) == invoice_number:
                        matched = True
                        break
            if matched:
                results.append(extraction)

        results.sort(key=self._order_key, reverse=True)
        if limit is not None and limit > 0:
            results = results[:limit]
        return [self._resolved(extraction) for extraction in results]

    async def get_extractions_by_tenant(self, tenant_id: str) -> List[Dict]:
        """All extractions of a tenant, newest first."""
        results = [
            extraction for extraction in self._extractions.values()
            if self._tenant_of(extraction) == tenant_id
        ]
        results.sort(key=self._order_key, reverse=True)
        return [self._resolved(extraction) for extraction in results]

    def get_stats(self) -> Dict:
        """Get statistics about the in-memory database (useful for debugging)."""
        return {
            "total_files": len(self._files),
            "total_extractions": len(self._extractions),
            "hash_index_size": len(self._hash_index),
            "fingerprint_index_size": len(self._fingerprint_index)
        }
