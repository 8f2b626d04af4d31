"""
Value Objects - Immutable objects that represent domain concepts.
These have no identity and are compared by value.
"""
from enum import Enum
from typing import NewType

# Value objects for type safety and domain clarity
ContentHash = NewType("ContentHash", str)
InvoiceFingerprint = NewType("InvoiceFingerprint", str)
TenantId = NewType("TenantId", str)


class DocumentType(str, Enum):
    """Document types produced by extraction."""
    INVOICE = "invoice"
    RECEIPT = "receipt"
    PURCHASE_ORDER = "purchase_order"
    OTHER = "other"


class DuplicateStatus(str, Enum):
    """Duplicate status persisted on an extraction."""
    UNIQUE = "unique"
    POSSIBLE_DUPLICATE = "possible_duplicate"
    DUPLICATE = "duplicate"


class DuplicateType(str, Enum):
    """Classification of a single duplicate check, ordered by rank."""
    UNIQUE = "unique"
    POSSIBLE = "possible"
    LIKELY = "likely"
    EXACT = "exact"

    @property
    def rank(self) -> int:
        return _TYPE_RANK[self]

    def to_status(self) -> DuplicateStatus:
        """Map a check classification to the persisted status."""
        return _STATUS_BY_TYPE[self]


_TYPE_RANK = {
    DuplicateType.UNIQUE: 0,
    DuplicateType.POSSIBLE: 1,
    DuplicateType.LIKELY: 2,
    DuplicateType.EXACT: 3,
}

_STATUS_BY_TYPE = {
    DuplicateType.EXACT: DuplicateStatus.DUPLICATE,
    DuplicateType.LIKELY: DuplicateStatus.POSSIBLE_DUPLICATE,
    DuplicateType.POSSIBLE: DuplicateStatus.POSSIBLE_DUPLICATE,
    DuplicateType.UNIQUE: DuplicateStatus.UNIQUE,
}

# Only these document types take part in fuzzy candidate search
FUZZY_DOCUMENT_TYPES = frozenset({
    DocumentType.INVOICE,
    DocumentType.RECEIPT,
    DocumentType.PURCHASE_ORDER,
})
