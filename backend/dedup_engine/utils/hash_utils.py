"""
Hash utilities - Pure functions for content hashes and invoice fingerprints.
"""
import hashlib
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional, Union

from ..api.exceptions import InvalidInputError
from ..core.config import DEFAULT_CURRENCY
from ..core.logging_config import get_logger
from ..domain.value_objects import ContentHash, InvoiceFingerprint
from .normalization import (
    normalize_currency,
    normalize_date,
    normalize_invoice_number,
    normalize_vendor_name,
    parse_amount,
)

logger = get_logger(__name__)

# Normalized values never contain control characters, so neither of these can collide with data
FIELD_SEPARATOR = "\x1f"
MISSING_SENTINEL = "\x00"

_CENT = Decimal("0.01")


def generate_sha256(data: Union[bytes, str]) -> str:
    """
    Generate a SHA-256 hex digest.

    Args:
        data: Raw bytes, or text encoded as UTF-8

    Returns:
        SHA-256 digest as hex string
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def calculate_file_hash(data: bytes) -> ContentHash:
    """
    Calculate the content hash of raw file bytes.

    Raises:
        InvalidInputError: If data is not bytes or is empty
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise InvalidInputError(f"File content must be bytes, got {type(data).__name__}")
    if len(data) == 0:
        raise InvalidInputError("Cannot hash an empty file")
    return ContentHash(generate_sha256(bytes(data)))


def normalize_amount(value: Any) -> Optional[str]:
    """Fixed-point string of an amount rounded half-up to 2 decimals."""
    amount = parse_amount(value)
    if amount is None:
        return None
    return str(amount.quantize(_CENT, rounding=ROUND_HALF_UP))


def generate_invoice_fingerprint(
    vendor_name: Any,
    invoice_number: Any,
    invoice_date: Any,
    total_amount: Any,
    currency: Any = None,
    default_currency: str = DEFAULT_CURRENCY,
) -> InvoiceFingerprint:
    """
    Generate a fingerprint from an invoice's key identifying fields.

    Formatting noise (case, whitespace, punctuation in the vendor name, date
    layout, amount precision) does not change the fingerprint. A missing field
    is encoded as a sentinel distinct from every normalized value.

    Raises:
        InvalidInputError: If vendor, number, date and amount are all missing
    """
    parts = [
        normalize_vendor_name(vendor_name),
        normalize_invoice_number(invoice_number),
        normalize_date(invoice_date),
        normalize_amount(total_amount),
    ]
    if all(part is None for part in parts):
        raise InvalidInputError("Cannot fingerprint an invoice with no identifying fields")

    parts.append(normalize_currency(currency, default_currency))
    composite = FIELD_SEPARATOR.join(MISSING_SENTINEL if part is None else part for part in parts)
    fingerprint = InvoiceFingerprint(generate_sha256(composite))

    logger.debug(
        f"Generated invoice fingerprint {fingerprint[:12]} "
        f"(vendor={parts[0]!r}, invoice={parts[1]!r}, date={parts[2]!r}, "
        f"amount={parts[3]!r}, currency={parts[4]!r})"
    )
    return fingerprint
