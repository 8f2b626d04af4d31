"""
Typed access to extracted field bags.

Extraction output is a map of field name to ``{"value": ..., "confidence": ...}``.
Synonym preference order lives here, once.
"""
from typing import Any, Mapping, Optional

from ..core.config import DEFAULT_CURRENCY
from ..domain.entities import ExtractedField, InvoiceData

VENDOR_NAME_KEYS = ("vendorName", "supplierName")
INVOICE_NUMBER_KEYS = ("invoiceNumber", "invoiceNo")
INVOICE_DATE_KEYS = ("invoiceDate", "date")
TOTAL_AMOUNT_KEYS = ("totalAmount", "total")
CURRENCY_KEYS = ("currency",)


def _unwrap(entry: Any) -> Any:
    if isinstance(entry, ExtractedField):
        return entry.value
    if isinstance(entry, Mapping):
        return entry.get("value")
    return entry


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def field(bag: Optional[Mapping[str, Any]], primary_key: str, *fallback_keys: str) -> Optional[Any]:
    """
    First non-blank value among the given keys, in order.

    Entries may be ExtractedField objects, ``{"value": ...}`` dicts or bare values.
    """
    if not bag:
        return None
    for key in (primary_key, *fallback_keys):
        value = _unwrap(bag.get(key))
        if not _is_blank(value):
            return value.strip() if isinstance(value, str) else value
    return None


def extract_invoice_data(bag: Optional[Mapping[str, Any]], default_currency: str = DEFAULT_CURRENCY) -> InvoiceData:
    """Derive the key invoice fields from an extracted field bag."""
    return InvoiceData(
        vendor_name=field(bag, *VENDOR_NAME_KEYS),
        invoice_number=field(bag, *INVOICE_NUMBER_KEYS),
        invoice_date=field(bag, *INVOICE_DATE_KEYS),
        total_amount=field(bag, *TOTAL_AMOUNT_KEYS),
        currency=field(bag, *CURRENCY_KEYS) or default_currency,
    )
