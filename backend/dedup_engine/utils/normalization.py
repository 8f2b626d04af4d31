"""
Normalization utilities - Pure functions that canonicalize invoice values.
Shared by fingerprinting and scoring so both see the same canonical forms.
"""
import re
import unicodedata
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

# Accepted non-ISO date layouts, tried in order (day-first before month-first)
DATE_FORMATS = (
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
)

_WHITESPACE = re.compile(r"\s+")
_DECIMAL_COMMA = re.compile(r"^-?\d+,\d{1,2}$")


def _strip_control(text: str) -> str:
    return "".join(ch for ch in text if unicodedata.category(ch)[0] != "C" or ch.isspace())


def normalize_vendor_name(name: Any) -> Optional[str]:
    """
    Case-fold a vendor name, drop punctuation and collapse whitespace.

    Returns None when nothing is left.
    """
    if name is None:
        return None
    text = _strip_control(str(name)).casefold()
    text = "".join(ch for ch in text if unicodedata.category(ch)[0] != "P")
    text = _WHITESPACE.sub(" ", text).strip()
    return text or None


def normalize_invoice_number(number: Any) -> Optional[str]:
    """Upper-case an invoice number and remove all whitespace."""
    if number is None:
        return None
    text = _WHITESPACE.sub("", _strip_control(str(number))).upper()
    return text or None


def normalize_currency(currency: Any, default: str) -> str:
    """Upper-case a currency code, falling back to the default."""
    if currency is None:
        return default
    text = _WHITESPACE.sub("", _strip_control(str(currency))).upper()
    return text or default


def parse_date(value: Any) -> Optional[date]:
    """
    Parse a date from a date, datetime or string.

    Aware datetimes are converted to UTC first. Unparseable values give None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        return parse_date(parsed)
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def normalize_date(value: Any) -> Optional[str]:
    """Canonical YYYY-MM-DD form of a date, or None."""
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else None


def parse_amount(value: Any) -> Optional[Decimal]:
    """
    Parse a monetary amount into a Decimal.

    Strings may carry currency symbols and thousands separators
    ("£1,234.50", "1 234,50", "1.234,50"). Non-finite or unparseable values give None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    else:
        text = "".join(ch for ch in str(value) if ch.isdigit() or ch in ".,-")
        if not text:
            return None
        if "," in text and "." in text:
            # Whichever separator comes last is the decimal point
            if text.rfind(",") > text.rfind("."):
                text = text.replace(".", "").replace(",", ".")
            else:
                text = text.replace(",", "")
        elif text.count(".") > 1:
            text = text.replace(".", "")
        elif _DECIMAL_COMMA.match(text):
            text = text.replace(",", ".")
        else:
            text = text.replace(",", "")
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None

    if not amount.is_finite():
        return None
    return amount
