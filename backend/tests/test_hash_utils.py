"""Unit tests for content hashing and invoice fingerprints."""

import hashlib
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from dedup_engine.api.exceptions import InvalidInputError
from dedup_engine.utils.hash_utils import (
    calculate_file_hash,
    generate_invoice_fingerprint,
    normalize_amount,
)


class TestCalculateFileHash:
    """Content hash tests."""

    def test_hash_is_sha256_hex(self):
        data = b"%PDF-1.4 invoice"
        assert calculate_file_hash(data) == hashlib.sha256(data).hexdigest()

    def test_hash_is_stable(self):
        data = b"same bytes"
        assert calculate_file_hash(data) == calculate_file_hash(data)

    def test_single_byte_difference_changes_hash(self):
        assert calculate_file_hash(b"invoice-0001") != calculate_file_hash(b"invoice-0002")

    def test_empty_buffer_rejected(self):
        with pytest.raises(InvalidInputError):
            calculate_file_hash(b"")

    def test_non_bytes_rejected(self):
        with pytest.raises(InvalidInputError):
            calculate_file_hash("not bytes")


class TestInvoiceFingerprint:
    """Fingerprint normalization tests."""

    def test_fingerprint_is_deterministic(self):
        args = ("Acme Ltd", "INV-001", "2024-01-15", 100.0, "USD")
        assert generate_invoice_fingerprint(*args) == generate_invoice_fingerprint(*args)

    def test_vendor_formatting_noise_is_ignored(self):
        base = generate_invoice_fingerprint("Acme Ltd", "INV-001", "2024-01-15", 100.0, "USD")
        assert generate_invoice_fingerprint("  ACME   LTD. ", "INV-001", "2024-01-15", 100.0, "USD") == base
        assert generate_invoice_fingerprint("acme, ltd", "INV-001", "2024-01-15", 100.0, "USD") == base

    def test_date_and_amount_formats_are_canonical(self):
        base = generate_invoice_fingerprint("Acme Ltd", "INV-001", "2024-01-15", 100.0, "USD")
        assert generate_invoice_fingerprint("Acme Ltd", "inv-001", date(2024, 1, 15), "100.00", "usd") == base
        assert generate_invoice_fingerprint("Acme Ltd", "INV-001", "15/01/2024", Decimal("100"), "USD") == base
        assert generate_invoice_fingerprint(
            "Acme Ltd", " INV-001 ", datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc), "$100", " USD "
        ) == base

    def test_european_and_english_amounts_agree(self):
        english = generate_invoice_fingerprint("Acme GmbH", "R-77", "2024-01-15", "1,234.56", "EUR")
        european = generate_invoice_fingerprint("Acme GmbH", "R-77", "2024-01-15", "1.234,56 EUR", "EUR")
        small = generate_invoice_fingerprint("Acme GmbH", "R-77", "2024-01-15", "1.23", "EUR")
        assert european == english
        assert european != small

    def test_different_amount_changes_fingerprint(self):
        base = generate_invoice_fingerprint("Acme Ltd", "INV-001", "2024-01-15", 100.0, "USD")
        assert generate_invoice_fingerprint("Acme Ltd", "INV-001", "2024-01-15", 100.5, "USD") != base

    def test_currency_defaults(self):
        assert generate_invoice_fingerprint("Acme", "INV-1", "2024-01-15", 10, None) == \
            generate_invoice_fingerprint("Acme", "INV-1", "2024-01-15", 10, "GBP")

    def test_missing_field_differs_from_empty_and_from_other_fields(self):
        missing_number = generate_invoice_fingerprint("Acme", None, "2024-01-15", 10, "GBP")
        missing_vendor = generate_invoice_fingerprint(None, "ACME", "2024-01-15", 10, "GBP")
        assert missing_number != missing_vendor
        assert missing_number != generate_invoice_fingerprint("Acme", "0", "2024-01-15", 10, "GBP")

    def test_unparseable_date_is_treated_as_missing(self):
        assert generate_invoice_fingerprint("Acme", "INV-1", "not a date", 10) == \
            generate_invoice_fingerprint("Acme", "INV-1", None, 10)

    def test_all_key_fields_missing_rejected(self):
        with pytest.raises(InvalidInputError):
            generate_invoice_fingerprint(None, "  ", None, None, "USD")


class TestNormalizeAmount:
    """Amount canonicalization tests."""

    @pytest.mark.parametrize("value,expected", [
        (100, "100.00"),
        (100.005, "100.01"),
        ("1,234.5", "1234.50"),
        ("1 234,50", "1234.50"),
        ("1.234,56", "1234.56"),
        ("1.234.567,89", "1234567.89"),
        ("1,234,567.89", "1234567.89"),
        ("1.234.567", "1234567.00"),
        ("£99.999", "100.00"),
        (Decimal("-12.345"), "-12.35"),
    ])
    def test_amounts(self, value, expected):
        assert normalize_amount(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", float("nan"), True])
    def test_unusable_amounts(self, value):
        assert normalize_amount(value) is None
