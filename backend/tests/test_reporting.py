"""Tests for duplicate listings and statistics."""

import pytest

from dedup_engine.api.exceptions import InvalidInputError
from dedup_engine.domain.value_objects import DocumentType, DuplicateStatus

from factories import invoice_fields

ACME_LTD = invoice_fields("Acme Ltd", "INV-001", "2024-01-15", 100.00, "USD")


@pytest.fixture
def seed(engine, add_extraction):
    """Four tenant-1 extractions with mixed statuses and one tenant-2 duplicate."""
    async def _seed():
        rows = [
            ("ext-1", "tenant-1", DocumentType.INVOICE, DuplicateStatus.UNIQUE, "fp-a", None),
            ("ext-2", "tenant-1", DocumentType.INVOICE, DuplicateStatus.DUPLICATE, "fp-a", "ext-1"),
            ("ext-3", "tenant-1", DocumentType.INVOICE, DuplicateStatus.POSSIBLE_DUPLICATE, "fp-b", "ext-1"),
            ("ext-4", "tenant-1", DocumentType.RECEIPT, DuplicateStatus.DUPLICATE, None, "ext-1"),
            ("ext-x", "tenant-2", DocumentType.INVOICE, DuplicateStatus.DUPLICATE, "fp-a", "ext-y"),
        ]
        for minute, (extraction_id, tenant_id, document_type, status, fingerprint, candidate) in enumerate(rows):
            await add_extraction(extraction_id, ACME_LTD, tenant_id=tenant_id, minute=minute, document_type=document_type)
            await engine.extraction_repository.update_extraction_duplicate_fields(extraction_id, {
                "invoice_fingerprint": fingerprint,
                "duplicate_status": status,
                "duplicate_candidate_id": candidate,
                "duplicate_confidence": 0.0 if status == DuplicateStatus.UNIQUE else 0.9,
            })
    return _seed


class TestListDuplicates:
    """Paged listing tests."""

    @pytest.mark.asyncio
    async def test_lists_flagged_newest_first(self, engine, seed):
        await seed()

        listing = await engine.reporting_service.list_duplicates("tenant-1")

        assert [item.id for item in listing.duplicates] == ["ext-4", "ext-3", "ext-2"]
        assert listing.total == 3
        assert listing.has_more is False

    @pytest.mark.asyncio
    async def test_pagination(self, engine, seed):
        await seed()

        first_page = await engine.reporting_service.list_duplicates("tenant-1", limit=2)
        second_page = await engine.reporting_service.list_duplicates("tenant-1", limit=2, offset=2)

        assert [item.id for item in first_page.duplicates] == ["ext-4", "ext-3"]
        assert first_page.has_more is True
        assert [item.id for item in second_page.duplicates] == ["ext-2"]
        assert second_page.has_more is False
        assert second_page.total == 3

    @pytest.mark.asyncio
    async def test_status_filter(self, engine, seed):
        await seed()

        listing = await engine.reporting_service.list_duplicates(
            "tenant-1", duplicate_status=DuplicateStatus.DUPLICATE
        )

        assert [item.id for item in listing.duplicates] == ["ext-4", "ext-2"]
        assert all(item.duplicate_status == DuplicateStatus.DUPLICATE for item in listing.duplicates)

    @pytest.mark.asyncio
    async def test_limit_is_clamped(self, engine, seed):
        await seed()

        smallest = await engine.reporting_service.list_duplicates("tenant-1", limit=0)
        largest = await engine.reporting_service.list_duplicates("tenant-1", limit=500)

        assert len(smallest.duplicates) == 1
        assert smallest.has_more is True
        assert len(largest.duplicates) == 3

    @pytest.mark.asyncio
    async def test_summary_carries_key_fields(self, engine, seed):
        await seed()

        listing = await engine.reporting_service.list_duplicates("tenant-1", offset=2)
        summary = listing.duplicates[0]

        assert summary.id == "ext-2"
        assert summary.file_id == "file-ext-2"
        assert summary.duplicate_candidate_id == "ext-1"
        assert summary.key_fields["vendorName"] == "Acme Ltd"
        assert summary.key_fields["invoiceNumber"] == "INV-001"
        assert summary.key_fields["invoiceDate"] == "2024-01-15"

    @pytest.mark.asyncio
    async def test_invalid_arguments_rejected(self, engine):
        with pytest.raises(InvalidInputError):
            await engine.reporting_service.list_duplicates("tenant-1", offset=-1)
        with pytest.raises(InvalidInputError):
            await engine.reporting_service.list_duplicates("tenant-1", duplicate_status=DuplicateStatus.UNIQUE)
        with pytest.raises(InvalidInputError):
            await engine.reporting_service.list_duplicates("")


class TestDuplicateStats:
    """Per-tenant statistics tests."""

    @pytest.mark.asyncio
    async def test_stats(self, engine, seed):
        await seed()
        await engine.file_service.calculate_and_store_file_hash("file-ext-1", b"scan-1")

        stats = await engine.reporting_service.get_duplicate_stats("tenant-1")

        assert stats.total_files == 4
        assert stats.files_with_hash == 1
        assert stats.total_extractions == 4
        assert stats.exact_duplicates == 2
        assert stats.possible_duplicates == 1
        assert stats.unique_invoices == 2
        assert stats.duplicates_by_document_type == {"invoice": 2, "receipt": 1}

    @pytest.mark.asyncio
    async def test_empty_tenant(self, engine):
        stats = await engine.reporting_service.get_duplicate_stats("tenant-empty")

        assert stats.total_files == 0
        assert stats.total_extractions == 0
        assert stats.duplicates_by_document_type == {}
