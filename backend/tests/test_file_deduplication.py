"""Tests for stage-1 file deduplication."""

import pytest

from dedup_engine.api.exceptions import InvalidInputError, NotFoundError, StorageError
from dedup_engine.services.deduplication.file_deduplication_service import DUPLICATE_FILE_REASON
from dedup_engine.utils.hash_utils import calculate_file_hash

PDF_BYTES = b"%PDF-1.4\nAcme Ltd invoice INV-001\n%%EOF"


class TestFileDuplicateCheck:
    """Content hash matching tests."""

    @pytest.mark.asyncio
    async def test_identical_bytes_are_duplicates(self, engine, add_file):
        service = engine.file_service
        await add_file("file-1", minute=0)
        await add_file("file-2", minute=1)

        first_hash = await service.calculate_and_store_file_hash("file-1", PDF_BYTES)
        second_hash = await service.calculate_and_store_file_hash("file-2", PDF_BYTES)
        result = await service.check_file_duplicate(second_hash, len(PDF_BYTES), "tenant-1", exclude_file_id="file-2")

        assert first_hash == second_hash
        assert result.is_duplicate is True
        assert result.duplicate_file_id == "file-1"
        assert result.confidence == 1.0
        assert result.content_hash == second_hash

    @pytest.mark.asyncio
    async def test_earliest_file_is_referenced(self, engine, add_file):
        service = engine.file_service
        await add_file("file-late", minute=5)
        await add_file("file-early", minute=1)
        await service.calculate_and_store_file_hash("file-late", PDF_BYTES)
        await service.calculate_and_store_file_hash("file-early", PDF_BYTES)

        result = await service.check_file_duplicate(calculate_file_hash(PDF_BYTES), len(PDF_BYTES), "tenant-1")

        assert result.duplicate_file_id == "file-early"

    @pytest.mark.asyncio
    async def test_no_match_has_zero_confidence(self, engine, add_file):
        await add_file("file-1")
        await engine.file_service.calculate_and_store_file_hash("file-1", PDF_BYTES)

        other_hash = calculate_file_hash(b"different content")
        result = await engine.file_service.check_file_duplicate(other_hash, 17, "tenant-1")

        assert result.is_duplicate is False
        assert result.duplicate_file_id is None
        assert result.confidence == 0.0

    @pytest.mark.asyncio
    async def test_file_never_matches_itself(self, engine, add_file):
        await add_file("file-1")
        content_hash = await engine.file_service.calculate_and_store_file_hash("file-1", PDF_BYTES)

        result = await engine.file_service.check_file_duplicate(
            content_hash, len(PDF_BYTES), "tenant-1", exclude_file_id="file-1"
        )

        assert result.is_duplicate is False

    @pytest.mark.asyncio
    async def test_size_must_match(self, engine, add_file):
        await add_file("file-1")
        content_hash = await engine.file_service.calculate_and_store_file_hash("file-1", PDF_BYTES)

        result = await engine.file_service.check_file_duplicate(content_hash, len(PDF_BYTES) + 1, "tenant-1")

        assert result.is_duplicate is False

    @pytest.mark.asyncio
    async def test_other_tenant_is_invisible(self, engine, add_file):
        await add_file("file-1", tenant_id="tenant-2")
        content_hash = await engine.file_service.calculate_and_store_file_hash("file-1", PDF_BYTES)

        result = await engine.file_service.check_file_duplicate(content_hash, len(PDF_BYTES), "tenant-1")

        assert result.is_duplicate is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content_hash,file_size,tenant_id", [
        ("not-a-hash", 10, "tenant-1"),
        ("a" * 64, -1, "tenant-1"),
        ("a" * 64, 10, ""),
    ])
    async def test_invalid_arguments_rejected(self, engine, content_hash, file_size, tenant_id):
        with pytest.raises(InvalidInputError):
            await engine.file_service.check_file_duplicate(content_hash, file_size, tenant_id)


class TestCalculateAndStoreFileHash:
    """Hash persistence tests."""

    @pytest.mark.asyncio
    async def test_hash_and_size_are_stored(self, engine, add_file):
        await add_file("file-1")

        content_hash = await engine.file_service.calculate_and_store_file_hash("file-1", PDF_BYTES)
        stored = await engine.file_repository.get_by_id("file-1")

        assert stored.content_hash == content_hash
        assert stored.file_size_bytes == len(PDF_BYTES)
        assert stored.has_hash()

    @pytest.mark.asyncio
    async def test_storing_twice_is_idempotent(self, engine, add_file):
        await add_file("file-1")

        first = await engine.file_service.calculate_and_store_file_hash("file-1", PDF_BYTES)
        second = await engine.file_service.calculate_and_store_file_hash("file-1", PDF_BYTES)
        stored = await engine.file_repository.get_by_id("file-1")

        assert first == second == stored.content_hash

    @pytest.mark.asyncio
    async def test_missing_file_raises(self, engine):
        with pytest.raises(NotFoundError):
            await engine.file_service.calculate_and_store_file_hash("ghost", PDF_BYTES)

    @pytest.mark.asyncio
    async def test_empty_content_raises(self, engine, add_file):
        await add_file("file-1")
        with pytest.raises(InvalidInputError):
            await engine.file_service.calculate_and_store_file_hash("file-1", b"")


class TestShouldProcessFile:
    """Processing decision tests."""

    @pytest.mark.asyncio
    async def test_first_upload_is_processed(self, engine, add_file):
        await add_file("file-1")
        content_hash = await engine.file_service.calculate_and_store_file_hash("file-1", PDF_BYTES)

        decision = await engine.file_service.should_process_file("file-1", content_hash, len(PDF_BYTES), "tenant-1")

        assert decision.should_process is True
        assert decision.reason is None

    @pytest.mark.asyncio
    async def test_repeated_upload_is_skipped(self, engine, add_file):
        await add_file("file-1", minute=0)
        await add_file("file-2", minute=1)
        await engine.file_service.calculate_and_store_file_hash("file-1", PDF_BYTES)
        content_hash = await engine.file_service.calculate_and_store_file_hash("file-2", PDF_BYTES)

        decision = await engine.file_service.should_process_file("file-2", content_hash, len(PDF_BYTES), "tenant-1")

        assert decision.should_process is False
        assert decision.reason == DUPLICATE_FILE_REASON
        assert decision.duplicate_file_id == "file-1"


class TestGetFileByHash:
    """Hash lookup tests."""

    @pytest.mark.asyncio
    async def test_lookup(self, engine, add_file):
        await add_file("file-1")
        content_hash = await engine.file_service.calculate_and_store_file_hash("file-1", PDF_BYTES)

        found = await engine.file_service.get_file_by_hash(content_hash, "tenant-1")
        missing = await engine.file_service.get_file_by_hash(content_hash, "tenant-2")

        assert found.id == "file-1"
        assert missing is None


class TestStorageFailures:
    """Stage 1 raises instead of reporting an unchecked file as unique."""

    @pytest.mark.asyncio
    async def test_hash_lookup_failure_raises(self, engine, db, monkeypatch):
        async def lookup_down(*args, **kwargs):
            raise RuntimeError("connection reset")

        monkeypatch.setattr(db, "find_files_by_hash", lookup_down)

        with pytest.raises(StorageError) as exc_info:
            await engine.file_service.check_file_duplicate(calculate_file_hash(PDF_BYTES), len(PDF_BYTES), "tenant-1")

        assert isinstance(exc_info.value.original_error, RuntimeError)

    @pytest.mark.asyncio
    async def test_should_process_file_raises(self, engine, db, monkeypatch):
        async def lookup_down(*args, **kwargs):
            raise RuntimeError("connection reset")

        monkeypatch.setattr(db, "find_files_by_hash", lookup_down)

        with pytest.raises(StorageError):
            await engine.file_service.should_process_file(
                "file-1", calculate_file_hash(PDF_BYTES), len(PDF_BYTES), "tenant-1"
            )
