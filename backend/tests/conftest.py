"""Pytest configuration and shared fixtures."""

from datetime import timedelta

import pytest

from dedup_engine.dependencies import build_engine
from dedup_engine.domain.entities import ExtractedField, ExtractionRecord, FileRecord
from dedup_engine.domain.value_objects import DocumentType
from dedup_engine.services.database import MemoryAdapter

from factories import BASE_TIME


@pytest.fixture
def db() -> MemoryAdapter:
    """Fresh in-memory adapter.

    Returns:
        MemoryAdapter: Empty adapter
    """
    return MemoryAdapter()


@pytest.fixture
def engine(db):
    """Services wired over the in-memory adapter."""
    return build_engine(db)


@pytest.fixture
def add_file(engine):
    """Create a file record; ``minute`` orders creation times."""
    async def _add(file_id, tenant_id="tenant-1", minute=0, file_name=None):
        return await engine.file_repository.create(
            FileRecord(
                id=file_id,
                tenant_id=tenant_id,
                file_name=file_name or f"{file_id}.pdf",
                created_at=BASE_TIME + timedelta(minutes=minute),
            )
        )
    return _add


@pytest.fixture
def add_extraction(engine, add_file):
    """Create a file and an extraction for it; ``minute`` orders creation times."""
    async def _add(
        extraction_id,
        fields,
        tenant_id="tenant-1",
        minute=0,
        document_type=DocumentType.INVOICE,
        fingerprint=None,
    ):
        file_id = f"file-{extraction_id}"
        await add_file(file_id, tenant_id=tenant_id, minute=minute)
        return await engine.extraction_repository.create(
            ExtractionRecord(
                id=extraction_id,
                file_id=file_id,
                extracted_fields={
                    name: ExtractedField(value=entry["value"], confidence=entry["confidence"])
                    for name, entry in fields.items()
                },
                document_type=document_type,
                invoice_fingerprint=fingerprint,
                created_at=BASE_TIME + timedelta(minutes=minute),
            )
        )
    return _add
