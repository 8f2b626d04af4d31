"""
Service wiring.

Builds the deduplication services over one database adapter. Nothing is
cached at module level; callers own the returned objects.
"""
from dataclasses import dataclass
from typing import Optional

from .core.config import DEDUP_CANDIDATE_LIMIT, DEFAULT_CURRENCY
from .core.logging_config import get_logger
from .repositories import ExtractionRepository, FileRepository
from .services.database import DatabaseFactory, DatabaseInterface
from .services.deduplication import (
    DeduplicationService,
    DuplicateReportingService,
    FileDeduplicationService,
    InvoiceDeduplicationService,
)
from .utils.scoring import DeduplicationThresholds

logger = get_logger(__name__)


@dataclass
class DeduplicationEngine:
    """The wired services sharing one database adapter."""
    db: DatabaseInterface
    file_repository: FileRepository
    extraction_repository: ExtractionRepository
    file_service: FileDeduplicationService
    invoice_service: InvoiceDeduplicationService
    deduplication_service: DeduplicationService
    reporting_service: DuplicateReportingService

    async def close(self):
        await self.db.close()


def build_engine(
    db: DatabaseInterface,
    thresholds: Optional[DeduplicationThresholds] = None,
    candidate_limit: int = DEDUP_CANDIDATE_LIMIT,
    default_currency: str = DEFAULT_CURRENCY
) -> DeduplicationEngine:
    """Wire repositories and services over an initialized adapter."""
    file_repository = FileRepository(db)
    extraction_repository = ExtractionRepository(db)
    file_service = FileDeduplicationService(file_repository)
    invoice_service = InvoiceDeduplicationService(
        extraction_repository,
        thresholds=thresholds,
        candidate_limit=candidate_limit,
        default_currency=default_currency
    )
    return DeduplicationEngine(
        db=db,
        file_repository=file_repository,
        extraction_repository=extraction_repository,
        file_service=file_service,
        invoice_service=invoice_service,
        deduplication_service=DeduplicationService(file_service, invoice_service),
        reporting_service=DuplicateReportingService(file_repository, extraction_repository)
    )


async def create_engine(database_type: Optional[str] = None, **kwargs) -> DeduplicationEngine:
    """
    Create and initialize an adapter, then wire the services over it.

    Args:
        database_type: 'memory' or 'json' (defaults to DATABASE_TYPE)
        **kwargs: Adapter arguments (e.g. data_dir) and build_engine options
    """
    engine_options = {
        key: kwargs.pop(key)
        for key in ("thresholds", "candidate_limit", "default_currency")
        if key in kwargs
    }
    db = await DatabaseFactory.create_and_initialize(database_type, **kwargs)
    logger.info("Deduplication engine initialized")
    return build_engine(db, **engine_options)
