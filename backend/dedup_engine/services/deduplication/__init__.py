"""
Deduplication services: stage 1 (files), stage 2 (invoices), the
orchestrator and read-only reporting.
"""
from .file_deduplication_service import FileDeduplicationService
from .invoice_deduplication_service import InvoiceDeduplicationService
from .deduplication_service import DeduplicationService
from .reporting_service import DuplicateReportingService

__all__ = [
    "FileDeduplicationService",
    "InvoiceDeduplicationService",
    "DeduplicationService",
    "DuplicateReportingService"
]
