"""
Invoice Deduplication Service - Stage 2, fingerprint and fuzzy matching.

Exact fingerprint matches short-circuit; otherwise a bounded set of candidate
extractions is scored and the best one is classified against thresholds.
Lookup errors propagate to the caller.
"""
from datetime import datetime, timezone
from typing import List, Mapping, Optional, Tuple

from ...api.dto import InvoiceDeduplicationResult, SimilarityScores
from ...api.exceptions import NotFoundError
from ...core.config import DEDUP_CANDIDATE_LIMIT, DEFAULT_CURRENCY
from ...core.logging_config import get_logger
from ...domain.entities import ExtractionRecord, InvoiceData
from ...domain.value_objects import DuplicateStatus, DuplicateType, InvoiceFingerprint, TenantId
from ...repositories.interfaces import IExtractionRepository
from ...utils.fields import extract_invoice_data
from ...utils.hash_utils import generate_invoice_fingerprint
from ...utils.scoring import DeduplicationThresholds, calculate_similarity_scores, clean_vendor_name
from ...utils.validators import validate_identifier

logger = get_logger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _utc(value: Optional[datetime]) -> datetime:
    """Comparable UTC timestamp; naive values are taken as UTC."""
    if value is None:
        return _EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class InvoiceDeduplicationService:
    """
    Detects repeated submissions of the same logical invoice within a tenant.
    """

    def __init__(
        self,
        extraction_repo: IExtractionRepository,
        thresholds: Optional[DeduplicationThresholds] = None,
        candidate_limit: int = DEDUP_CANDIDATE_LIMIT,
        default_currency: str = DEFAULT_CURRENCY
    ):
        """
        Initialize invoice deduplication service.

        Args:
            extraction_repo: Extraction repository (dependency injection)
            thresholds: Classification thresholds (defaults from configuration)
            candidate_limit: Maximum number of fuzzy candidates scored per check
            default_currency: Currency assumed when none was extracted
        """
        if candidate_limit < 1:
            raise ValueError("candidate_limit must be at least 1")
        self._repo = extraction_repo
        self.thresholds = thresholds or DeduplicationThresholds()
        self.candidate_limit = candidate_limit
        self.default_currency = default_currency

    def extract_invoice_data(self, extracted_fields: Optional[Mapping]) -> InvoiceData:
        return extract_invoice_data(extracted_fields, self.default_currency)

    def _fingerprint(self, invoice: InvoiceData) -> InvoiceFingerprint:
        return generate_invoice_fingerprint(
            invoice.vendor_name,
            invoice.invoice_number,
            invoice.invoice_date,
            invoice.total_amount,
            invoice.currency,
            default_currency=self.default_currency
        )

    async def check_invoice_duplicate(
        self,
        extraction_id: str,
        extracted_fields: Mapping,
        tenant_id: TenantId
    ) -> InvoiceDeduplicationResult:
        """
        Check an extraction against the tenant's earlier extractions.

        Args:
            extraction_id: The extraction being checked (excluded from lookups)
            extracted_fields: Field bag of the extraction
            tenant_id: Tenant scope

        Returns:
            Exact, likely, possible or unique result with the fingerprint

        Raises:
            InvalidInputError: If the fields carry nothing to fingerprint
            StorageError: If a lookup fails
        """
        validate_identifier(extraction_id, "extraction_id")
        validate_identifier(tenant_id, "tenant_id")

        invoice = self.extract_invoice_data(extracted_fields)
        fingerprint = self._fingerprint(invoice)

        logger.info(
            f"Checking invoice duplicates for extraction {extraction_id} "
            f"(fingerprint {fingerprint[:12]}, vendor={invoice.vendor_name!r}, number={invoice.invoice_number!r})"
        )

        try:
            exact_matches = await self._repo.find_extractions_by_fingerprint(
                tenant_id, fingerprint, exclude_id=extraction_id
            )
        except Exception as e:
            logger.error(f"Error looking up fingerprint matches for extraction {extraction_id}: {e}")
            raise

        if exact_matches:
            match = exact_matches[0]
            logger.info(f"Exact invoice duplicate found: {match.id} (fingerprint {fingerprint[:12]})")
            return InvoiceDeduplicationResult(
                is_duplicate=True,
                duplicate_extraction_id=match.id,
                fingerprint=fingerprint,
                confidence=1.0,
                type=DuplicateType.EXACT
            )

        if not invoice.has_anchor():
            logger.info(f"No vendor name or invoice number on extraction {extraction_id}, skipping fuzzy match")
            return self._unique(fingerprint)

        try:
            candidates = await self._repo.find_candidate_extractions(
                tenant_id,
                vendor_name_like=clean_vendor_name(invoice.vendor_name),
                invoice_number_exact=invoice.invoice_number,
                exclude_id=extraction_id,
                limit=self.candidate_limit
            )
        except Exception as e:
            logger.error(f"Error searching fuzzy candidates for extraction {extraction_id}: {e}")
            raise

        best = self._best_match(invoice, candidates)
        if best is None:
            return self._unique(fingerprint)

        candidate, scores = best
        duplicate_type = self.thresholds.classify(scores.overall_score)
        is_duplicate = duplicate_type != DuplicateType.UNIQUE

        logger.info(
            f"Best fuzzy candidate for extraction {extraction_id}: {candidate.id} "
            f"(score {scores.overall_score:.3f}, type {duplicate_type.value})"
        )

        return InvoiceDeduplicationResult(
            is_duplicate=is_duplicate,
            duplicate_extraction_id=candidate.id if is_duplicate else None,
            fingerprint=fingerprint,
            confidence=scores.overall_score,
            type=duplicate_type,
            scores=scores
        )

    def _best_match(
        self,
        invoice: InvoiceData,
        candidates: List[ExtractionRecord]
    ) -> Optional[Tuple[ExtractionRecord, SimilarityScores]]:
        """Highest overall score wins; ties go to the most recently created candidate."""
        best = None
        best_key = None
        for candidate in candidates[:self.candidate_limit]:
            scores = calculate_similarity_scores(invoice, self.extract_invoice_data(candidate.extracted_fields))
            key = (scores.overall_score, _utc(candidate.created_at))
            if best_key is None or key > best_key:
                best = (candidate, scores)
                best_key = key
        return best

    def _unique(self, fingerprint: InvoiceFingerprint) -> InvoiceDeduplicationResult:
        return InvoiceDeduplicationResult(
            is_duplicate=False,
            fingerprint=fingerprint,
            confidence=0.0,
            type=DuplicateType.UNIQUE
        )

    async def update_duplicate_status(self, extraction_id: str, result: InvoiceDeduplicationResult) -> ExtractionRecord:
        """
        Persist a check result on the extraction, overwriting earlier values.

        Raises:
            NotFoundError: If the extraction does not exist
        """
        status = result.type.to_status()
        fields = {
            "invoice_fingerprint": result.fingerprint,
            "duplicate_confidence": result.confidence,
            "duplicate_candidate_id": result.duplicate_extraction_id if status != DuplicateStatus.UNIQUE else None,
            "duplicate_status": status,
        }

        try:
            extraction = await self._repo.update_extraction_duplicate_fields(extraction_id, fields)
        except Exception as e:
            logger.error(f"Error updating duplicate status for extraction {extraction_id}: {e}")
            raise

        logger.info(
            f"Updated extraction {extraction_id} duplicate status: {status.value} "
            f"(confidence {result.confidence:.3f})"
        )
        return extraction

    async def get_duplicate_chain(self, extraction_id: str) -> List[ExtractionRecord]:
        """
        All extractions of the same tenant sharing this extraction's fingerprint,
        oldest first. Empty when the extraction has no fingerprint yet.

        Raises:
            NotFoundError: If the extraction does not exist
        """
        extraction = await self._repo.get_extraction(extraction_id)
        if extraction is None:
            raise NotFoundError(f"Extraction {extraction_id} not found")
        if not extraction.invoice_fingerprint:
            return []

        return await self._repo.find_extractions_by_fingerprint_ordered(
            extraction.invoice_fingerprint, tenant_id=extraction.tenant_id
        )
