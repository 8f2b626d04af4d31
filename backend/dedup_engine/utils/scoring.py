"""
Scoring utilities - Pure similarity functions for fuzzy invoice matching.

Every function is deterministic and returns a float in [0, 1].
"""
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from rapidfuzz.distance import Levenshtein

from ..api.dto import SimilarityScores
from ..api.exceptions import ConfigurationError
from ..core.config import (
    DEDUP_AMOUNT_RELATIVE_TOLERANCE,
    DEDUP_AMOUNT_TOLERANCE,
    DEDUP_CERTAIN_THRESHOLD,
    DEDUP_DATE_WINDOW_DAYS,
    DEDUP_LIKELY_THRESHOLD,
    DEDUP_POSSIBLE_THRESHOLD,
    DEDUP_UNLIKELY_THRESHOLD,
)
from ..domain.entities import InvoiceData
from ..domain.value_objects import DuplicateType
from .normalization import (
    normalize_invoice_number,
    normalize_vendor_name,
    parse_amount,
    parse_date,
)

# Trailing/standalone company-form tokens ignored when comparing vendor names
LEGAL_SUFFIXES = frozenset({
    "ltd", "limited", "inc", "incorporated", "llc", "llp", "lp", "plc",
    "gmbh", "ag", "kg", "sa", "sas", "sarl", "srl", "spa", "bv", "nv",
    "ab", "as", "oy", "pty", "pte", "corp", "corporation", "co", "company",
    "group", "holdings",
})

CONTAINMENT_FLOOR = 0.85
ACRONYM_FLOOR = 0.75

AMOUNT_TOLERANCE = Decimal(DEDUP_AMOUNT_TOLERANCE)
AMOUNT_RELATIVE_TOLERANCE = Decimal(DEDUP_AMOUNT_RELATIVE_TOLERANCE)
DATE_WINDOW_DAYS = DEDUP_DATE_WINDOW_DAYS

# Fixed weights, identical for every comparison
VENDOR_WEIGHT = 0.35
INVOICE_NUMBER_WEIGHT = 0.30
DATE_WEIGHT = 0.15
AMOUNT_WEIGHT = 0.20

if not math.isclose(VENDOR_WEIGHT + INVOICE_NUMBER_WEIGHT + DATE_WEIGHT + AMOUNT_WEIGHT, 1.0):
    raise ConfigurationError("Scoring weights must sum to 1.0")


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def clean_vendor_name(name: Any) -> Optional[str]:
    """
    Normalized vendor name with legal-form tokens removed.

    A name made only of legal-form tokens is returned unchanged.
    """
    normalized = normalize_vendor_name(name)
    if normalized is None:
        return None
    words = [word for word in normalized.split(" ") if word not in LEGAL_SUFFIXES]
    return " ".join(words) if words else normalized


def vendor_acronym(cleaned_name: str) -> str:
    """First letters of each word; a single word is its own acronym."""
    words = cleaned_name.split(" ")
    if len(words) == 1:
        return words[0]
    return "".join(word[0] for word in words if word)


def vendor_similarity(name1: Any, name2: Any) -> float:
    """
    Similarity of two vendor names.

    Plain normalized Levenshtein similarity, raised to 0.85 when one cleaned
    name contains the other and to 0.75 when both share an acronym.
    """
    normalized1 = normalize_vendor_name(name1)
    normalized2 = normalize_vendor_name(name2)
    if not normalized1 or not normalized2:
        return 0.0
    if normalized1 == normalized2:
        return 1.0

    similarity = Levenshtein.normalized_similarity(normalized1, normalized2)

    cleaned1 = clean_vendor_name(normalized1)
    cleaned2 = clean_vendor_name(normalized2)
    # Containment is whole-word: "acme" is inside "acme trading", "a" is not inside "amazon"
    padded1 = f" {cleaned1} "
    padded2 = f" {cleaned2} "
    if padded1 in padded2 or padded2 in padded1:
        similarity = max(similarity, CONTAINMENT_FLOOR)
    else:
        acronym1 = vendor_acronym(cleaned1)
        if len(acronym1) >= 2 and acronym1 == vendor_acronym(cleaned2):
            similarity = max(similarity, ACRONYM_FLOOR)

    return _clamp(similarity)


def invoice_number_match(number1: Any, number2: Any) -> float:
    """1.0 when invoice numbers match ignoring case and whitespace, else 0."""
    normalized1 = normalize_invoice_number(number1)
    normalized2 = normalize_invoice_number(number2)
    if not normalized1 or not normalized2:
        return 0.0
    return 1.0 if normalized1 == normalized2 else 0.0


def date_proximity(date1: Any, date2: Any, window_days: int = DATE_WINDOW_DAYS) -> float:
    """Linear decay from 1.0 on the same day to 0 at the window edge."""
    parsed1 = parse_date(date1)
    parsed2 = parse_date(date2)
    if parsed1 is None or parsed2 is None:
        return 0.0
    diff_days = abs((parsed1 - parsed2).days)
    if diff_days == 0:
        return 1.0
    if window_days <= 0 or diff_days >= window_days:
        return 0.0
    return _clamp(1.0 - diff_days / window_days)


def amount_match(
    amount1: Any,
    amount2: Any,
    tolerance: Decimal = AMOUNT_TOLERANCE,
    relative_tolerance: Decimal = AMOUNT_RELATIVE_TOLERANCE,
) -> float:
    """
    1.0 within the absolute tolerance, then linear decay over the relative
    difference, reaching 0 at the relative tolerance.
    """
    parsed1 = parse_amount(amount1)
    parsed2 = parse_amount(amount2)
    if parsed1 is None or parsed2 is None:
        return 0.0

    diff = abs(parsed1 - parsed2)
    if diff <= tolerance:
        return 1.0

    largest = max(abs(parsed1), abs(parsed2))
    if relative_tolerance <= 0:
        return 0.0
    relative_diff = diff / largest
    if relative_diff >= relative_tolerance:
        return 0.0
    return _clamp(float(1 - relative_diff / relative_tolerance))


def overall_score(scores: SimilarityScores) -> float:
    """Fixed weighted sum of the four component scores."""
    weighted = (
        scores.vendor_match * VENDOR_WEIGHT
        + scores.invoice_number_match * INVOICE_NUMBER_WEIGHT
        + scores.date_proximity * DATE_WEIGHT
        + scores.amount_match * AMOUNT_WEIGHT
    )
    return _clamp(round(weighted, 10))


def calculate_similarity_scores(invoice: InvoiceData, candidate: InvoiceData) -> SimilarityScores:
    """Score a candidate invoice against the invoice being checked."""
    scores = SimilarityScores(
        vendor_match=vendor_similarity(invoice.vendor_name, candidate.vendor_name),
        invoice_number_match=invoice_number_match(invoice.invoice_number, candidate.invoice_number),
        date_proximity=date_proximity(invoice.invoice_date, candidate.invoice_date),
        amount_match=amount_match(invoice.total_amount, candidate.total_amount),
    )
    scores.overall_score = overall_score(scores)
    return scores


@dataclass(frozen=True)
class DeduplicationThresholds:
    """
    Score thresholds for classifying a fuzzy match.

    Must satisfy 0 <= unlikely < possible < likely < certain <= 1.
    """
    certain: float = DEDUP_CERTAIN_THRESHOLD
    likely: float = DEDUP_LIKELY_THRESHOLD
    possible: float = DEDUP_POSSIBLE_THRESHOLD
    unlikely: float = DEDUP_UNLIKELY_THRESHOLD

    def __post_init__(self):
        if not 0.0 <= self.unlikely < self.possible < self.likely < self.certain <= 1.0:
            raise ConfigurationError(
                "Thresholds must be ordered 0 <= unlikely < possible < likely < certain <= 1, got "
                f"unlikely={self.unlikely}, possible={self.possible}, "
                f"likely={self.likely}, certain={self.certain}"
            )

    def classify(self, score: float) -> DuplicateType:
        """Classify an overall score."""
        if score >= self.certain:
            return DuplicateType.EXACT
        if score >= self.likely:
            return DuplicateType.LIKELY
        if score >= self.possible:
            return DuplicateType.POSSIBLE
        return DuplicateType.UNIQUE
