"""
Utility functions - Pure functions with no storage dependencies.
These can be used across all layers.
"""
from .fields import extract_invoice_data, field
from .hash_utils import calculate_file_hash, generate_invoice_fingerprint, generate_sha256
from .scoring import (
    DeduplicationThresholds,
    amount_match,
    calculate_similarity_scores,
    date_proximity,
    invoice_number_match,
    overall_score,
    vendor_similarity,
)
from .validators import validate_content_hash, validate_file_size, validate_identifier

__all__ = [
    "extract_invoice_data",
    "field",
    "calculate_file_hash",
    "generate_invoice_fingerprint",
    "generate_sha256",
    "DeduplicationThresholds",
    "amount_match",
    "calculate_similarity_scores",
    "date_proximity",
    "invoice_number_match",
    "overall_score",
    "vendor_similarity",
    "validate_content_hash",
    "validate_file_size",
    "validate_identifier",
]
