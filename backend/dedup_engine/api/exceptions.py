"""
Custom exceptions for the deduplication engine.
Callers catch these instead of storage- or adapter-specific errors.
"""
from typing import Optional


class DeduplicationError(Exception):
    """Base exception for deduplication errors."""
    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error

class StorageError(DeduplicationError):
    """Raised when a storage lookup or write fails."""
    pass

class InvalidInputError(DeduplicationError):
    """Raised when input cannot be hashed, fingerprinted or checked."""
    pass

class NotFoundError(DeduplicationError):
    """Raised when a referenced file or extraction does not exist."""
    pass

class ConfigurationError(DeduplicationError):
    """Raised when thresholds or weights are invalid."""
    pass
