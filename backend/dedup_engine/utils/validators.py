"""
Validation utilities - Pure validation functions.
"""
import re

from ..api.exceptions import InvalidInputError

_SHA256_HEX = re.compile(r"^[0-9a-f]{64}$")


def validate_identifier(value: str, name: str) -> None:
    """
    Validate an opaque id (tenant, file or extraction).

    Raises:
        InvalidInputError: If the id is missing or blank
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{name} cannot be empty")


def validate_content_hash(content_hash: str) -> None:
    """
    Validate a content hash produced by calculate_file_hash.

    Raises:
        InvalidInputError: If the hash is not a lowercase SHA-256 hex digest
    """
    if not isinstance(content_hash, str) or not _SHA256_HEX.match(content_hash):
        raise InvalidInputError(f"Invalid content hash: {content_hash!r}")


def validate_file_size(file_size: int) -> None:
    """
    Validate a file size in bytes.

    Raises:
        InvalidInputError: If the size is not a non-negative integer
    """
    if isinstance(file_size, bool) or not isinstance(file_size, int) or file_size < 0:
        raise InvalidInputError(f"Invalid file size: {file_size!r}")
