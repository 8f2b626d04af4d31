"""
Document deduplication engine.

Decides whether an uploaded file or an extracted invoice duplicates
something a tenant already has.
"""
from .dependencies import DeduplicationEngine, build_engine, create_engine

__version__ = "0.1.0"

__all__ = [
    "DeduplicationEngine",
    "build_engine",
    "create_engine",
]
