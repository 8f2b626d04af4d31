"""
Repository layer - Abstracts data access.
Follows Repository Pattern for clean separation of data access from business logic.
"""
from .interfaces import IExtractionRepository, IFileRepository
from .file_repository import FileRepository
from .extraction_repository import ExtractionRepository

__all__ = [
    "IExtractionRepository",
    "IFileRepository",
    "ExtractionRepository",
    "FileRepository"
]
