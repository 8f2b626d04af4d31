"""
Shared repository plumbing.
"""
from datetime import datetime
from typing import Awaitable, Optional, TypeVar

from ..api.exceptions import DeduplicationError, StorageError
from ..services.database.base import DatabaseInterface
from ..core.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def parse_timestamp(value) -> Optional[datetime]:
    """Stored timestamps are ISO strings."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


class BaseRepository:
    """
    Base for repositories over a DatabaseInterface adapter.
    Adapter failures surface as StorageError.
    """

    def __init__(self, db_service: DatabaseInterface):
        """
        Initialize repository with database service.

        Args:
            db_service: Database adapter (dependency injection)
        """
        self._db = db_service

    async def _run(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        except DeduplicationError:
            raise
        except Exception as e:
            logger.error(f"Storage operation '{operation}' failed: {e}")
            raise StorageError(f"Storage operation '{operation}' failed: {e}", original_error=e) from e
