"""
File Repository - Concrete implementation of file record access.
Maps between domain entities and database adapters.
"""
from typing import List, Optional

from .base import BaseRepository, parse_timestamp
from .interfaces import IFileRepository
from ..api.exceptions import NotFoundError
from ..domain.entities import FileRecord
from ..domain.value_objects import ContentHash, TenantId


class FileRepository(BaseRepository, IFileRepository):
    """
    Repository for file records.
    Only handles data access; duplicate decisions live in the services.
    """

    def _to_entity(self, data: dict) -> FileRecord:
        """Convert database record to domain entity."""
        return FileRecord(
            id=data["id"],
            tenant_id=data["tenant_id"],
            content_hash=data.get("content_hash"),
            file_size_bytes=data.get("file_size_bytes"),
            file_name=data.get("file_name"),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at"))
        )

    def _to_dict(self, file_record: FileRecord) -> dict:
        """Convert domain entity to database record."""
        return {
            "id": file_record.id,
            "tenant_id": str(file_record.tenant_id),
            "content_hash": str(file_record.content_hash) if file_record.content_hash else None,
            "file_size_bytes": file_record.file_size_bytes,
            "file_name": file_record.file_name,
            "created_at": file_record.created_at.isoformat() if file_record.created_at else None,
            "updated_at": file_record.updated_at.isoformat() if file_record.updated_at else None
        }

    async def create(self, file_record: FileRecord) -> FileRecord:
        """Create a new file record."""
        result = await self._run("create_file", self._db.create_file(self._to_dict(file_record)))
        return self._to_entity(result)

    async def get_by_id(self, file_id: str) -> Optional[FileRecord]:
        """Get file record by ID."""
        data = await self._run("get_file", self._db.get_file(file_id))
        return self._to_entity(data) if data else None

    async def find_files_by_tenant_hash_size(
        self,
        tenant_id: TenantId,
        content_hash: ContentHash,
        file_size: int,
        exclude_id: Optional[str] = None
    ) -> List[FileRecord]:
        """Files of a tenant with equal hash and size, oldest first."""
        data_list = await self._run(
            "find_files_by_hash",
            self._db.find_files_by_hash(str(tenant_id), str(content_hash), file_size, exclude_id)
        )
        return [self._to_entity(data) for data in data_list]

    async def update_file_hash_and_size(self, file_id: str, content_hash: ContentHash, file_size: int) -> FileRecord:
        """Persist hash and size on a file record."""
        result = await self._run(
            "update_file",
            self._db.update_file(file_id, {"content_hash": str(content_hash), "file_size_bytes": file_size})
        )
        if result is None:
            raise NotFoundError(f"File {file_id} not found")
        return self._to_entity(result)

    async def find_by_hash(self, tenant_id: TenantId, content_hash: ContentHash) -> Optional[FileRecord]:
        """Oldest file of a tenant with this hash, any size."""
        data_list = await self._run(
            "find_files_by_hash",
            self._db.find_files_by_hash(str(tenant_id), str(content_hash))
        )
        return self._to_entity(data_list[0]) if data_list else None

    async def list_by_tenant(self, tenant_id: TenantId) -> List[FileRecord]:
        """All files of a tenant."""
        data_list = await self._run("get_files_by_tenant", self._db.get_files_by_tenant(str(tenant_id)))
        return [self._to_entity(data) for data in data_list]
