"""
JSON file-based adapter implementing DatabaseInterface.
Stores files and extractions in JSON files so data persists between restarts,
no database setup needed.
"""
import json
import asyncio
from pathlib import Path
from typing import Dict, Optional
from threading import Lock

from .memory_adapter import MemoryAdapter
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class JSONAdapter(MemoryAdapter):
    """
    JSON file-based database adapter.
    Queries run against the in-memory indexes; every write is flushed to disk.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """
        Initialize JSON adapter.

        Args:
            data_dir: Directory to store JSON files (defaults to backend/data/json_db)
        """
        super().__init__()
        if data_dir is None:
            # Default to backend/data/json_db
            base_dir = Path(__file__).resolve().parent.parent.parent.parent
            data_dir = base_dir / "data" / "json_db"

        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        # JSON file paths
        self.files_file = self.data_dir / "files.json"
        self.extractions_file = self.data_dir / "extractions.json"

        # Lock for thread-safe file operations
        self._lock = Lock()

    async def initialize(self):
        """Initialize database - load data from JSON files."""
        await super().initialize()
        self._files = self._load_file(self.files_file)
        self._extractions = self._load_file(self.extractions_file)
        self._rebuild_indexes()

    async def close(self):
        """Close database - save data to JSON files."""
        await self._save_data()

    def _load_file(self, path: Path) -> Dict[str, Dict]:
        """Load one JSON collection. Unreadable files raise OSError or ValueError."""
        if not path.exists():
            return {}
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.debug(f"Loaded {len(data)} records from {path.name}")
        return data

    def _rebuild_indexes(self):
        """Rebuild indexes and insertion order from loaded data."""
        for file_id, file_data in self._files.items():
            self._register(file_id)
            self._index_file(file_data)
        for extraction_id, extraction in self._extractions.items():
            self._register(extraction_id)
            self._index_extraction(extraction)

    async def _save_data(self):
        """Save data from memory to JSON files."""
        files_snapshot = json.dumps(self._files, indent=2, ensure_ascii=False, default=str)
        extractions_snapshot = json.dumps(self._extractions, indent=2, ensure_ascii=False, default=str)

        def _save():
            with self._lock:
                self.files_file.write_text(files_snapshot, encoding='utf-8')
                self.extractions_file.write_text(extractions_snapshot, encoding='utf-8')

        # Run in executor to avoid blocking
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, _save)

    # Writes are persisted immediately
    async def create_file(self, file_data: Dict) -> Dict:
        result = await super().create_file(file_data)
        await self._save_data()
        return result

    async def update_file(self, file_id: str, updates: Dict) -> Optional[Dict]:
        result = await super().update_file(file_id, updates)
        if result is not None:
            await self._save_data()
        return result

    async def create_extraction(self, extraction_data: Dict) -> Dict:
        result = await super().create_extraction(extraction_data)
        await self._save_data()
        return result

    async def update_extraction(self, extraction_id: str, updates: Dict) -> Optional[Dict]:
        result = await super().update_extraction(extraction_id, updates)
        if result is not None:
            await self._save_data()
        return result
