"""
app/db/file_store.py

Purpose: Flat JSON file user store

- Whole collection kept as one JSON array on disk
- Every mutation rewrites the full file (temp file + os.replace)
- One writer at a time: read-modify-write cycles run under a lock
- Calls return only after the write has completed
"""

import asyncio
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from bson import ObjectId

from app.core.logging import get_logger
from app.db.base import UserStore
from app.models.user import UserFields, UserRecord
from utils.constants import CREATED_AT_FIELD, UPDATED_AT_FIELD
from utils.time_utils import utc_now, to_iso, from_iso
from utils.validation_utils import matches_search

logger = get_logger(__name__)

T = TypeVar("T")


def entry_to_record(entry: Dict[str, Any]) -> UserRecord:
    """
    Converts a file entry into a UserRecord.
    """
    return UserRecord(
        id=str(entry["id"]),
        name=entry["name"],
        age=entry["age"],
        city=entry["city"],
        created_at=from_iso(entry.get(CREATED_AT_FIELD)),
        updated_at=from_iso(entry.get(UPDATED_AT_FIELD)),
    )


def record_to_entry(record: UserRecord) -> Dict[str, Any]:
    """
    Converts a UserRecord into its file entry.
    """
    return {
        "id": record.id,
        "name": record.name,
        "age": record.age,
        "city": record.city,
        CREATED_AT_FIELD: to_iso(record.created_at),
        UPDATED_AT_FIELD: to_iso(record.updated_at),
    }


class JsonFileUserStore(UserStore):
    """
    User store on a single JSON file.

    Records are kept in creation order, so the file order is the list order.
    """

    backend_name = "file"

    def __init__(self, path, timeout: float = 10.0):
        super().__init__(timeout=timeout)
        self.path = Path(path)
        self._lock = asyncio.Lock()
        # Held by the worker thread for the whole cycle, so a cycle whose
        # caller timed out still finishes before the next one starts
        self._file_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Disk I/O (runs in a worker thread)
    # ------------------------------------------------------------------

    def _read(self) -> List[UserRecord]:
        if not self.path.exists():
            return []

        with self.path.open("r", encoding="utf-8") as f:
            content = f.read()

        if not content.strip():
            return []

        data = json.loads(content)
        if not isinstance(data, list):
            raise ValueError(f"{self.path} does not hold a JSON array")

        try:
            return [entry_to_record(entry) for entry in data]
        except (KeyError, TypeError) as e:
            raise ValueError(f"{self.path} holds a malformed entry: {e!r}") from e

    def _write(self, records: List[UserRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump([record_to_entry(r) for r in records], f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def _cycle(self, mutate: Callable[[List[UserRecord]], Tuple[bool, T]]) -> T:
        """
        Read the collection, apply `mutate`, and write it back if it changed.

        `mutate` edits the list in place and returns (changed, result).
        """
        with self._file_lock:
            records = self._read()
            changed, result = mutate(records)
            if changed:
                self._write(records)
            return result

    async def _locked(self, mutate: Callable[[List[UserRecord]], Tuple[bool, T]]) -> T:
        async with self._lock:
            return await asyncio.to_thread(self._cycle, mutate)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self):
        """
        Creates the data file if it does not exist and checks it parses.
        """
        def prepare():
            with self._file_lock:
                if not self.path.exists():
                    logger.info(f"Creating data file {self.path}")
                    self._write([])
                return len(self._read())

        count = await asyncio.to_thread(prepare)
        logger.info(f"✅ File store ready: {self.path} ({count} users)")

    async def close(self):
        logger.info("File store closed")

    async def check_health(self) -> bool:
        try:
            await asyncio.wait_for(asyncio.to_thread(self._read), timeout=self.timeout)
            return True
        except Exception as e:
            logger.error(f"File store health check failed: {str(e)}")
            return False

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    async def _list(self, search: Optional[str]) -> List[UserRecord]:
        def select(records):
            return False, [r for r in records if matches_search(r.name, r.city, search)]

        return await self._locked(select)

    async def _create(self, fields: UserFields) -> UserRecord:
        def insert(records):
            now = utc_now()
            record = UserRecord(
                id=str(ObjectId()),
                created_at=now,
                updated_at=now,
                **fields.model_dump(),
            )
            records.append(record)
            return True, record

        return await self._locked(insert)

    async def _update(self, user_id: str, fields: UserFields) -> Optional[UserRecord]:
        def replace(records):
            for index, existing in enumerate(records):
                if existing.id == user_id:
                    updated = existing.model_copy(
                        update={**fields.model_dump(), "updated_at": utc_now()}
                    )
                    records[index] = updated
                    return True, updated
            return False, None

        return await self._locked(replace)

    async def _delete(self, user_id: str) -> Optional[UserRecord]:
        def remove(records):
            for index, existing in enumerate(records):
                if existing.id == user_id:
                    return True, records.pop(index)
            return False, None

        return await self._locked(remove)
