"""
app/db/base.py

Purpose: Storage interface for user records

- One abstract store, one implementation per backend (MongoDB, JSON file)
- Validates fields before any storage access
- Bounds every storage call with a timeout
- Maps backend failures (driver errors, I/O errors, encoding overflow, timeouts) to StorageError
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Awaitable, List, Optional, TypeVar

from pymongo.errors import PyMongoError

from app.core.exceptions import NotFoundError, StorageError, UserDirectoryError
from app.core.logging import get_logger
from app.models.user import UserFields, UserRecord
from utils.validation_utils import normalize_search_term

logger = get_logger(__name__)

T = TypeVar("T")


class UserStore(ABC):
    """
    Persistence contract shared by every backend.

    Public methods validate input and translate failures; subclasses only
    implement the underscored primitives against their storage.
    """

    backend_name = "abstract"

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @abstractmethod
    async def connect(self) -> None:
        """Opens the backend. Called once during application startup."""

    @abstractmethod
    async def close(self) -> None:
        """Releases the backend. Called during application shutdown."""

    @abstractmethod
    async def check_health(self) -> bool:
        """Returns True if the backend is reachable. Never raises."""

    # ------------------------------------------------------------------
    # Backend primitives
    # ------------------------------------------------------------------

    @abstractmethod
    async def _list(self, search: Optional[str]) -> List[UserRecord]:
        ...

    @abstractmethod
    async def _create(self, fields: UserFields) -> UserRecord:
        ...

    @abstractmethod
    async def _update(self, user_id: str, fields: UserFields) -> Optional[UserRecord]:
        ...

    @abstractmethod
    async def _delete(self, user_id: str) -> Optional[UserRecord]:
        ...

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def _run(self, operation: str, call: Awaitable[T]) -> T:
        """
        Awaits a backend primitive under the storage timeout.

        Raises:
            StorageError: On timeout or any backend failure
        """
        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except UserDirectoryError:
            raise
        except asyncio.TimeoutError as e:
            logger.error(f"{operation} timed out after {self.timeout}s", extra={"backend": self.backend_name})
            raise StorageError(f"{operation} timed out", details=f"timeout after {self.timeout}s") from e
        except (PyMongoError, OSError, ValueError, OverflowError) as e:
            logger.error(f"{operation} failed: {e}", extra={"backend": self.backend_name}, exc_info=True)
            raise StorageError(f"{operation} failed", details=str(e)) from e

    async def list_users(self, search: Optional[str] = None) -> List[UserRecord]:
        """
        Returns all records, oldest first.

        Args:
            search: Optional case-insensitive filter on name or city
        """
        return await self._run("list", self._list(normalize_search_term(search)))

    async def create_user(self, name, age, city) -> UserRecord:
        """
        Validates the fields, assigns a new id and persists the record.

        Raises:
            ValidationError: Before touching storage, if a field is malformed
            StorageError: If the write fails
        """
        fields = UserFields.from_input(name, age, city)
        record = await self._run("create", self._create(fields))
        logger.info("User created", extra={"record_id": record.id, "backend": self.backend_name})
        return record

    async def update_user(self, user_id: str, name, age, city) -> UserRecord:
        """
        Replaces name, age and city of an existing record.

        Raises:
            ValidationError: Before touching storage, if a field is malformed
            NotFoundError: If no record has this id
            StorageError: If the write fails
        """
        fields = UserFields.from_input(name, age, city)
        context = {"record_id": user_id, "backend": self.backend_name}
        record = await self._run("update", self._update(str(user_id), fields))
        if record is None:
            logger.info("Update target not found", extra=context)
            raise NotFoundError()
        logger.info("User updated", extra=context)
        return record

    async def delete_user(self, user_id: str) -> UserRecord:
        """
        Removes a record and returns its prior state.

        Raises:
            NotFoundError: If no record has this id
            StorageError: If the write fails
        """
        context = {"record_id": user_id, "backend": self.backend_name}
        record = await self._run("delete", self._delete(str(user_id)))
        if record is None:
            logger.info("Delete target not found", extra=context)
            raise NotFoundError()
        logger.info("User deleted", extra=context)
        return record
