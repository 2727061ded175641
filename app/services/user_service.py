"""
app/services/user_service.py

Purpose: User directory operations

- Validates input before any storage access
- Calls the configured store through the UserStore interface
- Replaces storage failure detail with a generic per-operation message
"""

from contextlib import contextmanager
from typing import List, Optional, Tuple

from app.core.exceptions import StorageError
from app.core.logging import get_logger
from app.db.base import UserStore
from app.models.user import UserFields, UserRecord
from app.schemas.user import UserPayload
from utils.constants import (
    ADD_USER_ERROR_MESSAGE,
    DELETE_USER_ERROR_MESSAGE,
    FETCH_USERS_ERROR_MESSAGE,
    UPDATE_USER_ERROR_MESSAGE,
    USER_ADDED_MESSAGE,
    USER_DELETED_MESSAGE,
    USER_UPDATED_MESSAGE,
)

logger = get_logger(__name__)


@contextmanager
def storage_failure(message: str):
    """
    Re-raises StorageError with a client-safe message, keeping the cause in details.
    """
    try:
        yield
    except StorageError as e:
        raise StorageError(message, details=e.details or e.message) from e


def validate_payload(payload: UserPayload) -> UserFields:
    """
    Validates a request body.

    Raises:
        ValidationError: If a field is missing or age is malformed
    """
    return UserFields.from_input(payload.name, payload.age, payload.city)


async def list_users(store: UserStore, search: Optional[str] = None) -> List[UserRecord]:
    """
    Returns all users, oldest first.

    Args:
        store: Open user store
        search: Optional name/city filter
    """
    with storage_failure(FETCH_USERS_ERROR_MESSAGE):
        users = await store.list_users(search)

    logger.debug(f"Fetched {len(users)} users")
    return users


async def add_user(store: UserStore, payload: UserPayload) -> Tuple[str, UserRecord]:
    """
    Creates a user.

    Returns:
        (message, created record)
    """
    fields = validate_payload(payload)

    with storage_failure(ADD_USER_ERROR_MESSAGE):
        record = await store.create_user(fields.name, fields.age, fields.city)

    return USER_ADDED_MESSAGE, record


async def update_user(store: UserStore, user_id: str, payload: UserPayload) -> Tuple[str, UserRecord]:
    """
    Replaces a user's name, age and city.

    Returns:
        (message, updated record)

    Raises:
        ValidationError: Before touching storage
        NotFoundError: If no user has this id
    """
    fields = validate_payload(payload)

    with storage_failure(UPDATE_USER_ERROR_MESSAGE):
        record = await store.update_user(user_id, fields.name, fields.age, fields.city)

    return USER_UPDATED_MESSAGE, record


async def delete_user(store: UserStore, user_id: str) -> Tuple[str, UserRecord]:
    """
    Deletes a user.

    Returns:
        (message, record as it was before deletion)

    Raises:
        NotFoundError: If no user has this id
    """
    with storage_failure(DELETE_USER_ERROR_MESSAGE):
        record = await store.delete_user(user_id)

    return USER_DELETED_MESSAGE, record
