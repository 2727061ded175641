"""
app/api/users.py

Purpose: User directory REST endpoints

- GET /users, POST /users, PUT /users/{id}, DELETE /users/{id}
- Maps store records to response payloads (id always a string)
- Failures surface as domain exceptions; app.core.errors turns them into status codes
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.core.logging import get_logger
from app.db.base import UserStore
from app.db.store import get_user_store
from app.schemas.response import ErrorResponse
from app.schemas.user import UserMutationResponse, UserOut, UserPayload
from app.services import user_service

logger = get_logger(__name__)
router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or malformed fields"},
    404: {"model": ErrorResponse, "description": "User not found"},
    500: {"model": ErrorResponse, "description": "Storage failure"},
}


@router.get("/users", response_model=List[UserOut], responses={500: ERROR_RESPONSES[500]})
async def list_users(
    search: Optional[str] = Query(None, description="Case-insensitive filter on name or city"),
    store: UserStore = Depends(get_user_store),
):
    """
    Lists all users, oldest first.
    """
    users = await user_service.list_users(store, search)
    return [UserOut.from_record(u) for u in users]


@router.post(
    "/users",
    status_code=201,
    response_model=UserMutationResponse,
    responses={400: ERROR_RESPONSES[400], 500: ERROR_RESPONSES[500]},
)
async def create_user(payload: UserPayload, store: UserStore = Depends(get_user_store)):
    """
    Creates a user from {name, age, city}.
    """
    message, record = await user_service.add_user(store, payload)
    logger.info(f"POST /users created {record.id}")
    return UserMutationResponse(message=message, user=UserOut.from_record(record))


@router.put("/users/{user_id}", response_model=UserMutationResponse, responses=ERROR_RESPONSES)
async def update_user(user_id: str, payload: UserPayload, store: UserStore = Depends(get_user_store)):
    """
    Replaces name, age and city of an existing user.
    """
    message, record = await user_service.update_user(store, user_id, payload)
    return UserMutationResponse(message=message, user=UserOut.from_record(record))


@router.delete(
    "/users/{user_id}",
    response_model=UserMutationResponse,
    responses={404: ERROR_RESPONSES[404], 500: ERROR_RESPONSES[500]},
)
async def delete_user(user_id: str, store: UserStore = Depends(get_user_store)):
    """
    Deletes a user and returns it as it was.
    """
    message, record = await user_service.delete_user(store, user_id)
    return UserMutationResponse(message=message, user=UserOut.from_record(record))
