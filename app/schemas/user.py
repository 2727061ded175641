"""
app/schemas/user.py

Purpose: User request/response schemas

- Request body accepts loosely typed input; validation_utils decides
  what is acceptable so every rejection comes back as a 400 with a message
- Responses always carry the id as a string
"""

from pydantic import BaseModel, Field, field_serializer
from typing import Any, Optional
from datetime import datetime

from app.models.user import UserRecord
from utils.time_utils import to_utc_iso


class UserPayload(BaseModel):
    """
    Body of POST /users and PUT /users/{id}.
    """
    name: Optional[Any] = None
    age: Optional[Any] = None
    city: Optional[Any] = None

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Ann",
                "age": 30,
                "city": "Lyon"
            }
        }


class UserOut(BaseModel):
    """
    A user as returned to the frontend.
    """
    id: str
    name: str
    age: int
    city: str
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, serialization_alias="updatedAt")

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        return to_utc_iso(value)

    @classmethod
    def from_record(cls, record: UserRecord) -> "UserOut":
        return cls(
            id=str(record.id),
            name=record.name,
            age=record.age,
            city=record.city,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class UserMutationResponse(BaseModel):
    """
    Body of successful create, update and delete responses.
    """
    message: str
    user: UserOut
