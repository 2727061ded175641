"""
app/models/user.py

Purpose: User record model

- Opaque string id assigned by the store
- Trimmed name and city, non-negative integer age
- createdAt / updatedAt timestamps
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.exceptions import ValidationError
from utils.validation_utils import validate_user_fields


class UserFields(BaseModel):
    """
    The mutable part of a user record, already validated and trimmed.
    """
    name: str
    age: int = Field(..., ge=0)
    city: str

    @classmethod
    def from_input(cls, name: Any, age: Any, city: Any) -> "UserFields":
        """
        Validates raw input.

        Raises:
            ValidationError: If a field is missing or age is not a non-negative number
        """
        cleaned, error = validate_user_fields(name, age, city)
        if error:
            raise ValidationError(error)
        return cls(**cleaned)


class UserRecord(BaseModel):
    """
    A stored user. Field aliases match the wire format (createdAt/updatedAt).
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    age: int
    city: str
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")
