"""
utils/validation_utils.py

Purpose: Input validation

- Text field trimming and presence checks
- Age parsing (ints, integral floats, numeric strings)
- Combined user field validation with client-facing error messages
- Search term normalization
"""

import math
from typing import Any, Dict, Optional, Tuple

from utils.constants import (
    MISSING_FIELDS_MESSAGE,
    AGE_NOT_NUMBER_MESSAGE,
    AGE_NEGATIVE_MESSAGE,
    MAX_AGE,
)


def clean_text_field(value: Any) -> Optional[str]:
    """
    Trims a text field.

    Args:
        value: Raw value from the request body

    Returns:
        Trimmed string, or None if the value is missing, not a string, or blank
    """
    if not isinstance(value, str):
        return None

    value = value.strip()
    return value or None


def is_missing(value: Any) -> bool:
    """
    Checks whether an age value counts as not provided.
    """
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def parse_age(value: Any) -> Optional[int]:
    """
    Parses an age into an integer.

    Accepts JSON integers, floats with an integral value, and strings
    holding either ("30", "30.0").

    Args:
        value: Raw age value

    Returns:
        Integer age, or None if the value is not a whole finite number
    """
    # bool is an int subclass; true/false are not ages
    if isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            value = float(text)
        except ValueError:
            return None

    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        return int(value)

    return None


def validate_user_fields(name: Any, age: Any, city: Any) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Validates and normalizes the three user fields.

    Args:
        name: Raw name
        age: Raw age
        city: Raw city

    Returns:
        (cleaned_fields, None) when valid, (None, error_message) otherwise
    """
    clean_name = clean_text_field(name)
    clean_city = clean_text_field(city)

    if clean_name is None or clean_city is None or is_missing(age):
        return None, MISSING_FIELDS_MESSAGE

    parsed_age = parse_age(age)
    if parsed_age is None or parsed_age > MAX_AGE:
        return None, AGE_NOT_NUMBER_MESSAGE

    if parsed_age < 0:
        return None, AGE_NEGATIVE_MESSAGE

    return {"name": clean_name, "age": parsed_age, "city": clean_city}, None


def normalize_search_term(term: Optional[str]) -> Optional[str]:
    """
    Normalizes a list filter term.

    Returns:
        Lower-cased, trimmed term, or None when there is nothing to filter on
    """
    if not term:
        return None

    term = term.strip().lower()
    return term or None


def matches_search(name: str, city: str, term: Optional[str]) -> bool:
    """
    Checks whether a record's name or city contains the search term (case-insensitive).
    """
    if not term:
        return True

    return term in (name or "").lower() or term in (city or "").lower()
