"""
Shared pydantic base classes and field helpers.

The admin client speaks camelCase JSON (``fullName``, ``expiresAt``)
while the Python side uses snake_case attributes.  ``CamelModel``
bridges the two: fields are populated from either spelling and
serialised with the camelCase alias.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


TIME_OF_DAY_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


def check_time_of_day(value: Optional[str]) -> Optional[str]:
    """Validate a 24-hour ``HH:MM`` string."""
    if value is not None and not TIME_OF_DAY_RE.match(value):
        raise ValueError("time must use the 24-hour HH:MM format")
    return value


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def merge_changes(current: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
    """Apply a partial update to a stored record.

    Nested objects are merged key by key, so a body that sends only
    ``accessHours.startTime`` leaves the other ``accessHours`` keys
    as they were.  Lists and scalars are replaced.
    """
    merged = dict(current)
    for key, value in changes.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_changes(merged[key], value)
        else:
            merged[key] = value
    return merged
