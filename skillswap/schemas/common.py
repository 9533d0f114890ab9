"""Base schema: snake_case in Python, camelCase on the wire."""
from datetime import datetime, timezone

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

    @field_validator("*", mode="after")
    @classmethod
    def _utc_datetimes(cls, value):
        # SQLite hands back naive values; every timestamp in the API is UTC
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)
        return value
