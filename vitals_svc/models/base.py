"""
Shared pydantic building blocks for stored entities and API schemas.

Stored JSON and API payloads use camelCase keys (patientId, heartRate);
Python code uses snake_case attributes. Timestamps are always UTC and
serialize as ISO 8601 with millisecond precision.
"""
from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from core.datetime_utils import format_iso, to_utc

UTCDateTime = Annotated[
    datetime,
    AfterValidator(to_utc),
    PlainSerializer(format_iso, return_type=str, when_used="json"),
]


class CamelModel(BaseModel):
    """Base model with camelCase aliases that still accepts snake_case names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
