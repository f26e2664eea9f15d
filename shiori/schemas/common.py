# schemas/common.py
from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def _assume_utc(value: datetime) -> datetime:
    # SQLite drops the offset on the way back; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_assume_utc)]


class CamelModel(BaseModel):
    """Response schema base: snake_case attributes, camelCase JSON keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(BaseModel):
    """Generic success response."""
    success: bool = True
    message: str
    instructions: Optional[str] = None
