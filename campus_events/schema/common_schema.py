import math
from datetime import time
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase keys (snake_case too) and emits camelCase"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EventTimesModel(BaseModel):
    """Row model that renders start/end times as HH:MM"""

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("start_time", "end_time", check_fields=False)
    def format_hhmm(self, value: Optional[time]) -> Optional[str]:
        return value.strftime("%H:%M") if value is not None else None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))
