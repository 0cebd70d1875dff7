from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class FeedbackIn(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=500)


class FeedbackOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    event_id: int
    user_id: int
    rating: int
    comment: Optional[str] = None
    submitted_at: Optional[datetime] = None


class FeedbackEntryOut(FeedbackOut):
    first_name: str
    last_name: str
    student_id: Optional[str] = None


class RatingDistribution(BaseModel):
    five_star: int = 0
    four_star: int = 0
    three_star: int = 0
    two_star: int = 0
    one_star: int = 0
