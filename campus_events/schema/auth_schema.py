from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from campus_events.model.users import UserRole
from campus_events.schema.common_schema import CamelModel


class TokenPayload(CamelModel):
    """Payload for Bearer Access Token"""
    sub: str  # user id
    user_id: int
    email: EmailStr
    role: UserRole
    college_id: int
    exp: int
    iat: int


class UserRegister(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)
    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)
    student_id: Optional[str] = Field(default=None, max_length=50)
    college_id: int = Field(gt=0)
    role: UserRole


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    email: str
    first_name: str
    last_name: str
    student_id: Optional[str] = None
    role: UserRole
    college_id: int
    college_name: Optional[str] = None
    created_at: Optional[datetime] = None


class CollegeOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    name: str
    domain: str
