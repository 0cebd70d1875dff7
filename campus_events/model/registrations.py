from sqlalchemy import Column, Integer, ForeignKey, DateTime, Enum as SAEnum
from sqlalchemy.orm import relationship
from campus_events.database.base_class import Base
from datetime import datetime
from enum import Enum as PyEnum


class RegistrationStatus(str, PyEnum):
    registered = "registered"
    cancelled = "cancelled"


class Registration(Base):
    __tablename__ = "registrations"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # FK
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # attributes
    status = Column(
        SAEnum(RegistrationStatus, name="registration_status", native_enum=False, validate_strings=True),
        nullable=False,
        default=RegistrationStatus.registered,
    )
    registration_date = Column(DateTime, default=datetime.now)

    # relationship
    event = relationship("Event", back_populates="registrations")
    user = relationship("User", back_populates="registrations")
