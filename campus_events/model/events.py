from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Date, Time, Enum as SAEnum
from sqlalchemy.orm import relationship
from campus_events.database.base_class import Base
from datetime import datetime
from enum import Enum as PyEnum


class EventStatus(str, PyEnum):
    draft = "draft"
    published = "published"
    cancelled = "cancelled"
    completed = "completed"


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # FK
    college_id = Column(Integer, ForeignKey("colleges.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("event_categories.id"), nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    # attributes
    title = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    event_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    location = Column(String(255), nullable=True)
    capacity = Column(Integer, nullable=True)  # NULL means unlimited
    registration_deadline = Column(DateTime, nullable=True)
    status = Column(
        SAEnum(EventStatus, name="event_status", native_enum=False, validate_strings=True),
        nullable=False,
        default=EventStatus.draft,
    )
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # relationship
    college = relationship("College", back_populates="events")
    category = relationship("EventCategory", back_populates="events")
    creator = relationship("User", back_populates="created_events")
    registrations = relationship("Registration", back_populates="event")
    attendance = relationship("Attendance", back_populates="event")
    feedback = relationship("Feedback", back_populates="event")
