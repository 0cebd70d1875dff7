from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from campus_events.database.base_class import Base
from datetime import datetime


class Attendance(Base):
    __tablename__ = "attendance"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # FK
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # attributes
    check_in_time = Column(DateTime, nullable=False, default=datetime.now)
    check_out_time = Column(DateTime, nullable=True)
    status = Column(String(20), nullable=False, default="present")

    # relationship
    event = relationship("Event", back_populates="attendance")
    user = relationship("User", back_populates="attendance")
