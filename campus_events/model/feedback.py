from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from campus_events.database.base_class import Base
from datetime import datetime


class Feedback(Base):
    __tablename__ = "feedback"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_feedback_rating"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # FK
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # attributes
    rating = Column(Integer, nullable=False)
    comment = Column(String(500), nullable=True)
    submitted_at = Column(DateTime, default=datetime.now)

    # relationship
    event = relationship("Event", back_populates="feedback")
    user = relationship("User", back_populates="feedback")
