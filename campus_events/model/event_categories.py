from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from campus_events.database.base_class import Base


class EventCategory(Base):
    __tablename__ = "event_categories"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(String(512), nullable=True)

    events = relationship("Event", back_populates="category")
