from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from campus_events.database.base_class import Base
from datetime import datetime


class College(Base):
    __tablename__ = "colleges"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    domain = Column(String(255), nullable=False, unique=True)
    address = Column(String(512), nullable=True)
    contact_email = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.now)

    users = relationship("User", back_populates="college")
    events = relationship("Event", back_populates="college")
