from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, Enum as SAEnum
from sqlalchemy.orm import relationship
from campus_events.database.base_class import Base
from datetime import datetime
from enum import Enum as PyEnum


class UserRole(str, PyEnum):
    admin = "admin"
    student = "student"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    college_id = Column(Integer, ForeignKey("colleges.id"), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    student_id = Column(String(50), nullable=True)
    role = Column(
        SAEnum(UserRole, name="user_role", native_enum=False, validate_strings=True),
        nullable=False,
        default=UserRole.student,
    )
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.now)

    college = relationship("College", back_populates="users")
    created_events = relationship("Event", back_populates="creator")
    registrations = relationship("Registration", back_populates="user")
    attendance = relationship("Attendance", back_populates="user")
    feedback = relationship("Feedback", back_populates="user")
