import os
from datetime import date, datetime, time, timedelta

# settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session

from campus_events.auth_util import create_access_token, get_password_hash
from campus_events.database import get_db
from campus_events.database.base_class import Base
from campus_events.database.init_db import seed_default_categories
from campus_events.main import app
from campus_events.model import (
    Attendance,
    College,
    Event,
    EventCategory,
    EventStatus,
    Feedback,
    Registration,
    RegistrationStatus,
    User,
    UserRole,
)

# Use an in-memory SQLite database for testing
engine: Engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

PASSWORD = "secret123"


# Override the database dependency
def override_get_db():
    db: Session = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def db_session():
    """Fresh schema with the default categories for every test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    seed_default_categories(db)
    db.commit()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session: Session):
    yield TestClient(app)


@pytest.fixture
def college(db_session: Session) -> College:
    college = College(name="North Campus", domain="north.edu", contact_email="office@north.edu")
    db_session.add(college)
    db_session.commit()
    return college


@pytest.fixture
def other_college(db_session: Session) -> College:
    college = College(name="South Campus", domain="south.edu")
    db_session.add(college)
    db_session.commit()
    return college


@pytest.fixture
def category(db_session: Session) -> EventCategory:
    return db_session.query(EventCategory).filter(EventCategory.name == "Workshop").one()


@pytest.fixture
def make_user(db_session: Session):
    counter = {"n": 0}

    def _make_user(college: College, role: UserRole = UserRole.student, **kwargs) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            college_id=college.id,
            email=kwargs.pop("email", f"{role.value}{n}@{college.domain}"),
            password_hash=get_password_hash(kwargs.pop("password", PASSWORD)),
            first_name=kwargs.pop("first_name", f"First{n}"),
            last_name=kwargs.pop("last_name", f"Last{n}"),
            student_id=kwargs.pop("student_id", f"S{n:04d}" if role == UserRole.student else None),
            role=role,
            **kwargs,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def admin(make_user, college) -> User:
    return make_user(college, UserRole.admin, first_name="Ada")


@pytest.fixture
def student(make_user, college) -> User:
    return make_user(college, UserRole.student)


@pytest.fixture
def other_admin(make_user, other_college) -> User:
    return make_user(other_college, UserRole.admin)


@pytest.fixture
def make_event(db_session: Session, category: EventCategory):
    def _make_event(creator: User, **kwargs) -> Event:
        values = {
            "college_id": creator.college_id,
            "category_id": category.id,
            "created_by": creator.id,
            "title": "Intro to Robotics",
            "description": "Build a line follower",
            "event_date": date.today() + timedelta(days=7),
            "start_time": time(10, 0),
            "end_time": time(12, 30),
            "location": "Hall A",
            "capacity": None,
            "status": EventStatus.published,
        }
        values.update(kwargs)
        event = Event(**values)
        db_session.add(event)
        db_session.commit()
        return event

    return _make_event


@pytest.fixture
def register(db_session: Session):
    def _register(event: Event, user: User, status: RegistrationStatus = RegistrationStatus.registered) -> Registration:
        registration = Registration(event_id=event.id, user_id=user.id, status=status)
        db_session.add(registration)
        db_session.commit()
        return registration

    return _register


@pytest.fixture
def attend(db_session: Session):
    def _attend(event: Event, user: User) -> Attendance:
        attendance = Attendance(event_id=event.id, user_id=user.id, check_in_time=datetime.now())
        db_session.add(attendance)
        db_session.commit()
        return attendance

    return _attend


@pytest.fixture
def rate(db_session: Session):
    def _rate(event: Event, user: User, rating: int, comment: str = None) -> Feedback:
        feedback = Feedback(event_id=event.id, user_id=user.id, rating=rating, comment=comment)
        db_session.add(feedback)
        db_session.commit()
        return feedback

    return _rate


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def admin_headers(admin: User) -> dict:
    return auth_headers(admin)


@pytest.fixture
def student_headers(student: User) -> dict:
    return auth_headers(student)


@pytest.fixture
def headers_for():
    return auth_headers
