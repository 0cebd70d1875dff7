from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from campus_events.database.base_class import Base
from campus_events.log import get_logger
from campus_events import model  # noqa: F401  registers every table on Base.metadata
from campus_events.model.event_categories import EventCategory

log = get_logger(__name__)

DEFAULT_CATEGORIES = [
    ("Workshop", "Hands-on learning sessions"),
    ("Fest", "Cultural and technical festivals"),
    ("Seminar", "Educational presentations and discussions"),
    ("Hackathon", "Coding competitions and challenges"),
    ("Tech Talk", "Technology presentations and discussions"),
    ("Conference", "Professional conferences and meetings"),
    ("Sports", "Sports events and competitions"),
    ("Cultural", "Cultural events and performances"),
]


def create_tables(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)
    log.info("Tables ready: %s", ", ".join(sorted(Base.metadata.tables)))


def seed_default_categories(db: Session) -> int:
    """Insert the default event categories that are missing. Returns how many were added."""
    existing = {name for (name,) in db.query(EventCategory.name).all()}
    added = 0
    for name, description in DEFAULT_CATEGORIES:
        if name in existing:
            continue
        db.add(EventCategory(name=name, description=description))
        added += 1
    db.flush()
    if added:
        log.info("Seeded %d event categories", added)
    return added
