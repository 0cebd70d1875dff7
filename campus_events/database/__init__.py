from campus_events.database.db import get_db

__all__ = ["get_db"]
