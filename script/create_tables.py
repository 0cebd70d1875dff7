# create_tables.py
from sqlalchemy import inspect

from campus_events.database.db import ENGINE, get_ctx_db
from campus_events.database.init_db import create_tables, seed_default_categories


if __name__ == "__main__":
    create_tables(ENGINE)
    print("✅ Tables created.")

    with get_ctx_db() as db:
        added = seed_default_categories(db)
    print(f"📚 Event categories added: {added}")

    inspector = inspect(ENGINE)
    print("📋 Existing tables:", inspector.get_table_names())
