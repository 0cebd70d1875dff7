from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from campus_events.config import Settings, settings


def build_sqlalchemy_database_url_from_settings(_settings: Settings) -> str:
    """
    Builds a SQLAlchemy URL based on the provided settings.

    DATABASE_URL wins when it is set; otherwise the PostgreSQL connection
    details are assembled into a psycopg URL.

    Parameters:
        _settings (Settings): An instance of the Settings class
        containing the connection details.

    Returns:
        str: The generated SQLAlchemy URL.
    """
    if _settings.DATABASE_URL:
        return _settings.DATABASE_URL
    return (
        f"postgresql+psycopg://{_settings.POSTGRES_USER}:{_settings.POSTGRES_PASSWORD}"
        f"@{_settings.POSTGRES_HOST}:{_settings.POSTGRES_PORT}/{_settings.POSTGRES_DB}"
    )


def get_engine(database_url: str, echo=False) -> Engine:
    """
    Creates and returns a SQLAlchemy Engine object for connecting to a database.

    SQLite URLs get a connection usable from FastAPI's worker threads; any
    other backend gets a bounded, pre-pinged connection pool.

    Parameters:
        database_url (str): The URL of the database to connect to.
        echo (bool): Whether or not to enable echoing of SQL statements.
        Defaults to False.

    Returns:
        Engine: A SQLAlchemy Engine object representing the database connection.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        database_url,
        echo=echo,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=30,      # seconds to wait for a connection before raising
        pool_recycle=1800,    # recycle connections periodically (helps stale conns)
        pool_pre_ping=True,
    )


def get_local_session(engine: Engine) -> sessionmaker:
    """
    Create and return a sessionmaker bound to the given engine.

    Parameters:
        engine (Engine): The engine sessions should use.

    Returns:
        sessionmaker: A sessionmaker object configured for request-scoped sessions.
    """
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


SQLALCHEMY_DATABASE_URL = build_sqlalchemy_database_url_from_settings(settings)
