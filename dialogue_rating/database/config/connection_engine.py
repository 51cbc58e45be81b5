"""
Connection Engine (SQLAlchemy)

Purpose
-------
Centralizes database initialization for the application:
- Builds the SQLAlchemy connection URL from environment-backed settings.
- Creates the Engine (connection pool + SQL execution entry point).
- Defines shared MetaData for table and schema objects.
- Exposes a Declarative Base class for ORM models.

Notes
-----
- Uses `URL.create(...)` so that the same settings describe a SQLite file
  (driver + database only) or a server database (credentials + host).
- SQLite connections enforce foreign keys through a connect-time PRAGMA.
- All ORM models must inherit from `declarativeBase` to participate in
  `create_schema()`.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.schema import MetaData
from dialogue_rating.database.config.config import settings

# --------------------------------------------------------------------
# Construct the SQLAlchemy connection URL using values from Settings.
# --------------------------------------------------------------------
connection_url = URL.create(
    drivername=settings.DB_DRIVER_NAME,   # e.g., "sqlite", "postgresql"
    username=settings.DB_USERNAME,
    password=settings.DB_PASSWORD,
    host=settings.DB_HOST,
    port=settings.DB_PORT,
    database=settings.DB_DATABASE_NAME,   # file path when using SQLite
)
"""Constructs the SQLAlchemy connection URL using values from Settings."""

# --------------------------------------------------------------------
# Engine object: core interface to the database.
# --------------------------------------------------------------------
connection_engine = create_engine(connection_url)
"""Engine object: Core interface to the database.
Responsible for managing connections, executing SQL, and pooling.
"""


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # only the sqlite3 driver understands the pragma
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


metadata = MetaData()
"""
Metadata object: Stores schema-level information about tables, constraints, indexes, etc. Shared across all models.
"""

declarativeBase = declarative_base(metadata=metadata)
"""Declarative Base: Root class for ORM models.
All model classes should inherit from this to gain ORM features and automatic schema generation.
"""


def create_schema(engine=None) -> None:
    """
    Create every table registered on `metadata` that does not exist yet.

    The entity modules are imported here so that their tables are registered
    before `create_all` runs, whichever module triggered the call.
    """
    from dialogue_rating.database.entities import dialogue, rating, user  # noqa: F401

    metadata.create_all(engine or connection_engine)


def drop_schema(engine=None) -> None:
    """Drop every table registered on `metadata` (used by the test suite)."""
    from dialogue_rating.database.entities import dialogue, rating, user  # noqa: F401

    metadata.drop_all(engine or connection_engine)
