"""
Dialect-specific INSERT constructs.

The DAOs rely on the database's own conflict resolution
(``INSERT ... ON CONFLICT``) for upserts and insert-if-absent. SQLAlchemy
only exposes ``on_conflict_do_update`` / ``on_conflict_do_nothing`` on the
dialect ``insert`` constructs, so the right one is chosen from the session's
bind.
"""

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def dialect_insert(session: Session, table):
    """
    Return an ``insert(table)`` that supports ``ON CONFLICT`` clauses.

    Raises
    ------
    NotImplementedError
        When the bound database is neither SQLite nor PostgreSQL.
    """
    name = session.get_bind().dialect.name
    try:
        return _INSERTS[name](table)
    except KeyError:
        raise NotImplementedError(f"ON CONFLICT inserts are not supported on '{name}'") from None
