"""
Database Transaction Management
===============================

This module provides utilities for managing SQLAlchemy database sessions
using Python context variables and a decorator-based transaction wrapper.

It allows seamless propagation of a database session across function calls
without explicitly threading it through arguments. Functions can be safely
decorated with ``@transactional`` to ensure they run inside a managed
transactional context.

Key features
~~~~~~~~~~~~
- Context variable to store the active session
- Implicit reuse of existing sessions
- Automatic commit and rollback handling
- SQLAlchemy failures surfaced as ``StoreError`` after being logged
- Clean session closure after execution

"""

import contextvars
import logging
from functools import wraps

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from dialogue_rating.database.config.connection_engine import connection_engine
from dialogue_rating.exceptions import StoreError

logger = logging.getLogger(__name__)

db_session_context = contextvars.ContextVar("db_session_context", default=None)
"""Context variable storing the active SQLAlchemy session."""

SessionFactory = sessionmaker(bind=connection_engine, expire_on_commit=False)
"""Session factory bound to the application engine."""


def transactional(func):
    """
    Decorator to wrap functions in a managed SQLAlchemy transaction.

    Ensures that:
    - If a session already exists in context, it is reused.
    - Otherwise, a new session is created, committed, and closed.
    - On errors, the session is rolled back and closed. Raw SQLAlchemy
      errors are logged with their traceback and re-raised as ``StoreError``
      so callers never see driver details.

    Parameters
    ----------
    func : callable
        The function to wrap. It must accept a `session` keyword argument.

    Returns
    -------
    callable
        The wrapped function, executed within a database transaction.

    Example
    -------
    >>> @transactional
    ... def count_users(session=None):
    ...     return UserDao().countUsers(session)
    ...
    >>> count_users()
    """
    @wraps(func)
    def wrap_func(*args, **kwargs):
        session = db_session_context.get()
        if session:
            return func(*args, session=session, **kwargs)

        session = SessionFactory()
        token = db_session_context.set(session)

        try:
            result = func(*args, session=session, **kwargs)
            session.flush()
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.exception("Database error in %s", func.__qualname__)
            raise StoreError() from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
            db_session_context.reset(token)

        return result

    return wrap_func
