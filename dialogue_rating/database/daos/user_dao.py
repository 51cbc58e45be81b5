"""
User DAO

Purpose
-------
Thin data-access layer for the `User` ORM entity. Provides:
- Creation with password hashing
- Lookup by id, username, email, or "username or email"
- Admin flag and password updates (used by the admin script)
- Counts and the per-user rating counts used by admin reporting

Design
------
- The DAO expects an active SQLAlchemy `Session` supplied by the caller
  (normally injected by `@transactional`).
- Business rules (validation, uniqueness messages, authorization) live in
  `dialogue_rating.database.core`; the DAO focuses on persistence.
- Passwords are hashed using `EncryptionDec.hash_password(...)` before insert.

Usage
-----
.. code-block:: python

    from dialogue_rating.database.helpers.transactionManagement import SessionFactory
    from dialogue_rating.database.entities.user import User
    from dialogue_rating.database.daos.user_dao import UserDao

    dao = UserDao()
    with SessionFactory() as session:
        user = dao.createUser(session, User(username="alice", email="a@x.com", password="secret1"))
        session.commit()
        same = dao.fetchUserByLogin(session, "a@x.com")

Error Handling
--------------
- Write methods log the failure and re-raise; `@transactional` rolls back
  and converts SQLAlchemy errors into `StoreError`.
- `createUser` flushes, so a UNIQUE violation surfaces as `IntegrityError`
  inside the caller's function where it can be translated.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dialogue_rating.crypt.encrypt_decrypt import EncryptionDec
from dialogue_rating.database.entities.rating import Rating
from dialogue_rating.database.entities.user import User

logger = logging.getLogger(__name__)


class UserDao:
    """
    Data Access Object (DAO) for managing User entities.
    Provides methods for creating users, retrieving user data,
    and updating the admin flag.
    """

    def createUser(self, session: Session, user_data: User) -> User:
        """
        Create a new user in the database with a hashed password.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        user_data : User
            User entity whose `password` holds the plaintext password.

        Returns
        -------
        User
            The flushed entity, with its `id` assigned.

        Raises
        ------
        sqlalchemy.exc.IntegrityError
            If the username or email is already taken.
        """
        try:
            enc = EncryptionDec()
            user_data.password = enc.hash_password(text=user_data.password)
            session.add(user_data)
            session.flush()
            return user_data
        except SQLAlchemyError as e:
            logger.error("Error in UserDao.createUser. Error Message: %s", e)
            raise

    def fetchUserById(self, session: Session, user_id: int) -> Optional[User]:
        return session.get(User, user_id)

    def fetchUser(self, session: Session, username: str) -> Optional[User]:
        """Fetch a user by exact username."""
        return session.execute(select(User).where(User.username == username).limit(1)).scalars().first()

    def fetchUserByEmail(self, session: Session, email: str) -> Optional[User]:
        """Fetch a user by exact email."""
        return session.execute(select(User).where(User.email == email).limit(1)).scalars().first()

    def fetchUserByLogin(self, session: Session, login: str) -> Optional[User]:
        """
        Fetch a user whose username OR email equals `login`.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        login : str
            Username or email typed into the login form.

        Returns
        -------
        User | None
            The matching user, preferring a username match.
        """
        stmt = (
            select(User)
            .where(or_(User.username == login, User.email == login))
            .order_by((User.username == login).desc(), User.id)
            .limit(1)
        )
        return session.execute(stmt).scalars().first()

    def updateAdmin(self, session: Session, user_id: int, is_admin: bool) -> None:
        """
        Set or clear the admin flag of a user.

        Raises
        ------
        sqlalchemy.exc.NoResultFound
            If no user has that id.
        """
        try:
            user = session.execute(select(User).where(User.id == user_id)).scalars().one()
            user.is_admin = is_admin
            session.flush()
        except SQLAlchemyError as e:
            logger.error("Error in UserDao.updateAdmin. Error Message: %s", e)
            raise

    def updatePassword(self, session: Session, user_id: int, password: str) -> None:
        """Replace the stored hash with the hash of `password`."""
        user = session.execute(select(User).where(User.id == user_id)).scalars().one()
        user.password = EncryptionDec().hash_password(text=password)
        session.flush()

    def countUsers(self, session: Session) -> int:
        return session.execute(select(func.count(User.id))).scalar_one()

    def fetchUsersWithRatingCounts(self, session: Session) -> List[Tuple[User, int]]:
        """
        Every user with the number of ratings they authored, newest-joined first.

        Returns
        -------
        list[tuple[User, int]]
        """
        stmt = (
            select(User, func.count(Rating.id).label("rating_count"))
            .outerjoin(Rating, Rating.user_id == User.id)
            .group_by(User.id)
            .order_by(User.created_at.desc(), User.id.desc())
        )
        return [(user, count) for user, count in session.execute(stmt).all()]
