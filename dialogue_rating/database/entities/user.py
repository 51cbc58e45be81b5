"""
User ORM Model
==============

The ``User`` ORM model represents a registered rater. It maps to the
``users`` table and holds the credentials and the admin flag.

Key features
~~~~~~~~~~~~
- Integer autoincrement primary key (``id``)
- Unique username and unique email
- bcrypt password hash
- ``is_admin`` flag, changed only by the admin script
- Timezone-aware creation timestamp (UTC)

"""

from dialogue_rating.database.config.connection_engine import declarativeBase
from sqlalchemy import VARCHAR, Boolean, Integer, TEXT, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone


class User(declarativeBase):
    """
    ORM model for the `users` table.

    Attributes
    ----------
    id : int
        Primary key.
    username : str
        Unique login name.
    email : str
        Unique email address; also accepted as a login name.
    password : str
        bcrypt hash of the password.
    is_admin : bool
        Whether the user may call the admin reporting routes.
    created_at : datetime
        Registration time (UTC).
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    """Primary key of the user."""

    username: Mapped[str] = mapped_column(VARCHAR(255), unique=True, nullable=False)
    """Username of the user (max length 255)."""

    email: Mapped[str] = mapped_column(VARCHAR(255), unique=True, nullable=False)
    """Email address of the user (max length 255)."""

    password: Mapped[str] = mapped_column(TEXT, nullable=False)
    """Hashed password of the user."""

    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    """Admin capability flag."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    """Registration timestamp (UTC)."""

    def __init__(self, username: str, email: str, password: str, is_admin: bool = False, created_at=None):
        """
        Initialize a new User object.

        Parameters
        ----------
        username : str
            Username of the user.
        email : str
            Email address of the user.
        password : str
            Already hashed password.
        is_admin : bool, optional
            Admin flag, False for every self-registered user.
        created_at : datetime | str | None
            Registration timestamp; a datetime, an ISO8601 string, or None for now.
        """
        self.username = username
        self.email = email
        self.password = password
        self.is_admin = is_admin
        if created_at is None:
            self.created_at = datetime.now(timezone.utc)
        elif isinstance(created_at, str):
            self.created_at = datetime.fromisoformat(created_at)
        else:
            self.created_at = created_at

    def to_public_dict(self) -> dict:
        """The user fields that are safe to return to clients."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "is_admin": bool(self.is_admin),
        }

    def __str__(self) -> str:
        return f"User: id:{self.id}, username: {self.username}, admin: {self.is_admin}"
