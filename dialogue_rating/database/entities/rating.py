"""
Rating ORM Model
================

The ``Rating`` ORM model stores one user's scores for one dialogue. It maps to
the ``ratings`` table.

Metric set
----------
Only one metric set is stored at a time. The current one is version 2, the
six named quality dimensions listed in ``RATING_METRICS``; the columns, the
CHECK constraints, request validation and every aggregate are derived from
that tuple.

Key Features
~~~~~~~~~~~~
- Integer primary key (``id``)
- Foreign key ``user_id`` → ``users.id``
- ``dialogue_id``: external dialogue identifier held by value (no FK)
- One nullable integer column per metric, each constrained to 1-5
- Unique ``(user_id, dialogue_id)``: resubmission replaces the row
"""

from dialogue_rating.database.config.connection_engine import declarativeBase
from sqlalchemy import VARCHAR, CheckConstraint, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from typing import Optional

RATING_METRICS_VERSION = 2

RATING_METRICS = (
    "realism",
    "conciseness",
    "coherence",
    "overall_naturalness",
    "utterance_realism",
    "script_following",
)
"""Canonical metric names, in display order."""

MIN_SCORE = 1
MAX_SCORE = 5


class Rating(declarativeBase):
    """
    ORM model for the `ratings` table.

    Attributes
    ----------
    id : int
        Primary key of the rating row.
    user_id : int
        Author of the rating (`users.id`).
    dialogue_id : str
        External id of the rated dialogue (`dialogues.dialogue_id`, by value).
    realism, conciseness, coherence, overall_naturalness, utterance_realism, script_following : int | None
        Scores in the inclusive range 1-5; None when not provided.
    created_at : datetime
        Time of the latest submission (UTC).
    """

    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("user_id", "dialogue_id", name="uq_ratings_user_dialogue"),
        *(
            CheckConstraint(
                f"{metric} IS NULL OR ({metric} >= {MIN_SCORE} AND {metric} <= {MAX_SCORE})",
                name=f"ck_ratings_{metric}",
            )
            for metric in RATING_METRICS
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)

    dialogue_id: Mapped[str] = mapped_column(VARCHAR(255), nullable=False)

    realism: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    conciseness: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    coherence: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    overall_naturalness: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    utterance_realism: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    script_following: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    def scores(self) -> dict:
        """Metric name → stored score, in canonical order."""
        return {metric: getattr(self, metric) for metric in RATING_METRICS}

    def __str__(self) -> str:
        return f"Rating: id:{self.id}, user_id: {self.user_id}, dialogue_id: {self.dialogue_id}"
