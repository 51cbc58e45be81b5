"""
Rating DAO

Purpose
-------
Data-access layer for the `Rating` ORM entity. Provides:
- Upsert keyed by `(user_id, dialogue_id)` using the database's native
  `INSERT ... ON CONFLICT DO UPDATE`
- Lookup of one user's rating for one dialogue
- A user's history joined with dialogue title and payload
- Paginated listing and aggregates for admin reporting

Design
------
- Requires an active SQLAlchemy `Session` provided by the caller.
- Ratings reference dialogues by the external `dialogue_id` value; joins to
  `dialogues` are outer joins so a rating whose dialogue is missing is still
  listed (with null title and payload).
- Listings are ordered newest first, ties broken by id.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dialogue_rating.database.entities.dialogue import Dialogue
from dialogue_rating.database.entities.rating import RATING_METRICS, Rating
from dialogue_rating.database.entities.user import User
from dialogue_rating.database.helpers.dialect import dialect_insert

logger = logging.getLogger(__name__)


class RatingDao:
    """
    Data Access Object (DAO) for Rating records.
    """

    def upsertRating(self, session: Session, user_id: int, dialogue_id: str, scores: dict) -> int:
        """
        Insert the rating, or replace the existing one for the same pair.

        Every metric column and `created_at` are overwritten on conflict; a
        metric missing from `scores` is stored as NULL.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        user_id : int
            Author of the rating.
        dialogue_id : str
            External id of the rated dialogue.
        scores : dict
            Metric name → score. Keys outside `RATING_METRICS` are ignored.

        Returns
        -------
        int
            Id of the resulting row.
        """
        values = {metric: scores.get(metric) for metric in RATING_METRICS}
        values["created_at"] = datetime.now(timezone.utc)
        table = Rating.__table__
        try:
            stmt = dialect_insert(session, table).values(user_id=user_id, dialogue_id=dialogue_id, **values)
            stmt = stmt.on_conflict_do_update(
                index_elements=["user_id", "dialogue_id"],
                set_={column: stmt.excluded[column] for column in values},
            ).returning(table.c.id)
            return session.execute(stmt).scalar_one()
        except SQLAlchemyError as e:
            logger.error("Error in RatingDao.upsertRating. Error Message: %s", e)
            raise

    def fetchRating(self, session: Session, user_id: int, dialogue_id: str) -> Optional[Rating]:
        stmt = select(Rating).where(Rating.user_id == user_id, Rating.dialogue_id == dialogue_id).limit(1)
        return session.execute(stmt).scalars().first()

    def fetchHistory(self, session: Session, user_id: int) -> List[Tuple[Rating, Optional[str], Optional[str]]]:
        """
        Every rating of `user_id` with its dialogue's title and raw payload.

        Returns
        -------
        list[tuple[Rating, str | None, str | None]]
            (rating, product_title, dialogue_data), newest first.
        """
        stmt = (
            select(Rating, Dialogue.product_title, Dialogue.dialogue_data)
            .outerjoin(Dialogue, Dialogue.dialogue_id == Rating.dialogue_id)
            .where(Rating.user_id == user_id)
            .order_by(Rating.created_at.desc(), Rating.id.desc())
        )
        return [tuple(row) for row in session.execute(stmt).all()]

    def fetchPage(self, session: Session, limit: int, offset: int):
        """
        One page of all ratings with author username and dialogue title/payload.

        Returns
        -------
        list[tuple[Rating, str | None, str | None, str | None]]
            (rating, username, product_title, dialogue_data), newest first.
        """
        stmt = (
            select(Rating, User.username, Dialogue.product_title, Dialogue.dialogue_data)
            .outerjoin(User, User.id == Rating.user_id)
            .outerjoin(Dialogue, Dialogue.dialogue_id == Rating.dialogue_id)
            .order_by(Rating.created_at.desc(), Rating.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return [tuple(row) for row in session.execute(stmt).all()]

    def countRatings(self, session: Session) -> int:
        return session.execute(select(func.count(Rating.id))).scalar_one()

    def metricAverages(self, session: Session) -> dict:
        """Metric name → raw average over all ratings (None when there are none)."""
        stmt = select(*[func.avg(getattr(Rating, metric)) for metric in RATING_METRICS])
        row = session.execute(stmt).one()
        return dict(zip(RATING_METRICS, row))

    def countsByDay(self, session: Session, days: int = 30) -> List[Tuple[str, int]]:
        """
        Rating counts per calendar day for the `days` most recent days that have ratings.

        Returns
        -------
        list[tuple[str, int]]
            (YYYY-MM-DD, count), most recent day first.
        """
        day = func.date(Rating.created_at)
        stmt = (
            select(day.label("day"), func.count(Rating.id))
            .group_by(day)
            .order_by(day.desc())
            .limit(days)
        )
        return [(str(d), count) for d, count in session.execute(stmt).all()]
