"""
Dialogue DAO

Purpose
-------
Data-access layer for the `Dialogue` ORM entity. Provides:
- Insert-if-absent keyed by the external `dialogue_id` (startup bootstrap)
- Lookup by external id
- Random pick among the dialogues a user has not rated yet
- Counts and the per-dialogue rating aggregates used by admin reporting

Design
------
- Requires an active SQLAlchemy `Session` provided by the caller.
- Dialogues are immutable once stored: there is no update method, and the
  insert ignores rows whose `dialogue_id` already exists.
"""

from typing import List, Optional, Tuple

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from dialogue_rating.database.entities.dialogue import Dialogue
from dialogue_rating.database.entities.rating import RATING_METRICS, Rating
from dialogue_rating.database.helpers.dialect import dialect_insert


class DialogueDao:
    """
    Data Access Object (DAO) for Dialogue records.
    """

    def insertIfAbsent(
        self,
        session: Session,
        dialogue_id: str,
        product_id,
        product_title: Optional[str],
        kind: Optional[int],
        dialogue_data: str,
        source_file: Optional[str],
    ) -> bool:
        """
        Insert a dialogue unless one with the same `dialogue_id` exists.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        dialogue_id : str
            External identifier (`dialogue_<product_id>`).
        product_id, product_title, kind :
            Fields copied out of the payload.
        dialogue_data : str
            The payload serialized as JSON text.
        source_file : str | None
            Name of the file the payload was read from.

        Returns
        -------
        bool
            True if a row was inserted, False if the id was already present.
        """
        stmt = (
            dialect_insert(session, Dialogue.__table__)
            .values(
                dialogue_id=dialogue_id,
                product_id=product_id,
                product_title=product_title,
                kind=kind,
                dialogue_data=dialogue_data,
                source_file=source_file,
            )
            .on_conflict_do_nothing(index_elements=["dialogue_id"])
        )
        result = session.execute(stmt)
        return result.rowcount == 1

    def fetchByDialogueId(self, session: Session, dialogue_id: str) -> Optional[Dialogue]:
        stmt = select(Dialogue).where(Dialogue.dialogue_id == dialogue_id).limit(1)
        return session.execute(stmt).scalars().first()

    def fetchRandomUnrated(self, session: Session, user_id: int) -> Optional[Dialogue]:
        """
        Pick one dialogue uniformly at random among those `user_id` has not rated.

        Returns
        -------
        Dialogue | None
            None when the user has rated every stored dialogue.
        """
        stmt = (
            select(Dialogue)
            .outerjoin(
                Rating,
                and_(Rating.dialogue_id == Dialogue.dialogue_id, Rating.user_id == user_id),
            )
            .where(Rating.id.is_(None))
            .order_by(func.random())
            .limit(1)
        )
        return session.execute(stmt).scalars().first()

    def countDialogues(self, session: Session) -> int:
        return session.execute(select(func.count(Dialogue.id))).scalar_one()

    def fetchDialoguesWithStats(self, session: Session) -> List[Tuple[Dialogue, int, dict]]:
        """
        Every dialogue with its rating count and per-metric raw averages.

        Averages are None for a dialogue without ratings. Ordered by rating
        count (descending), then newest first.

        Returns
        -------
        list[tuple[Dialogue, int, dict]]
        """
        rating_count = func.count(Rating.id).label("rating_count")
        averages = [func.avg(getattr(Rating, metric)).label(f"avg_{metric}") for metric in RATING_METRICS]
        stmt = (
            select(Dialogue, rating_count, *averages)
            .outerjoin(Rating, Rating.dialogue_id == Dialogue.dialogue_id)
            .group_by(Dialogue.id)
            .order_by(rating_count.desc(), Dialogue.created_at.desc(), Dialogue.id.desc())
        )
        rows = []
        for row in session.execute(stmt).all():
            dialogue, count, *avgs = row
            rows.append((dialogue, count, dict(zip(RATING_METRICS, avgs))))
        return rows
