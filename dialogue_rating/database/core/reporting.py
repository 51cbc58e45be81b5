"""
Admin reporting queries.

Read-only aggregates across users, dialogues and ratings. The functions do
not check the caller: the admin routes depend on `require_admin` before any
of them runs.
"""

from typing import Optional

from sqlalchemy.orm import Session

from dialogue_rating.database.core.funcs import isoformat
from dialogue_rating.database.daos.dialogue_dao import DialogueDao
from dialogue_rating.database.daos.rating_dao import RatingDao
from dialogue_rating.database.daos.user_dao import UserDao
from dialogue_rating.database.entities.dialogue import parse_payload
from dialogue_rating.database.helpers.transactionManagement import transactional
from dialogue_rating.exceptions import ValidationError

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 1000
STATS_DAYS = 30


def _round(value) -> Optional[float]:
    return round(float(value), 2) if value is not None else None


@transactional
def get_stats(session: Session) -> dict:
    """
    Overall counts, per-metric averages and ratings per day.

    Returns
    -------
    dict
        totalUsers, totalRatings, totalDialogues;
        averageRatings: metric → mean rounded to 2 decimals (0 without ratings);
        ratingsByDate: [{date, count}] for the 30 most recent days with ratings,
        most recent first.
    """
    rating_dao = RatingDao()
    averages = rating_dao.metricAverages(session=session)
    return {
        "totalUsers": UserDao().countUsers(session=session),
        "totalRatings": rating_dao.countRatings(session=session),
        "totalDialogues": DialogueDao().countDialogues(session=session),
        "averageRatings": {metric: _round(value) if value is not None else 0 for metric, value in averages.items()},
        "ratingsByDate": [
            {"date": day, "count": count}
            for day, count in rating_dao.countsByDay(session=session, days=STATS_DAYS)
        ],
    }


@transactional
def list_users(session: Session) -> list[dict]:
    """All users with the number of ratings each authored, newest-joined first."""
    return [
        {
            **user.to_public_dict(),
            "created_at": isoformat(user.created_at),
            "rating_count": rating_count,
        }
        for user, rating_count in UserDao().fetchUsersWithRatingCounts(session=session)
    ]


@transactional
def list_ratings(session: Session, limit: int = DEFAULT_PAGE_SIZE, offset: int = 0) -> list[dict]:
    """
    One page of all ratings, newest first.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    limit : int
        Page size, 1 to 1000 (default 100).
    offset : int
        Number of ratings to skip, >= 0.

    Raises
    ------
    ValidationError
        If `limit` or `offset` is out of range.
    """
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
    if offset < 0:
        raise ValidationError("offset must not be negative")

    rows = RatingDao().fetchPage(session=session, limit=limit, offset=offset)
    return [
        {
            "id": rating.id,
            "user_id": rating.user_id,
            "username": username,
            "dialogue_id": rating.dialogue_id,
            "product_title": product_title,
            "ratings": rating.scores(),
            "created_at": isoformat(rating.created_at),
            "dialogue": parse_payload(dialogue_data, rating.dialogue_id),
        }
        for rating, username, product_title, dialogue_data in rows
    ]


@transactional
def list_dialogues(session: Session) -> list[dict]:
    """
    Every dialogue with its rating count and per-metric averages.

    Averages are rounded to 2 decimals and are None for unrated dialogues.
    Ordered by rating count (descending), then newest first.
    """
    return [
        {
            "id": dialogue.id,
            "dialogue_id": dialogue.dialogue_id,
            "product_id": dialogue.product_id,
            "product_title": dialogue.product_title,
            "kind": dialogue.kind,
            "created_at": isoformat(dialogue.created_at),
            "rating_count": rating_count,
            "average_ratings": {metric: _round(value) for metric, value in averages.items()},
        }
        for dialogue, rating_count, averages in DialogueDao().fetchDialoguesWithStats(session=session)
    ]
