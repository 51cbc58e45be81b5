"""
Service-layer operations for authentication, dialogues, and ratings.

All public functions are wrapped with the `@transactional` decorator, which
manages SQLAlchemy sessions and transactions automatically. Each function
accepts (and uses) an injected `session: Session` provided by the decorator,
so callers pass every other argument by keyword.

This module orchestrates DAO calls and raises the errors of
`dialogue_rating.exceptions`; the HTTP layer lets them propagate.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dialogue_rating.api.utils import create_access_token, user_claims
from dialogue_rating.crypt.encrypt_decrypt import MAX_PASSWORD_BYTES, EncryptionDec
from dialogue_rating.database.daos.dialogue_dao import DialogueDao
from dialogue_rating.database.daos.rating_dao import RatingDao
from dialogue_rating.database.daos.user_dao import UserDao
from dialogue_rating.database.entities.dialogue import Dialogue, parse_payload
from dialogue_rating.database.entities.rating import MAX_SCORE, MIN_SCORE, RATING_METRICS
from dialogue_rating.database.entities.user import User
from dialogue_rating.database.helpers.transactionManagement import transactional
from dialogue_rating.exceptions import (
    ConflictError,
    Forbidden,
    InvalidCredentials,
    NotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)

ALL_RATED_MESSAGE = "All dialogues have been rated"


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def isoformat(value: Optional[datetime]) -> Optional[str]:
    """ISO 8601 with an explicit offset. SQLite reads timestamps back naive; they are stored in UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def validate_password(password: str) -> None:
    """bcrypt only hashes the first 72 bytes of a password; longer ones are refused."""
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


def _session_response(user: User) -> dict:
    return {
        "token": create_access_token(user_claims(user)),
        "user": user.to_public_dict(),
    }


# -------------------------------------------------------------------------
# Auth
# -------------------------------------------------------------------------

@transactional
def register_user(session: Session, username: str, email: str, password: str) -> dict:
    """
    Create a non-admin user and open a session for it.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    username : str
        Desired username (must be unique).
    email : str
        Email address (must be unique).
    password : str
        Plaintext password, hashed at DAO level.

    Returns
    -------
    dict
        {'token': <jwt>, 'user': {id, username, email, is_admin}}

    Raises
    ------
    ValidationError
        If any field is empty or the password is longer than 72 bytes.
    ConflictError
        If the username or the email is already registered.
    """
    if _is_blank(username) or _is_blank(email) or _is_blank(password):
        raise ValidationError("All fields are required")
    validate_password(password)

    user_dao = UserDao()
    if user_dao.fetchUser(session=session, username=username) is not None:
        raise ConflictError("Username or email already exists")
    if user_dao.fetchUserByEmail(session=session, email=email) is not None:
        raise ConflictError("Username or email already exists")

    try:
        user = user_dao.createUser(session=session, user_data=User(username=username, email=email, password=password))
    except IntegrityError:
        # lost a race against a concurrent registration
        raise ConflictError("Username or email already exists")

    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return _session_response(user)


@transactional
def login_user(session: Session, login: str, password: str) -> dict:
    """
    Authenticate by username or email and open a session.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    login : str
        Username or email; matched against both columns.
    password : str
        Plaintext password to verify.

    Returns
    -------
    dict
        {'token': <jwt>, 'user': {id, username, email, is_admin}}

    Raises
    ------
    ValidationError
        If either field is empty.
    InvalidCredentials
        If no user matches or the password is wrong. Both cases share one
        message so the response does not reveal which usernames exist.
    """
    if _is_blank(login) or _is_blank(password):
        raise ValidationError("Username and password are required")

    user = UserDao().fetchUserByLogin(session=session, login=login)
    if user is None or not EncryptionDec().check_passwords(password, user.password):
        logger.info("Failed login attempt for %r", login)
        raise InvalidCredentials()
    return _session_response(user)


@transactional
def fetch_admin_user(session: Session, user_id: int) -> dict:
    """
    Re-read a user's admin flag from the database.

    The flag embedded in the token is not trusted here: a token issued
    before a promotion is accepted, one issued before a revocation is not.

    Raises
    ------
    Forbidden
        If the user no longer exists or is not an admin.
    """
    user = UserDao().fetchUserById(session=session, user_id=user_id)
    if user is None or not user.is_admin:
        raise Forbidden("Admin access required")
    return user.to_public_dict()


# -------------------------------------------------------------------------
# Dialogues
# -------------------------------------------------------------------------

def dialogue_response(dialogue: Dialogue) -> dict:
    """The stored payload merged with the storage and external ids."""
    payload = dialogue.payload
    body = dict(payload) if isinstance(payload, dict) else {}
    body.update({"db_id": dialogue.id, "dialogue_id": dialogue.dialogue_id, "all_rated": False})
    return body


@transactional
def next_dialogue_for(session: Session, user_id: int) -> dict:
    """
    Pick a random dialogue the user has not rated yet.

    Returns
    -------
    dict
        The dialogue payload plus `db_id`, `dialogue_id` and `all_rated=False`;
        or `{'all_rated': True, 'dialogue': None, 'message': ...}` once the
        user has rated every dialogue. Rated dialogues are never re-served.
    """
    dialogue = DialogueDao().fetchRandomUnrated(session=session, user_id=user_id)
    if dialogue is None:
        return {"all_rated": True, "dialogue": None, "message": ALL_RATED_MESSAGE}
    return dialogue_response(dialogue)


@transactional
def get_dialogue(session: Session, dialogue_id: str) -> dict:
    """
    Fetch one dialogue by external id.

    Raises
    ------
    NotFound
        If no dialogue has that id.
    """
    dialogue = DialogueDao().fetchByDialogueId(session=session, dialogue_id=dialogue_id)
    if dialogue is None:
        raise NotFound("Dialogue not found")
    return dialogue_response(dialogue)


# -------------------------------------------------------------------------
# Ratings
# -------------------------------------------------------------------------

def validate_scores(scores: dict) -> dict:
    """
    Check every provided metric score and return the canonical metric mapping.

    Missing metrics map to None. Keys that are not metrics are dropped.

    Raises
    ------
    ValidationError
        If a provided score is not an integer between 1 and 5.
    """
    clean = {}
    for metric in RATING_METRICS:
        value = scores.get(metric)
        if value is not None:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"{metric} must be an integer between {MIN_SCORE} and {MAX_SCORE}")
            if not MIN_SCORE <= value <= MAX_SCORE:
                raise ValidationError(f"{metric} must be between {MIN_SCORE} and {MAX_SCORE}")
        clean[metric] = value
    return clean


@transactional
def submit_rating(session: Session, user_id: int, dialogue_id: str, scores: dict) -> int:
    """
    Record the user's rating of a dialogue, replacing any earlier one.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    user_id : int
        Author of the rating.
    dialogue_id : str
        External id of the rated dialogue.
    scores : dict
        Metric name → score (1-5). Omitted metrics are stored as null.

    Returns
    -------
    int
        Storage id of the rating row.

    Raises
    ------
    ValidationError
        If `dialogue_id` is missing or a score is out of range; nothing is written.
    """
    if _is_blank(dialogue_id):
        raise ValidationError("Dialogue ID is required")
    clean = validate_scores(scores)
    rating_id = RatingDao().upsertRating(session=session, user_id=user_id, dialogue_id=dialogue_id, scores=clean)
    logger.info("User %s rated %s (rating id %s)", user_id, dialogue_id, rating_id)
    return rating_id


@transactional
def history_for(session: Session, user_id: int) -> list[dict]:
    """
    Every rating of the user with the rated dialogue, newest first.

    Returns
    -------
    list[dict]
        {id, dialogue_id, product_title, ratings, created_at, dialogue}; the
        `dialogue` payload is None when it is missing or malformed.
    """
    rows = RatingDao().fetchHistory(session=session, user_id=user_id)
    return [
        {
            "id": rating.id,
            "dialogue_id": rating.dialogue_id,
            "product_title": product_title,
            "ratings": rating.scores(),
            "created_at": isoformat(rating.created_at),
            "dialogue": parse_payload(dialogue_data, rating.dialogue_id),
        }
        for rating, product_title, dialogue_data in rows
    ]


@transactional
def rating_for(session: Session, user_id: int, dialogue_id: str) -> dict:
    """
    The user's rating of one dialogue.

    Raises
    ------
    NotFound
        If the user has not rated that dialogue.
    """
    rating = RatingDao().fetchRating(session=session, user_id=user_id, dialogue_id=dialogue_id)
    if rating is None:
        raise NotFound("Rating not found")
    return {
        "dialogue_id": rating.dialogue_id,
        "ratings": rating.scores(),
        "created_at": isoformat(rating.created_at),
    }
