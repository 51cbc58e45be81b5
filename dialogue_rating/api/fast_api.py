"""
FastAPI Router — Auth • Dialogues • Ratings • Admin reporting
=============================================================

Purpose
-------
Defines the HTTP API for:
- Authentication: register, login, current user
- Dialogues: random unrated dialogue, dialogue by id
- Ratings: submit (upsert), history, rating by dialogue
- Admin reporting: stats, users, ratings, dialogues

Key Notes
---------
- Input validation via Pydantic models in `dialogue_rating.api.models`.
- Auth: bearer token in the `Authorization` header (see `api.dependencies`).
- Service functions raise the errors of `dialogue_rating.exceptions`; they
  propagate unchanged and are rendered as `{"error": ...}` by `main`.
- Handlers stay plain `def`: they call bcrypt and the database synchronously
  and run in FastAPI's threadpool.
"""

from fastapi import APIRouter, Depends

from dialogue_rating.api.dependencies import get_current_user, require_admin
from dialogue_rating.api.models import RatingSubmission, UserCredentials, UserData
from dialogue_rating.database.core.funcs import (
    get_dialogue,
    history_for,
    login_user,
    next_dialogue_for,
    rating_for,
    register_user,
    submit_rating,
)
from dialogue_rating.database.core.reporting import (
    DEFAULT_PAGE_SIZE,
    get_stats,
    list_dialogues,
    list_ratings,
    list_users,
)

router = APIRouter()
"""Creates the FastAPI router in which we define its routes"""


@router.post('/register')
def register(data: UserData):
    """Register a new (non-admin) user and return a session.

    Request body:
        UserData {username, email, password}

    Response:
        200: {'token': <jwt>, 'user': {id, username, email, is_admin}}
        400: missing field, or username/email already taken
    """
    return register_user(username=data.username, email=data.email, password=data.password)


@router.post('/login')
def login(data: UserCredentials):
    """Authenticate by username or email.

    Response:
        200: {'token': <jwt>, 'user': {...}}
        400: missing field
        401: invalid credentials
    """
    return login_user(login=data.login, password=data.password)


@router.get('/me')
def me(user: dict = Depends(get_current_user)):
    """Return the claims of the presented token."""
    return user


@router.get('/dialogue/random')
def random_dialogue(user: dict = Depends(get_current_user)):
    """A random dialogue the caller has not rated, or `{'all_rated': true, 'dialogue': null}`."""
    return next_dialogue_for(user_id=user["id"])


@router.get('/dialogue/{dialogue_id}')
def dialogue_by_id(dialogue_id: str, user: dict = Depends(get_current_user)):
    """Dialogue payload with `db_id` and `dialogue_id`; 404 if absent."""
    return get_dialogue(dialogue_id=dialogue_id)


@router.post('/rating')
def rate_dialogue(data: RatingSubmission, user: dict = Depends(get_current_user)):
    """Create or replace the caller's rating of a dialogue.

    Response:
        200: {'message': 'Rating saved successfully', 'rating_id': <int>}
        400: missing dialogue_id or a score outside 1-5
    """
    rating_id = submit_rating(user_id=user["id"], dialogue_id=data.dialogue_id, scores=data.scores())
    return {"message": "Rating saved successfully", "rating_id": rating_id}


@router.get('/ratings/history')
def rating_history(user: dict = Depends(get_current_user)):
    """All of the caller's ratings with their dialogues, newest first."""
    return history_for(user_id=user["id"])


@router.get('/ratings/{dialogue_id}')
def rating_by_dialogue(dialogue_id: str, user: dict = Depends(get_current_user)):
    """The caller's rating of one dialogue; 404 if not rated yet."""
    return rating_for(user_id=user["id"], dialogue_id=dialogue_id)


# -----------------------
# Admin
# -----------------------

@router.get('/admin/stats')
def admin_stats(admin: dict = Depends(require_admin)):
    return get_stats()


@router.get('/admin/users')
def admin_users(admin: dict = Depends(require_admin)):
    return list_users()


@router.get('/admin/ratings')
def admin_ratings(limit: int = DEFAULT_PAGE_SIZE, offset: int = 0, admin: dict = Depends(require_admin)):
    """Paginated ratings of every user (`limit` 1-1000, default 100)."""
    return list_ratings(limit=limit, offset=offset)


@router.get('/admin/dialogues')
def admin_dialogues(admin: dict = Depends(require_admin)):
    return list_dialogues()
