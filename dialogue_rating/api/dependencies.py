"""
Authentication dependencies for the API router.

- `get_current_user`: reads the bearer token from the `Authorization`
  header. Missing → 401, invalid/expired/malformed → 403. Returns the token
  claims `{id, username, email, is_admin}`.
- `require_admin`: `get_current_user`, then the admin flag is re-read from
  the database; a non-admin (or deleted) user gets 403.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from dialogue_rating.api.utils import verify_token
from dialogue_rating.database.core.funcs import fetch_admin_user
from dialogue_rating.exceptions import Forbidden, Unauthorized

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> dict:
    if credentials is None or not credentials.credentials:
        raise Unauthorized()
    claims = verify_token(credentials.credentials)
    if claims is None:
        raise Forbidden()
    return claims


def require_admin(user: dict = Depends(get_current_user)) -> dict:
    return fetch_admin_user(user_id=user["id"])
