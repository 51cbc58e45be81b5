"""
JWT utilities for issuing and verifying session tokens.

Functions
---------
create_access_token(data: dict) -> str
    Creates a signed JWT access token with an expiration (`exp`) claim.
user_claims(user) -> dict
    Builds the claim set embedded in every session token.
verify_token(token: str) -> dict | None
    Verify a JWT's signature & expiration and return its claims if valid.

Environment contract (from `settings`)
--------------------------------------
SECRET_KEY : str
    HMAC signing key for JWTs.
ALGORITHM : str
    JWT signing algorithm (e.g., "HS256").
ACCESS_TOKEN_EXPIRE_MINUTES : int
    Token lifetime window in minutes (7 days by default).
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from jose import jwt, JWTError
from dialogue_rating.database.config.config import settings

logger = logging.getLogger(__name__)

CLAIM_KEYS = ("id", "username", "email", "is_admin")


def create_access_token(data: dict, expires_in_minutes: int | None = None) -> str:
    """
    Create a signed JWT access token.

    Parameters
    ----------
    data : dict
        Claims to embed in the token.
    expires_in_minutes : int, optional
        Lifetime override; defaults to ACCESS_TOKEN_EXPIRE_MINUTES.

    Returns
    -------
    str
        Encoded JWT string.

    Notes
    ----------
    - Adds `exp` (expiration) and `iat` (issued at) claims.
    - Uses `settings.SECRET_KEY` and `settings.ALGORITHM` for signing.
    """
    if expires_in_minutes is None:
        expires_in_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES
    encoding = data.copy()
    now = int(datetime.now(timezone.utc).timestamp())
    # exp is a NumericDate (seconds since epoch)
    encoding.update({"iat": now, "exp": now + int(expires_in_minutes) * 60})
    return jwt.encode(encoding, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def user_claims(user) -> dict:
    """
    Claims identifying `user`: id, username, email and the admin flag at issuance.

    `sub` carries the id as a string (RFC 7519 StringOrURI).
    """
    return {
        "sub": str(user.id),
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "is_admin": bool(user.is_admin),
    }


def verify_token(token: str) -> Optional[dict]:
    """
    Verify a JWT and return its claims.

    Parameters
    ----------
    token : str
        Encoded JWT string from the Authorization header.

    Returns
    ----------
    dict | None
        `{id, username, email, is_admin}` if the token is valid, otherwise None.

    Notes
    ----------
    - Decodes and validates the signature and expiration using SECRET_KEY/ALGORITHM.
    - On any JWTError (invalid signature, expired, malformed) or a missing
      claim, returns None.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info("Rejected token: %s", e)
        return None
    if any(key not in payload for key in CLAIM_KEYS):
        logger.info("Rejected token: missing claims")
        return None
    return {key: payload[key] for key in CLAIM_KEYS}
