"""
Admin account management.

The admin flag is never set through the HTTP API; this script is the only
place that changes it.

Usage
-----
    dialogue-rating-admin create [USERNAME] [EMAIL] [PASSWORD]
    dialogue-rating-admin revoke USERNAME

`create` promotes the user matching USERNAME or EMAIL (and resets its
password), or creates a new admin when there is none. Defaults are
`admin`, `admin@example.com`, `admin123`.
"""

import argparse
import logging
import sys
from typing import Optional

from sqlalchemy.orm import Session

from dialogue_rating.database.config.connection_engine import create_schema
from dialogue_rating.database.core.funcs import validate_password
from dialogue_rating.database.daos.user_dao import UserDao
from dialogue_rating.database.entities.user import User
from dialogue_rating.database.helpers.transactionManagement import transactional
from dialogue_rating.exceptions import NotFound, ValidationError
from dialogue_rating.logging_config import setup_logging

logger = logging.getLogger(__name__)


@transactional
def create_or_promote_admin(session: Session, username: str, email: str, password: str) -> dict:
    """
    Make `username` / `email` an admin with the given password.

    Returns
    -------
    dict
        {'created': bool, 'user': {id, username, email, is_admin}}
    """
    validate_password(password)
    dao = UserDao()
    user = dao.fetchUser(session=session, username=username) or dao.fetchUserByEmail(session=session, email=email)
    if user is None:
        user = dao.createUser(session=session, user_data=User(username=username, email=email, password=password, is_admin=True))
        return {"created": True, "user": user.to_public_dict()}
    dao.updatePassword(session=session, user_id=user.id, password=password)
    dao.updateAdmin(session=session, user_id=user.id, is_admin=True)
    return {"created": False, "user": user.to_public_dict()}


@transactional
def revoke_admin(session: Session, username: str) -> dict:
    """Clear the admin flag of `username`; NotFound if there is no such user."""
    dao = UserDao()
    user = dao.fetchUser(session=session, username=username)
    if user is None:
        raise NotFound(f"No user named {username}")
    dao.updateAdmin(session=session, user_id=user.id, is_admin=False)
    return user.to_public_dict()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dialogue-rating-admin", description="Manage admin accounts.")
    commands = parser.add_subparsers(dest="command", required=True)

    create = commands.add_parser("create", help="create an admin or promote an existing user")
    create.add_argument("username", nargs="?", default="admin")
    create.add_argument("email", nargs="?", default="admin@example.com")
    create.add_argument("password", nargs="?", default="admin123")

    revoke = commands.add_parser("revoke", help="remove the admin flag from a user")
    revoke.add_argument("username")
    return parser


def main(argv: Optional[list] = None) -> int:
    setup_logging()
    args = build_parser().parse_args(argv)
    create_schema()

    if args.command == "create":
        try:
            result = create_or_promote_admin(username=args.username, email=args.email, password=args.password)
        except ValidationError as e:
            logger.error(e.detail)
            return 1
        action = "created" if result["created"] else "updated"
        logger.info("Admin user %s: %s (%s)", action, result["user"]["username"], result["user"]["email"])
        return 0

    try:
        user = revoke_admin(username=args.username)
    except NotFound as e:
        logger.error(e.detail)
        return 1
    logger.info("Admin flag removed from %s", user["username"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
