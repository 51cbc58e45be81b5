import bcrypt

from dialogue_rating.database.config.config import settings

MAX_PASSWORD_BYTES = 72
"""Longest password bcrypt accepts; `hashpw` raises ValueError beyond it."""


class EncryptionDec:
    """
    Utility class for password hashing and verification.

    Methods
    -------
    hash_password(text: str) -> str
        Hashes a plaintext password using bcrypt with a generated salt.
    check_passwords(plain_text: str, passwd: str) -> bool
        Verifies a plaintext password against a hashed password.
    """

    def __init__(self, rounds: int | None = None):
        """
        Initialize the EncryptionDec utility.

        Parameters
        ----------
        rounds : int, optional
            bcrypt cost factor. Defaults to `settings.BCRYPT_ROUNDS`.
        """
        self.rounds = rounds or settings.BCRYPT_ROUNDS

    def hash_password(self, text: str) -> str:
        """
        Hash a plaintext password using bcrypt.

        Parameters
        ----------
        text : str
            The plaintext password.

        Returns
        -------
        str
            The bcrypt-hashed password (UTF-8 decoded).
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(text.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def check_passwords(self, plain_text: str, passwd: str) -> bool:
        """
        Verify if a plaintext password matches a hashed password.

        A stored value that is not a bcrypt hash never matches.

        Parameters
        ----------
        plain_text : str
            The plaintext password to check.
        passwd : str
            The previously hashed password to verify against.

        Returns
        -------
        bool
            True if the password matches, False otherwise.
        """
        try:
            return bcrypt.checkpw(plain_text.encode("utf-8"), passwd.encode("utf-8"))
        except ValueError:
            return False
