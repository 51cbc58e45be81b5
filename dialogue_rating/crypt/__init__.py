"""
The `crypt` package holds the password hashing helpers.

Contents
--------
- encrypt_decrypt
    `EncryptionDec`: bcrypt hashing with the configured cost factor and
    password verification.
"""
