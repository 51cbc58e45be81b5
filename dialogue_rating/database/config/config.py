"""
Configuration — Pydantic v2 Settings (env / .env)
=================================================

Purpose
-------
Centralized, strongly-typed application configuration using:
- Pydantic v2 `BaseSettings` for environment-driven values
- `pydantic-settings` v2 for `.env` loading and model config

Load Order & Behavior
---------------------
- Values are read from the environment; if not present, `.env` is used.
- Every field has a development default so the service boots with an empty
  environment (SQLite file next to the working directory).
- `extra="ignore"`: unknown env vars are ignored (not an error).

Usage
-----
from dialogue_rating.database.config.config import settings

# Example
secret = settings.SECRET_KEY
dialogues_dir = settings.DIALOGUES_DIR

Security
--------
- Override `SECRET_KEY` in every deployed environment.
- Never commit secrets or the `.env` file to source control.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables
    or a `.env` file. Provides strongly typed access to environment values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    HOST: str = Field("0.0.0.0", description="Interface the HTTP server binds to.")
    PORT: int = Field(5001, description="Port the HTTP server listens on.")
    FRONTEND_URL: str = Field("*", description="Allowed CORS origin of the rating frontend.")
    API_PREFIX: str = Field("/api", description="Path prefix under which the API router is mounted.")
    LOG_LEVEL: str = Field("INFO", description="Root log level (DEBUG, INFO, WARNING, ...).")

    SECRET_KEY: str = Field(
        "your-secret-key-change-in-production",
        description="Secret key used to sign session tokens.",
    )
    ALGORITHM: str = Field("HS256", description="JWT signing algorithm.")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        7 * 24 * 60, description="Duration (in minutes) before session tokens expire."
    )
    BCRYPT_ROUNDS: int = Field(10, description="bcrypt cost factor used when hashing passwords.")

    DB_DRIVER_NAME: str = Field("sqlite", description="Database driver (e.g., `sqlite`, `postgresql`).")
    DB_DATABASE_NAME: str = Field("database.sqlite", description="Database name, or file path for SQLite.")
    DB_USERNAME: Optional[str] = Field(None, description="Database username credential.")
    DB_PASSWORD: Optional[str] = Field(None, description="Database password credential.")
    DB_HOST: Optional[str] = Field(None, description="Hostname or IP address of the database server.")
    DB_PORT: Optional[int] = Field(None, description="Port of the database server.")

    DIALOGUES_DIR: str = Field(
        "llm_generated_dialogues",
        description="Directory holding one generated dialogue per JSON file.",
    )
    DIALOGUES_MANIFEST: str = Field(
        "llm_generated_dialogues.json",
        description="Aggregate file inside DIALOGUES_DIR that is not a dialogue.",
    )


settings = Settings()
"""Defines a Settings object that contains the contents of the environment / .env file"""
