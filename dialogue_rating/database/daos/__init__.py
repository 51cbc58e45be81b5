"""
DAOs Package — Data Access Layer (SQLAlchemy 2.0)
=================================================

The `daos` package provides the Data Access Layer for the application: one
repository class per entity, each taking an explicit SQLAlchemy `Session`.
Service functions in `dialogue_rating.database.core` compose them; the API
layer never touches them directly.

Conventions
-----------
- SQLAlchemy 2.0 `select(...)` queries
- Session lifecycle (open/commit/rollback) is handled by callers
- DAOs surface exceptions so upper layers decide error policy

Contents
--------
- UserDao
    * Creates users with password hashing
    * Fetches users by id, username, email, or username-or-email
    * Updates the admin flag and password
    * Counts users and their ratings

- DialogueDao
    * Insert-if-absent by external `dialogue_id`
    * Lookup by external id and random unrated pick per user
    * Per-dialogue rating counts and averages

- RatingDao
    * Native upsert keyed by `(user_id, dialogue_id)`
    * Single rating lookup, user history, paginated listing
    * Metric averages and per-day counts
"""
