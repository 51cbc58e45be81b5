"""
Entities Package — SQLAlchemy 2.0 ORM Models
============================================

The `entities` package defines the ORM models of the application, mapping
database tables to Python classes using SQLAlchemy 2.0-typed mappings.
These classes are consumed by the DAOs (`daos` package).

Conventions
-----------
- Integer autoincrement primary keys
- Timezone-aware timestamps (UTC), set by the application
- SQLAlchemy 2.0 style `Mapped[...]` + `mapped_column(...)`

Contents
--------
- User
    A registered rater: unique username and email, bcrypt hash, admin flag.

- Dialogue
    A generated dialogue loaded from a JSON file at startup.
    * `dialogue_id` (unique, `dialogue_<product_id>`) is the external identifier
    * `dialogue_data` keeps the source JSON verbatim
    * immutable after load

- Rating
    One user's scores for one dialogue.
    * `user_id` (FK → users.id), `dialogue_id` (by value)
    * one 1-5 column per metric of `RATING_METRICS`
    * unique `(user_id, dialogue_id)`
"""
