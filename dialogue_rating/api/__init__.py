"""
API Package — FastAPI Router • Models • Auth dependencies • JWT Utils
=====================================================================

Mission
-------
This package defines the backend's HTTP interface: FastAPI routing, bearer
token authentication, and request validation for the dialogue rating
workflow.

Contents
--------
- fast_api
    FastAPI router with endpoints for:
      • Auth: register, login, me
      • Dialogues: random unrated dialogue, dialogue by id
      • Ratings: submit (upsert), history, rating by dialogue
      • Admin: stats, users, ratings (paginated), dialogues

- models
    Pydantic data contracts for request validation:
      • UserCredentials, UserData (auth)
      • RatingSubmission (one score field per rating metric)

- dependencies
    • get_current_user — bearer token → claims (401 missing, 403 invalid)
    • require_admin — claims + live admin flag check (403 for non-admins)

- utils
    JWT helpers:
      • create_access_token(payload) — issues signed JWTs with exp
      • user_claims(user) — id, username, email, admin flag
      • verify_token(token) — validates JWTs and extracts the claims

Operational Notes
-----------------
- Errors are raised as `dialogue_rating.exceptions` types and rendered as
  `{"error": "<message>"}` by the app's exception handlers.
"""
