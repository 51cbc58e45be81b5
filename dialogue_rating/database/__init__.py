"""
The `database` package is responsible for all interactions with the application's database.
It provides configuration, entity definitions, data access objects, service
functions and the startup loader.

Contents:
    - config:
        Settings and the SQLAlchemy engine, metadata and declarative base.

    - entities:
        SQLAlchemy entity models for users, dialogues and ratings.

    - daos:
        Data Access Objects (one per entity) used as the repositories of the
        service layer.

    - core:
        Service functions called by the API routers: authentication, dialogue
        selection, rating submission, admin reporting, and the dialogue
        bootstrap.

    - helpers:
        Transaction management and dialect-specific insert constructs.
"""
