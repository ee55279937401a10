"""
MangaBot Backend - Application Package Initializer
===================================================

What: Marks the `mangabot` directory as a Python package.
Who:  Imported by uvicorn, Alembic and pytest (`from mangabot.config import settings`).

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │     Routes (API Layer, auth guard)  │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (manga, préstamo)        │  ← One query per operation
    ├─────────────────────────────────────┤
    │    Models & Schemas (Data)          │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │     Database (Persistence)          │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Manga and préstamo are two parallel vertical slices; they share nothing
    but the database session.
"""

__version__ = "1.0.0"
