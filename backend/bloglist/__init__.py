"""
Blog List Backend — Application Package Initializer
====================================================

What: Marks the `bloglist` directory as a Python package.
Why:  Enables module imports like `from bloglist.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    This backend follows a clean layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Business Logic + Auth)  │  ← Ownership, tokens, validation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch the ORM directly and services never see a Request.
    The authenticated user travels as an explicit argument, never as
    module-level state.
"""

__version__ = "1.0.0"
