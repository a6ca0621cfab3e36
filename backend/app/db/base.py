"""SQLAlchemy Declarative Base: shared base class for the ORM models.

Invariants:
    - All models inherit from Base
    - Base.metadata is what TodoStore.init() and alembic create tables from
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all todo-backend ORM models."""
    pass
