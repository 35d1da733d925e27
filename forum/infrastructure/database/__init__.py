"""Database infrastructure with async PostgreSQL and repository pattern.

Core components:
- **base**: Declarative base and common model fields
- **models**: Account, question and answer tables
- **session**: Async engine, session lifecycle and schema creation
- **repository**: Generic repository with CRUD operations
- **dependencies**: FastAPI dependency injection helpers
"""

from forum.infrastructure.database.base import Base, BaseModel
from forum.infrastructure.database.dependencies import DatabaseSession, get_db
from forum.infrastructure.database.models import (
    AccountModel,
    AnswerModel,
    QuestionModel,
)
from forum.infrastructure.database.repository import BaseRepository
from forum.infrastructure.database.session import (
    check_database_connection,
    close_database,
    create_database_engine,
    create_tables,
    get_async_session,
    get_engine,
    get_session_factory,
)

__all__ = [
    "AccountModel",
    "AnswerModel",
    "Base",
    "BaseModel",
    "BaseRepository",
    "DatabaseSession",
    "QuestionModel",
    "check_database_connection",
    "close_database",
    "create_database_engine",
    "create_tables",
    "get_async_session",
    "get_db",
    "get_engine",
    "get_session_factory",
]
