"""Infrastructure layer for data persistence and external services.

Key responsibilities:
- **Database access**: Async PostgreSQL with SQLAlchemy 2.0+
- **Repository pattern**: Generic CRUD operations for all entities
- **Store facade**: Persistence operations used by the API routes
- **Moderation service**: Retrying HTTP client for the profanity filter
"""
