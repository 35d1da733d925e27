"""Forum - question and answer API with moderated content.

The service exposes a small questions/answers API built with FastAPI on top of
an async PostgreSQL store. Every user-submitted text passes through an external
profanity filter before it is persisted, and writes require a session token
issued at login.

Architecture Overview:
- **API Layer**: FastAPI routes, request guards and middleware
- **Core Layer**: Configuration, logging, request context and error taxonomy
- **Domain Layer**: Accounts, sessions, questions, answers and pagination
- **Services Layer**: Password hashing, session tokens and field moderation
- **Infrastructure Layer**: Persistence and the moderation service client
"""
