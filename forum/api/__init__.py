"""HTTP API layer built with FastAPI.

Key components:
- **main**: Application factory and lifecycle management
- **dependencies**: Request-scoped dependencies, including the session guard
- **routes**: Question, answer and authentication endpoints
- **middleware**: Cross-cutting request concerns
  - Request context with correlation ID tracking
  - Structured request logging with timing
  - CORS policy enforcement
  - Centralized error classification with consistent responses
- **schemas**: Pydantic models for the error envelope
- **utils**: High-performance JSON serialization with orjson

The API layer is the application's HTTP boundary: every internal error kind is
converted here into exactly one status code and one log event.
"""
