"""FastAPI middleware package for cross-cutting request/response concerns.

- **RequestContextMiddleware**: Manages correlation IDs and request context
- **RequestLoggingMiddleware**: Structured logging with performance tracking
- **CORSPolicyMiddleware**: Cross-origin policy with logged 403 rejections
- **error_handler**: Centralized exception handling with consistent responses

Middleware are executed in a specific order to ensure proper request processing:
1. Request context (sets up correlation IDs)
2. Request logging (logs with correlation context)
3. CORS policy (answers preflights, rejections carry the request IDs)
4. Error handling (catches and formats all exceptions)
"""
