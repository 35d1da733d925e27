"""API-related constants."""

# HTTP Status Codes
HTTP_401_UNAUTHORIZED = 401
HTTP_403_FORBIDDEN = 403
HTTP_404_NOT_FOUND = 404
HTTP_416_RANGE_NOT_SATISFIABLE = 416
HTTP_422_UNPROCESSABLE_CONTENT = 422
HTTP_500_INTERNAL_SERVER_ERROR = 500

# Starlette answers a disallowed preflight with this status
CORS_PREFLIGHT_REJECTED_STATUS = 400

# HTTP Headers
CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"
BEARER_SCHEME = "bearer"

# Messages
ROUTE_NOT_FOUND_MESSAGE = "Route not found"
USER_AGENT_MAX_LENGTH = 200
