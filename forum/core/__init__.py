"""Core infrastructure package for shared application functionality.

This package provides the foundational components used across all layers
of the forum service:

- **config**: Centralized configuration management with environment support
- **context**: Request context and correlation ID management
- **exceptions**: Closed error taxonomy with error codes and severities
- **error_context**: Sensitive data sanitization for safe logging
- **logging**: Structured logging with Loguru
"""
