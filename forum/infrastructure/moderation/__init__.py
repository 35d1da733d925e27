"""Outbound integration with the bad words filtering API."""

from forum.infrastructure.moderation.client import ModerationClient
from forum.infrastructure.moderation.retry import (
    BackoffPolicy,
    RetriesExhaustedError,
    RetryTransport,
)

__all__ = [
    "BackoffPolicy",
    "ModerationClient",
    "RetriesExhaustedError",
    "RetryTransport",
]
