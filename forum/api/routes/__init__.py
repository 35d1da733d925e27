"""HTTP routes of the forum API."""

from forum.api.routes import answers, authentication, questions

__all__ = ["answers", "authentication", "questions"]
