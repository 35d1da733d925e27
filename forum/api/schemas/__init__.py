"""Pydantic schema models for API responses.

- **errors**: The standard error envelope returned for every failure
"""
