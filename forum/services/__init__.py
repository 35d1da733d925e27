"""Application services implementing the trust and resilience rules.

- **passwords**: Salted Argon2id hashing and verification
- **tokens**: Sealed, time-bounded session tokens
- **moderation**: Concurrent moderation of two text fields
"""
