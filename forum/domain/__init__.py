"""Domain records exchanged between the API, services and the store.

- **accounts**: Accounts, login credentials and sessions
- **questions**: Questions, answers and pagination
"""
