"""Registration and login.

Argon2 hashing and verification run in the threadpool, off the event loop.
"""

from fastapi import APIRouter
from loguru import logger
from starlette.concurrency import run_in_threadpool

from forum.api.dependencies import Codec, Now, Passwords
from forum.core.exceptions import DatabaseQueryError, WrongPasswordError
from forum.domain.accounts import Account, Credentials
from forum.infrastructure.store import Store

router = APIRouter(tags=["authentication"])


@router.post("/registration")
async def register(
    credentials: Credentials, passwords: Passwords, store: Store
) -> dict[str, str]:
    """Create an account with a freshly salted password hash."""
    secret = credentials.password.get_secret_value().encode("utf-8")
    stored_hash = await run_in_threadpool(passwords.hash, secret)

    account = await store.add_account(
        Account(email=credentials.email, password=stored_hash)
    )
    logger.info("Account registered", account_id=account.id)
    return {"message": "Account added"}


@router.post("/login")
async def login(
    credentials: Credentials,
    passwords: Passwords,
    codec: Codec,
    now: Now,
    store: Store,
) -> str:
    """Check the credentials and answer with a session token.

    Raises:
        WrongPasswordError: If the password doesn't match or no account has
            this e-mail.
        CredentialLibraryError: If the stored hash is malformed.
        DatabaseQueryError: If the lookup itself failed.
    """
    try:
        account = await store.get_account(credentials.email)
    except DatabaseQueryError as e:
        # A missing row carries no cause, a failed query does
        if e.cause is not None:
            raise
        logger.debug("Login for unknown e-mail")
        raise WrongPasswordError() from e
    if account.id is None:
        raise DatabaseQueryError()

    secret = credentials.password.get_secret_value().encode("utf-8")
    verified = await run_in_threadpool(passwords.verify, account.password, secret)
    if not verified:
        raise WrongPasswordError()

    logger.info("Account logged in", account_id=account.id)
    return codec.issue(account.id, now)
