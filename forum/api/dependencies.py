"""Request-scoped dependencies shared by the route modules.

Long-lived collaborators (token codec, password service, moderation client)
are created once by the application factory and kept on ``app.state``; the
getters below hand them to handlers so tests can swap any of them through
``app.dependency_overrides``.

``get_session`` is the guard of every protected route. It runs before the
handler body, so a rejected request never reaches moderation or persistence.
"""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import Depends, Header, Request
from loguru import logger

from forum.api.constants import BEARER_SCHEME
from forum.core.exceptions import CannotDecryptTokenError, UnauthorizedError
from forum.domain.accounts import Session
from forum.infrastructure.moderation import ModerationClient
from forum.services.moderation import ContentChecker
from forum.services.passwords import PasswordService
from forum.services.tokens import TokenCodec


def get_now() -> datetime:
    """Current UTC time."""
    return datetime.now(UTC)


def get_token_codec(request: Request) -> TokenCodec:
    """Token codec created at startup."""
    codec: TokenCodec = request.app.state.token_codec
    return codec


def get_password_service(request: Request) -> PasswordService:
    """Password service created at startup."""
    service: PasswordService = request.app.state.password_service
    return service


def get_moderation_client(request: Request) -> ContentChecker:
    """Moderation client created at startup."""
    client: ModerationClient = request.app.state.moderation_client
    return client


Now = Annotated[datetime, Depends(get_now)]
Codec = Annotated[TokenCodec, Depends(get_token_codec)]
Passwords = Annotated[PasswordService, Depends(get_password_service)]
Moderation = Annotated[ContentChecker, Depends(get_moderation_client)]


async def get_session(
    codec: Codec,
    now: Now,
    authorization: Annotated[str | None, Header()] = None,
) -> Session:
    """Resolve the caller's session from the ``Authorization`` header.

    The header carries the raw token, optionally prefixed with the
    ``Bearer`` scheme in any letter case.

    Args:
        codec: Token codec.
        now: Current time.
        authorization: Raw header value.

    Returns:
        Session: The decoded session.

    Raises:
        UnauthorizedError: If the header is missing or the token doesn't
            decode at ``now``.
    """
    if not authorization:
        raise UnauthorizedError()

    token = authorization.strip()
    scheme, _, credentials = token.partition(" ")
    # Auth schemes are case-insensitive
    if scheme.lower() == BEARER_SCHEME:
        token = credentials.strip()
    try:
        session = codec.decode(token, now)
    except CannotDecryptTokenError as e:
        raise UnauthorizedError() from e

    logger.debug("Session accepted", account_id=session.account_id)
    return session


AuthenticatedSession = Annotated[Session, Depends(get_session)]
