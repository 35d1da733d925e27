"""Sealed session tokens.

A token is a Fernet token (AES-128-CBC encryption plus HMAC-SHA256
authentication, with the issue time embedded in the authenticated header)
whose plaintext is the JSON form of a :class:`~forum.domain.accounts.Session`.

Decoding checks authenticity first and only then looks at the claims. Every
failure, whatever its cause, surfaces as the same CannotDecryptTokenError so a
client can't tell an expired token from a forged one.
"""

import base64
from datetime import datetime, timedelta

from cryptography.fernet import Fernet, InvalidToken

from forum.core.config import TOKEN_KEY_BYTES, TokenConfig
from forum.core.exceptions import CannotDecryptTokenError
from forum.domain.accounts import AccountId, Session

DEFAULT_VALIDITY = timedelta(hours=24)


class TokenCodec:
    """Issue and decode session tokens under one process-wide key.

    Args:
        secret_key: Raw symmetric key, exactly 32 bytes.
        validity: Lifetime of issued tokens.

    Raises:
        ValueError: If the key has the wrong length.
    """

    def __init__(
        self, secret_key: bytes, validity: timedelta = DEFAULT_VALIDITY
    ) -> None:
        if len(secret_key) != TOKEN_KEY_BYTES:
            msg = f"Token key must be exactly {TOKEN_KEY_BYTES} bytes"
            raise ValueError(msg)
        self._fernet = Fernet(base64.urlsafe_b64encode(secret_key))
        self._validity = validity

    @classmethod
    def from_config(cls, config: TokenConfig) -> "TokenCodec":
        """Build the codec from the token section of the settings."""
        return cls(
            config.secret_key.get_secret_value().encode("utf-8"),
            timedelta(hours=config.validity_hours),
        )

    @property
    def validity(self) -> timedelta:
        """Lifetime of issued tokens."""
        return self._validity

    def issue(self, account_id: AccountId, now: datetime) -> str:
        """Seal a new session for ``account_id`` valid from ``now``.

        Args:
            account_id: The authenticated account.
            now: Timezone-aware issue time.

        Returns:
            str: URL-safe opaque token.
        """
        session = Session(
            account_id=account_id,
            not_before=now,
            expires_at=now + self._validity,
        )
        payload = session.model_dump_json(by_alias=True).encode("utf-8")
        token = self._fernet.encrypt_at_time(payload, int(now.timestamp()))
        return token.decode("ascii")

    def decode(self, token: str, now: datetime) -> Session:
        """Open ``token`` and check that ``now`` is inside its window.

        Args:
            token: Token produced by :meth:`issue`.
            now: Timezone-aware decode time.

        Returns:
            Session: The sealed session.

        Raises:
            CannotDecryptTokenError: On any cryptographic, structural or
                temporal failure.
        """
        try:
            raw = token.encode("ascii")
            # base64 decoding is lenient; only the canonical encoding is accepted
            if base64.urlsafe_b64encode(base64.urlsafe_b64decode(raw)) != raw:
                raise CannotDecryptTokenError()
            payload = self._fernet.decrypt_at_time(
                raw,
                ttl=int(self._validity.total_seconds()),
                current_time=int(now.timestamp()),
            )
            session = Session.model_validate_json(payload)
        except (InvalidToken, ValueError) as e:
            raise CannotDecryptTokenError(cause=e) from e

        if not session.is_valid_at(now):
            raise CannotDecryptTokenError()
        return session
