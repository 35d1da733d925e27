"""Account and session records."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, SecretStr

type AccountId = int


class Credentials(BaseModel):
    """Registration and login payload.

    The password is a SecretStr so it is masked in reprs and never serialized
    back to a client.
    """

    email: str = Field(..., min_length=3, max_length=255, examples=["a@b.com"])
    password: SecretStr = Field(..., min_length=1)


class Account(BaseModel):
    """A stored account. ``password`` holds the encoded hash, never plaintext."""

    model_config = ConfigDict(from_attributes=True)

    id: AccountId | None = None
    email: str
    password: str = Field(..., repr=False)


class Session(BaseModel):
    """A time-bounded identity claim.

    Sessions are never persisted. Their only representation outside a request
    is the sealed token held by the client.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    account_id: AccountId
    not_before: datetime = Field(..., alias="nbf")
    expires_at: datetime = Field(..., alias="exp")

    def is_valid_at(self, now: datetime) -> bool:
        """Whether ``now`` falls inside ``[not_before, expires_at]``."""
        return self.not_before <= now <= self.expires_at
