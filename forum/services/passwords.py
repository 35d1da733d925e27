"""Password hashing with Argon2id.

Every hash draws a fresh random salt, so hashing the same password twice never
yields the same string. The encoded hash is self-describing (PHC format): the
algorithm, version, cost parameters and salt are stored alongside the digest,
which is all ``verify`` needs.
"""

from argon2 import PasswordHasher, Parameters, profiles
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from loguru import logger

from forum.core.exceptions import CredentialLibraryError

# Fixed, versioned parameter set: Argon2id, t=3, m=64 MiB, p=4, 16-byte salt
DEFAULT_PARAMETERS: Parameters = profiles.RFC_9106_LOW_MEMORY


class PasswordService:
    """Hash and verify account passwords.

    Args:
        parameters: Argon2 cost parameters used for new hashes. Verification
            always uses the parameters embedded in the stored hash.
    """

    def __init__(self, parameters: Parameters = DEFAULT_PARAMETERS) -> None:
        self._hasher = PasswordHasher.from_parameters(parameters)

    def hash(self, secret: bytes) -> str:
        """Derive an encoded, salted hash of ``secret``."""
        return self._hasher.hash(secret)

    def verify(self, stored: str, secret: bytes) -> bool:
        """Check ``secret`` against a stored hash in constant time.

        Args:
            stored: Encoded hash produced by :meth:`hash`.
            secret: Plaintext password bytes.

        Returns:
            bool: True on match, False on mismatch.

        Raises:
            CredentialLibraryError: If ``stored`` is not a valid encoded hash.
        """
        try:
            return self._hasher.verify(stored, secret)
        except VerifyMismatchError:
            return False
        except (InvalidHashError, VerificationError) as e:
            logger.warning(
                "Stored password hash could not be verified: {}", type(e).__name__
            )
            raise CredentialLibraryError(cause=e) from e
