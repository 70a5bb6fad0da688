"""Password hashing utilities.

Learn: Uses Argon2id (argon2-cffi), a memory-hard algorithm. Each call
to hash() draws a fresh random salt, and the output is a self-describing
PHC string:

    $argon2id$v=19$m=65536,t=3,p=4$<salt>$<digest>

so verify() needs no external parameter lookup — the algorithm, cost
and salt all travel with the hash.

Hashing is CPU- and memory-heavy on purpose. Never call these methods
directly from a coroutine; go through asyncio.to_thread() so other
requests keep moving while a hash is in flight.
"""

from typing import Optional

import argon2
from argon2.exceptions import HashingError, InvalidHashError, VerificationError

# RFC 9106 "low memory" profile, same as argon2-cffi's own defaults
DEFAULT_TIME_COST = 3
DEFAULT_MEMORY_COST = 65536  # KiB
DEFAULT_PARALLELISM = 4


class HashFailureError(Exception):
    """Raised when hashing itself fails (e.g. the entropy source broke).

    This is an internal error, never a validation failure.
    """


class PasswordHasher:
    """Argon2id hash + verify with immutable cost parameters.

    Learn: One instance is built at startup and shared across all
    requests. Apart from a lazily built dummy hash (write-once, and any
    valid hash will do) it holds only configuration, so no locking is
    needed.
    """

    def __init__(
        self,
        time_cost: int = DEFAULT_TIME_COST,
        memory_cost: int = DEFAULT_MEMORY_COST,
        parallelism: int = DEFAULT_PARALLELISM,
    ):
        self._hasher = argon2.PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            type=argon2.Type.ID,
        )
        self._dummy_hash: Optional[str] = None

    def hash(self, password: str) -> str:
        """Hash a password with a new random salt."""
        try:
            return self._hasher.hash(password)
        except HashingError as e:
            raise HashFailureError("password hashing failed") from e
        except UnicodeEncodeError as e:
            # lone surrogates can't be encoded to UTF-8
            raise HashFailureError("password is not encodable") from e

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored PHC string.

        Returns False for a wrong password AND for a malformed hash.
        Callers cannot tell the two apart, which is intentional: it
        would leak the state of the stored account.
        """
        try:
            return self._hasher.verify(password_hash, password)
        except (VerificationError, InvalidHashError):
            return False
        except UnicodeEncodeError:
            # unencodable password or stored hash
            return False

    def verify_dummy(self, password: str) -> None:
        """Spend one verify's worth of work against a throwaway hash.

        Login calls this for unknown emails so that they cost the same
        Argon2 time as a wrong password.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self._hasher.hash("dummy-password-0")
        self.verify(password, self._dummy_hash)
