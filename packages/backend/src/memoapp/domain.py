"""Domain records shared by the stores, services, and API layer.

Learn: These are plain frozen dataclasses, not ORM rows. Both store
backends (SQL and in-memory) hand these back, so the services never
see which backend produced them.
"""

import time
from dataclasses import dataclass


def epoch_now() -> int:
    """Current wall-clock time in whole seconds since the epoch."""
    return int(time.time())


@dataclass(frozen=True)
class Account:
    """A registered user.

    password_hash is an Argon2id PHC string ("$argon2id$v=19$m=...").
    created_at is assigned by the store, in epoch seconds.
    """

    id: int
    email: str
    password_hash: str
    created_at: int


@dataclass(frozen=True)
class Note:
    id: int
    author_id: int
    title: str
    content: str
    created_at: int
    updated_at: int

    def is_owner(self, user_id: int) -> bool:
        return self.author_id == user_id
