"""Account and note storage behind swappable interfaces.

Learn: base.py defines the contracts (AccountStore, NoteStore). sql.py
implements them on SQLAlchemy (SQLite or PostgreSQL), memory.py on plain
dicts. Services only ever import from base.py.
"""

from memoapp.repository.base import AccountStore, NoteStore, StoreError

__all__ = ["AccountStore", "NoteStore", "StoreError"]
