"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Alembic migrations are written against these.

Key concepts:
- Integer autoincrement primary keys (work on both SQLite and PostgreSQL)
- Timestamps stored as epoch seconds (BIGINT), assigned on insert
- users.email is UNIQUE: this constraint, not application code, is what
  makes concurrent signups with the same email safe
"""

from sqlalchemy import (
    BigInteger,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from memoapp.domain import Account, Note, epoch_now


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class UserRow(Base):
    """A registered account."""

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=epoch_now
    )

    def to_domain(self) -> Account:
        return Account(
            id=self.id,
            email=self.email,
            password_hash=self.password_hash,
            created_at=self.created_at,
        )


class NoteRow(Base):
    """A note, owned by exactly one user (user_id)."""

    __tablename__ = "notes"
    __table_args__ = (
        Index("ix_notes_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=epoch_now
    )
    updated_at: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=epoch_now
    )

    def to_domain(self) -> Note:
        return Note(
            id=self.id,
            author_id=self.user_id,
            title=self.title,
            content=self.content,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
