"""User ORM: persists the user records served by /api/users.

Invariants:
    - id is an autoincrement integer primary key (SERIAL on PostgreSQL)
    - email is unique (users_email_key) and indexed (idx_users_email)
    - created_at and updated_at are written by the store, never by the client
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from roster.core.domain_types import (
    EMAIL_MAX_LENGTH, NAME_MAX_LENGTH, PHONE_MAX_LENGTH, UserId, UserRecord,
)
from roster.db.base import Base


class User(Base):
    """A managed user."""
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="users_email_key"),
        Index("idx_users_email", "email"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    email: Mapped[str] = mapped_column(String(EMAIL_MAX_LENGTH), nullable=False)
    phone: Mapped[str | None] = mapped_column(
        String(PHONE_MAX_LENGTH), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )


USER_COLUMNS = (
    User.id, User.name, User.email, User.phone, User.created_at, User.updated_at,
)


def to_record(row) -> UserRecord:
    """Build a UserRecord from a row or ORM instance exposing USER_COLUMNS."""
    return UserRecord(
        id=UserId(row.id),
        name=row.name,
        email=row.email,
        phone=row.phone,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
