"""User Store: parameterized SQL against the users table.

Invariants:
    - Every statement is parameterized; user text never reaches SQL as literal text
    - Rows leave this module as UserRecord (never ORM instances)
    - Absent rows are None / False, never exceptions
    - Each mutation commits on its own; no transaction spans two store calls
    - update() writes only the columns in patch.assignments() plus updated_at;
      an empty patch is a plain read
    - Backend failures are rolled back and re-raised as ConflictError / InternalError
"""

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator

from sqlalchemy import delete, exists, func, insert, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roster.core.domain_types import UserId, UserPage, UserRecord
from roster.core.errors import ConflictError
from roster.core.pagination import page_offset, total_pages
from roster.core.user_patch import UserPatch
from roster.infrastructure.database import translate_db_error
from roster.models.user import USER_COLUMNS, User, to_record

logger = logging.getLogger(__name__)

SEARCH_RESULT_LIMIT: int = 50
LIKE_ESCAPE = "\\"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def escape_like(text: str) -> str:
    """Escape LIKE metacharacters so text matches literally."""
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class SqlUserStore:
    """UserRepository implementation over an AsyncSession."""

    def __init__(
        self, db: AsyncSession, clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self._clock = clock

    @asynccontextmanager
    async def _translating(
        self, operation: str, message: str,
    ) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            await self.db.rollback()
            error = translate_db_error(e, operation, message)
            if isinstance(error, ConflictError):
                logger.warning(
                    f"Unique violation during {operation}",
                    extra={"error_code": error.code},
                )
            else:
                logger.error(
                    f"Database error during {operation}: {e}",
                    extra={"error_code": error.code},
                )
            raise error from e

    async def create(
        self, name: str, email: str, phone: str | None = None,
    ) -> UserRecord:
        now = self._clock()
        stmt = (
            insert(User)
            .values(
                name=name, email=email, phone=phone,
                created_at=now, updated_at=now,
            )
            .returning(*USER_COLUMNS)
        )
        async with self._translating("create", "Failed to create user"):
            row = (await self.db.execute(stmt)).one()
            await self.db.commit()
        return to_record(row)

    async def find_all(self, page: int, limit: int) -> UserPage:
        stmt = (
            select(*USER_COLUMNS)
            .order_by(User.id.desc())
            .limit(limit)
            .offset(page_offset(page, limit))
        )
        async with self._translating("find_all", "Failed to retrieve users"):
            rows = (await self.db.execute(stmt)).all()
            # Separate round-trip: the count may drift from the page under concurrent writes
            total = (
                await self.db.execute(select(func.count()).select_from(User))
            ).scalar_one()
        return UserPage(
            records=[to_record(r) for r in rows],
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages(total, limit),
        )

    async def find_by_id(self, user_id: UserId) -> UserRecord | None:
        stmt = select(*USER_COLUMNS).where(User.id == user_id)
        async with self._translating("find_by_id", "Failed to retrieve user"):
            row = (await self.db.execute(stmt)).first()
        return to_record(row) if row is not None else None

    async def search(self, text: str) -> list[UserRecord]:
        pattern = f"%{escape_like(text)}%"
        stmt = (
            select(*USER_COLUMNS)
            .where(or_(
                User.name.ilike(pattern, escape=LIKE_ESCAPE),
                User.email.ilike(pattern, escape=LIKE_ESCAPE),
            ))
            .order_by(User.id.desc())
            .limit(SEARCH_RESULT_LIMIT)
        )
        async with self._translating("search", "Failed to search users"):
            rows = (await self.db.execute(stmt)).all()
        return [to_record(r) for r in rows]

    async def update(
        self, user_id: UserId, patch: UserPatch,
    ) -> UserRecord | None:
        assignments = patch.assignments()
        if not assignments:
            return await self.find_by_id(user_id)

        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(**assignments, updated_at=self._clock())
            .returning(*USER_COLUMNS)
            .execution_options(synchronize_session=False)
        )
        async with self._translating("update", "Failed to update user"):
            row = (await self.db.execute(stmt)).first()
            await self.db.commit()
        return to_record(row) if row is not None else None

    async def delete(self, user_id: UserId) -> bool:
        stmt = (
            delete(User)
            .where(User.id == user_id)
            .execution_options(synchronize_session=False)
        )
        async with self._translating("delete", "Failed to delete user"):
            result = await self.db.execute(stmt)
            deleted = result.rowcount > 0
            await self.db.commit()
        return deleted

    async def email_exists(
        self, email: str, exclude_id: UserId | None = None,
    ) -> bool:
        conditions = [User.email == email]
        if exclude_id is not None:
            conditions.append(User.id != exclude_id)
        stmt = select(exists().where(*conditions))
        async with self._translating("email_exists", "Failed to verify email"):
            found = (await self.db.execute(stmt)).scalar()
        return bool(found)
