"""Boundary Protocols: contracts between handlers and persistence.

Invariants:
    - Handlers depend on UserRepository, never on the SQL implementation
    - "Not found" is a return value (None / False), never an exception
    - Unique violations surface as ConflictError; any other backend failure as InternalError
"""

from typing import Protocol

from roster.core.domain_types import UserId, UserPage, UserRecord
from roster.core.user_patch import UserPatch


class UserRepository(Protocol):
    """Contract for user persistence: implemented by services/user_store.py."""
    async def create(
        self, name: str, email: str, phone: str | None = None,
    ) -> UserRecord: ...
    async def find_all(self, page: int, limit: int) -> UserPage: ...
    async def find_by_id(self, user_id: UserId) -> UserRecord | None: ...
    async def search(self, text: str) -> list[UserRecord]: ...
    async def update(
        self, user_id: UserId, patch: UserPatch,
    ) -> UserRecord | None: ...
    async def delete(self, user_id: UserId) -> bool: ...
    async def email_exists(
        self, email: str, exclude_id: UserId | None = None,
    ) -> bool: ...
