"""User Handlers: orchestration between validated input and the user store.

Invariants:
    - Input arriving here is already validated (schemas/user.py)
    - Store sentinels (None / False) become ResourceNotFoundError here, nowhere else
    - Email uniqueness pre-check runs before every write that sets an email;
      the table constraint still decides under concurrent writers
    - update() only re-checks uniqueness when the email actually changes
"""

import logging

from roster.core.domain_types import UserId, UserPage, UserRecord
from roster.core.errors import ConflictError, FieldValidationError, ResourceNotFoundError
from roster.core.pagination import normalize_limit, normalize_page
from roster.core.repository_protocols import UserRepository
from roster.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


def parse_user_id(raw: str) -> UserId:
    """Parse a path segment into a UserId or raise FieldValidationError."""
    try:
        return UserId(int(raw))
    except ValueError:
        raise FieldValidationError("Invalid user ID", field="id") from None


class UserHandlers:
    """CRUD, search and pagination flows for users."""

    def __init__(self, repo: UserRepository):
        self.repo = repo

    async def create(self, body: UserCreate) -> UserRecord:
        if await self.repo.email_exists(body.email):
            raise ConflictError()
        user = await self.repo.create(body.name, body.email, body.phone)
        logger.info("User created", extra={"user_id": user.id})
        return user

    async def list_page(
        self, raw_page: str | None, raw_limit: str | None,
    ) -> UserPage:
        return await self.repo.find_all(
            normalize_page(raw_page), normalize_limit(raw_limit),
        )

    async def get(self, user_id: UserId) -> UserRecord:
        user = await self.repo.find_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError("User", user_id)
        return user

    async def search(self, query: str | None) -> list[UserRecord]:
        if not query:
            raise FieldValidationError("Search parameter 'q' is required", field="q")
        return await self.repo.search(query)

    async def update(self, user_id: UserId, body: UserUpdate) -> UserRecord:
        existing = await self.get(user_id)
        patch = body.to_patch()

        if patch.changes_email(existing.email):
            if await self.repo.email_exists(patch.email, exclude_id=user_id):
                raise ConflictError()

        user = await self.repo.update(user_id, patch)
        if user is None:
            # Deleted between the load and the write
            raise ResourceNotFoundError("User", user_id)
        logger.info(
            f"User updated ({', '.join(patch.assignments()) or 'no fields'})",
            extra={"user_id": user_id},
        )
        return user

    async def delete(self, user_id: UserId) -> None:
        if not await self.repo.delete(user_id):
            raise ResourceNotFoundError("User", user_id)
        logger.info("User deleted", extra={"user_id": user_id})
