"""User Routes: CRUD, search and pagination under /api/users.

Invariants:
    - Every route here runs behind enforce_rate_limit (attached to the /api router)
    - Bodies are validated by Pydantic before the handler runs
    - Routes never contain business logic (delegate to UserHandlers)
    - A user without a phone is rendered without the "phone" key
    - /search is declared before /{user_id} so it is not parsed as an id
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from roster.api.rate_limit import enforce_rate_limit
from roster.infrastructure.database import get_db
from roster.schemas.user import (
    MessageResponse, PaginatedUsers, SearchResults, UserCreate, UserEnvelope,
    UserRead, UserUpdate,
)
from roster.services.handle_users import UserHandlers, parse_user_id
from roster.services.user_store import SqlUserStore

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    dependencies=[Depends(enforce_rate_limit)],
)


def get_user_handlers(db: AsyncSession = Depends(get_db)) -> UserHandlers:
    return UserHandlers(SqlUserStore(db))


@router.post(
    "",
    response_model=UserEnvelope,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate, handlers: UserHandlers = Depends(get_user_handlers),
):
    """Create a user. 409 when the email is taken."""
    user = await handlers.create(body)
    return UserEnvelope(
        message="User created successfully",
        data=UserRead.model_validate(user),
    )


@router.get("", response_model=PaginatedUsers, response_model_exclude_none=True)
async def list_users(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    handlers: UserHandlers = Depends(get_user_handlers),
):
    """List users, newest first. Bad page/limit values fall back to defaults."""
    return PaginatedUsers.from_page(await handlers.list_page(page, limit))


@router.get("/search", response_model=SearchResults, response_model_exclude_none=True)
async def search_users(
    q: str | None = Query(None),
    handlers: UserHandlers = Depends(get_user_handlers),
):
    """Case-insensitive substring search on name or email (max 50)."""
    users = await handlers.search(q)
    return SearchResults(
        results=[UserRead.model_validate(u) for u in users],
        count=len(users),
    )


@router.get("/{user_id}", response_model=UserRead, response_model_exclude_none=True)
async def get_user(
    user_id: str, handlers: UserHandlers = Depends(get_user_handlers),
):
    return UserRead.model_validate(await handlers.get(parse_user_id(user_id)))


@router.put("/{user_id}", response_model=UserEnvelope, response_model_exclude_none=True)
async def update_user(
    user_id: str,
    body: UserUpdate,
    handlers: UserHandlers = Depends(get_user_handlers),
):
    """Partial update: only the fields present in the body are written."""
    user = await handlers.update(parse_user_id(user_id), body)
    return UserEnvelope(
        message="User updated successfully",
        data=UserRead.model_validate(user),
    )


@router.delete("/{user_id}", response_model=MessageResponse, response_model_exclude_none=True)
async def delete_user(
    user_id: str, handlers: UserHandlers = Depends(get_user_handlers),
):
    await handlers.delete(parse_user_id(user_id))
    return MessageResponse(message="User deleted successfully")
