"""User Schemas: Pydantic models with field-level validation for API boundaries.

Invariants:
    - UserCreate: name 1-255 chars (stripped, non-empty), email valid and <= 255, phone <= 50
    - UserUpdate: every field optional; present fields obey the same bounds
    - UserUpdate: name/email may be omitted but never null; phone: null clears the phone
    - UserUpdate.to_patch() carries exactly the fields the client sent (model_fields_set)
"""

from datetime import datetime

from pydantic import (
    BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator,
)

from roster.core.domain_types import (
    EMAIL_MAX_LENGTH, NAME_MAX_LENGTH, PHONE_MAX_LENGTH, UserPage,
)
from roster.core.user_patch import UNSET, UserPatch


def _strip_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("name cannot be empty or whitespace")
    return v


def _bound_email(v: str) -> str:
    if len(v) > EMAIL_MAX_LENGTH:
        raise ValueError(f"email must be at most {EMAIL_MAX_LENGTH} characters")
    return v


class UserCreate(BaseModel):
    """User creation payload."""
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    email: EmailStr
    phone: str | None = Field(None, max_length=PHONE_MAX_LENGTH)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_name(v)

    @field_validator("email")
    @classmethod
    def bound_email(cls, v: str) -> str:
        return _bound_email(v)


class UserUpdate(BaseModel):
    """Partial update payload: omitted fields are left untouched."""
    name: str | None = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=PHONE_MAX_LENGTH)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _strip_name(v) if v is not None else v

    @field_validator("email")
    @classmethod
    def bound_email(cls, v: str | None) -> str | None:
        return _bound_email(v) if v is not None else v

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        for field in ("name", "email"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def to_patch(self) -> UserPatch:
        sent = self.model_fields_set
        return UserPatch(
            name=self.name if "name" in sent else UNSET,
            email=self.email if "email" in sent else UNSET,
            phone=self.phone if "phone" in sent else UNSET,
        )


class UserRead(BaseModel):
    """Public user representation."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str | None = None
    created_at: datetime
    updated_at: datetime


class PaginatedUsers(BaseModel):
    """Response for GET /api/users."""
    data: list[UserRead]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def from_page(cls, page: UserPage) -> "PaginatedUsers":
        return cls(
            data=[UserRead.model_validate(r) for r in page.records],
            total=page.total,
            page=page.page,
            limit=page.limit,
            total_pages=page.total_pages,
        )


class SearchResults(BaseModel):
    """Response for GET /api/users/search."""
    results: list[UserRead]
    count: int


class UserEnvelope(BaseModel):
    """Success response carrying a message and the affected user."""
    message: str
    data: UserRead


class MessageResponse(BaseModel):
    """Success response without payload."""
    message: str
