"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps int: store-assigned, monotonic, unique
    - UserRecord is immutable; the store is the only producer
    - Admission is the throttle's only output: never an exception
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
ClientKey = NewType("ClientKey", str)


# ─── Field Bounds ────────────────────────────────────────────────

NAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 255
PHONE_MAX_LENGTH = 50


# ─── Enums ───────────────────────────────────────────────────────

class Admission(str, Enum):
    """Outcome of a throttle check."""
    ALLOW = "allow"
    DENY = "deny"


# ─── Records ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class UserRecord:
    """A persisted user row, detached from the ORM session."""
    id: UserId
    name: str
    email: str
    phone: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class UserPage:
    """One page of users plus the totals needed to navigate the rest."""
    records: list[UserRecord]
    total: int
    page: int
    limit: int
    total_pages: int
