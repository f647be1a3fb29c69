"""User Patch: partial-update payload that distinguishes absent from present.

Invariants:
    - A field left as UNSET is never written; a field set to None is written as NULL
    - Only phone accepts None (name/email are NOT NULL columns: rejected upstream)
    - assignments() preserves PATCHABLE_FIELDS order: deterministic SQL for identical patches
"""

from dataclasses import dataclass


class _Unset:
    """Marker type for a field that was not supplied."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()

PATCHABLE_FIELDS: tuple[str, ...] = ("name", "email", "phone")


@dataclass(frozen=True)
class UserPatch:
    """Subset of user fields to change."""
    name: str | _Unset = UNSET
    email: str | _Unset = UNSET
    phone: str | None | _Unset = UNSET

    def assignments(self) -> dict[str, str | None]:
        """Column -> new value, for supplied fields only."""
        return {
            column: value
            for column, value in (
                (f, getattr(self, f)) for f in PATCHABLE_FIELDS
            )
            if value is not UNSET
        }

    @property
    def is_empty(self) -> bool:
        return not self.assignments()

    def changes_email(self, current_email: str) -> bool:
        """True when the patch supplies an email different from current_email."""
        return self.email is not UNSET and self.email != current_email
