"""User Schemas: boundary validation for create and partial update.

Invariants:
    - name is stripped and must be non-empty, <= 255
    - email must be syntactically valid
    - phone <= 50 chars
    - UserUpdate.to_patch() keeps only fields the client actually sent
"""

import pytest
from pydantic import ValidationError

from roster.core.user_patch import UNSET
from roster.schemas.user import UserCreate, UserUpdate


# --- UserCreate ---------------------------------------------------------------

def test_create_accepts_minimal_payload():
    body = UserCreate(name="Ada Lovelace", email="ada@example.com")
    assert body.phone is None


def test_create_strips_name():
    body = UserCreate(name="  Ada  ", email="ada@example.com")
    assert body.name == "Ada"


def test_create_rejects_whitespace_only_name():
    with pytest.raises(ValidationError):
        UserCreate(name="   ", email="ada@example.com")


def test_create_rejects_empty_name():
    with pytest.raises(ValidationError):
        UserCreate(name="", email="ada@example.com")


def test_create_rejects_name_over_255_chars():
    with pytest.raises(ValidationError):
        UserCreate(name="x" * 256, email="ada@example.com")


def test_create_accepts_name_of_exactly_255_chars():
    assert len(UserCreate(name="x" * 255, email="ada@example.com").name) == 255


@pytest.mark.parametrize("email", ["not-an-email", "a@", "@example.com", ""])
def test_create_rejects_invalid_email(email):
    with pytest.raises(ValidationError):
        UserCreate(name="Ada", email=email)


def test_create_requires_email():
    with pytest.raises(ValidationError):
        UserCreate(name="Ada")


def test_create_rejects_phone_over_50_chars():
    with pytest.raises(ValidationError):
        UserCreate(name="Ada", email="ada@example.com", phone="1" * 51)


# --- UserUpdate ---------------------------------------------------------------

def test_update_empty_body_gives_empty_patch():
    assert UserUpdate().to_patch().is_empty


def test_update_patch_contains_only_sent_fields():
    patch = UserUpdate(phone="555-0100").to_patch()
    assert patch.phone == "555-0100"
    assert patch.name is UNSET
    assert patch.email is UNSET


def test_update_null_phone_clears_phone():
    patch = UserUpdate.model_validate({"phone": None}).to_patch()
    assert patch.assignments() == {"phone": None}


@pytest.mark.parametrize("field", ["name", "email"])
def test_update_rejects_null_for_required_columns(field):
    with pytest.raises(ValidationError):
        UserUpdate.model_validate({field: None})


def test_update_validates_present_fields():
    with pytest.raises(ValidationError):
        UserUpdate(email="nope")
    with pytest.raises(ValidationError):
        UserUpdate(name="   ")
    with pytest.raises(ValidationError):
        UserUpdate(phone="9" * 51)
