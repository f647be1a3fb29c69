"""User Store: SQL behaviour against a real (SQLite) database.

Invariants:
    - create returns the full row, created_at == updated_at
    - find_by_id / update return None and delete returns False for unknown ids
    - update writes only supplied fields and advances updated_at
    - find_all pages by descending id with a separate total count
    - search is a case-insensitive literal substring match on name OR email, capped at 50
    - unique violations surface as ConflictError, not InternalError
"""

import pytest

from roster.core.domain_types import UserId
from roster.core.errors import ConflictError
from roster.core.user_patch import UserPatch
from roster.services.user_store import SEARCH_RESULT_LIMIT, escape_like


async def test_create_returns_generated_fields(store):
    user = await store.create("Ada Lovelace", "ada@example.com", "555-0100")
    assert user.id >= 1
    assert user.name == "Ada Lovelace"
    assert user.email == "ada@example.com"
    assert user.phone == "555-0100"
    assert user.created_at is not None
    assert user.created_at == user.updated_at


async def test_create_then_find_by_id_round_trips(store):
    created = await store.create("Ada Lovelace", "ada@example.com")
    fetched = await store.find_by_id(created.id)
    assert fetched == created
    assert fetched.phone is None


async def test_ids_are_monotonic(store):
    first = await store.create("A", "a@example.com")
    second = await store.create("B", "b@example.com")
    assert second.id > first.id


async def test_find_by_id_missing_returns_none(store):
    assert await store.find_by_id(UserId(9999)) is None


async def test_duplicate_email_raises_conflict(store):
    await store.create("Ada", "ada@example.com")
    with pytest.raises(ConflictError):
        await store.create("Other Ada", "ada@example.com")


async def test_store_usable_after_conflict(store):
    await store.create("Ada", "ada@example.com")
    with pytest.raises(ConflictError):
        await store.create("Other Ada", "ada@example.com")
    user = await store.create("Grace", "grace@example.com")
    assert user.name == "Grace"


async def test_update_only_phone_leaves_other_fields(store):
    created = await store.create("Ada", "ada@example.com", "111")
    updated = await store.update(created.id, UserPatch(phone="222"))
    assert updated.phone == "222"
    assert updated.name == created.name
    assert updated.email == created.email
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at


async def test_update_null_phone_clears_it(store):
    created = await store.create("Ada", "ada@example.com", "111")
    updated = await store.update(created.id, UserPatch(phone=None))
    assert updated.phone is None
    assert updated.name == "Ada"


async def test_update_multiple_fields(store):
    created = await store.create("Ada", "ada@example.com")
    updated = await store.update(
        created.id, UserPatch(name="Ada King", email="king@example.com"),
    )
    assert (updated.name, updated.email) == ("Ada King", "king@example.com")


async def test_empty_update_is_a_plain_read(store):
    created = await store.create("Ada", "ada@example.com")
    same = await store.update(created.id, UserPatch())
    assert same == created


async def test_update_missing_returns_none(store):
    assert await store.update(UserId(9999), UserPatch(name="X")) is None
    assert await store.update(UserId(9999), UserPatch()) is None


async def test_update_to_taken_email_raises_conflict(store):
    await store.create("Ada", "ada@example.com")
    grace = await store.create("Grace", "grace@example.com")
    with pytest.raises(ConflictError):
        await store.update(grace.id, UserPatch(email="ada@example.com"))
    assert (await store.find_by_id(grace.id)).email == "grace@example.com"


async def test_delete_twice(store):
    created = await store.create("Ada", "ada@example.com")
    assert await store.delete(created.id) is True
    assert await store.delete(created.id) is False
    assert await store.find_by_id(created.id) is None


async def test_email_exists(store):
    ada = await store.create("Ada", "ada@example.com")
    assert await store.email_exists("ada@example.com")
    assert not await store.email_exists("nobody@example.com")
    assert not await store.email_exists("ada@example.com", exclude_id=ada.id)
    assert await store.email_exists("ada@example.com", exclude_id=UserId(ada.id + 1))


async def test_find_all_second_page_of_twenty_five(store):
    created = [
        await store.create(f"User {i}", f"user{i}@example.com")
        for i in range(1, 26)
    ]
    page = await store.find_all(page=2, limit=10)

    descending = sorted((u.id for u in created), reverse=True)
    assert [u.id for u in page.records] == descending[10:20]
    assert page.total == 25
    assert page.total_pages == 3
    assert (page.page, page.limit) == (2, 10)


async def test_find_all_past_last_page_is_empty(store):
    await store.create("Ada", "ada@example.com")
    page = await store.find_all(page=5, limit=10)
    assert page.records == []
    assert page.total == 1
    assert page.total_pages == 1


async def test_find_all_empty_table(store):
    page = await store.find_all(page=1, limit=20)
    assert page.records == []
    assert page.total == 0
    assert page.total_pages == 0


async def test_search_matches_name_or_email_case_insensitively(store):
    by_name = await store.create("Smith", "jones@example.com")
    by_email = await store.create("Jones", "smith@x.com")
    await store.create("Unrelated", "other@example.com")

    results = await store.search("smith")
    assert [u.id for u in results] == [by_email.id, by_name.id]


async def test_search_treats_wildcards_literally(store):
    await store.create("Ada", "ada@example.com")
    await store.create("100% Real", "real@example.com")
    assert [u.name for u in await store.search("%")] == ["100% Real"]
    assert await store.search("a_a") == []


async def test_search_is_capped(store):
    for i in range(SEARCH_RESULT_LIMIT + 5):
        await store.create(f"Match {i}", f"match{i}@example.com")
    results = await store.search("match")
    assert len(results) == SEARCH_RESULT_LIMIT
    assert results[0].id > results[-1].id


def test_escape_like():
    assert escape_like("50%_off\\") == "50\\%\\_off\\\\"
