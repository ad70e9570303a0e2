"""
User store: email uniqueness enforced atomically with writes.
"""

import asyncio
import uuid
from datetime import UTC, datetime

import pytest

from models.schemas import User
from services.user_store import DuplicateEmailError, InMemoryUserStore, create_default_store


def _user(email: str, name: str = "Someone") -> User:
    return User(id=uuid.uuid4(), name=name, email=email, role="user", created_at=datetime.now(UTC))


def test_default_store_is_seeded() -> None:
    users = asyncio.run(create_default_store().list_all())
    assert [u.email for u in users] == ["john@example.com"]


def test_add_rejects_duplicate_email() -> None:
    async def scenario() -> None:
        store = InMemoryUserStore()
        await store.add(_user("a@example.com"))
        with pytest.raises(DuplicateEmailError) as info:
            await store.add(_user("a@example.com"))
        assert info.value.email == "a@example.com"
        assert len(await store.list_all()) == 1

    asyncio.run(scenario())


def test_replace_checks_other_records_only() -> None:
    async def scenario() -> None:
        store = InMemoryUserStore()
        a = await store.add(_user("a@example.com"))
        await store.add(_user("b@example.com"))

        renamed = a.model_copy(update={"name": "Renamed"})
        assert (await store.replace(renamed)).name == "Renamed"

        with pytest.raises(DuplicateEmailError):
            await store.replace(a.model_copy(update={"email": "b@example.com"}))
        assert (await store.get(a.id)).email == "a@example.com"

    asyncio.run(scenario())


def test_replace_missing_user() -> None:
    with pytest.raises(KeyError):
        asyncio.run(InMemoryUserStore().replace(_user("x@example.com")))


def test_delete() -> None:
    async def scenario() -> None:
        store = InMemoryUserStore()
        user = await store.add(_user("a@example.com"))
        assert await store.delete(user.id) is True
        assert await store.delete(user.id) is False
        assert await store.get(user.id) is None

    asyncio.run(scenario())


def test_concurrent_adds_with_same_email() -> None:
    async def scenario() -> list[object]:
        store = InMemoryUserStore()
        return await asyncio.gather(
            *(store.add(_user("race@example.com")) for _ in range(10)),
            return_exceptions=True,
        )

    results = asyncio.run(scenario())
    assert sum(isinstance(r, User) for r in results) == 1
    assert sum(isinstance(r, DuplicateEmailError) for r in results) == 9
