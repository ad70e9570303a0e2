"""
User persistence behind an explicit async interface.
In-memory implementation for development; swap in a database-backed store for production.
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from uuid import UUID

from models.schemas import User

SEED_USER = User(
    id=UUID("550e8400-e29b-41d4-a716-446655440000"),
    name="John Doe",
    email="john@example.com",
    role="admin",
    created_at=datetime.now(UTC),
)


class DuplicateEmailError(Exception):
    """Another user already holds this email."""

    def __init__(self, email: str) -> None:
        super().__init__(f"email already in use: {email}")
        self.email = email


class UserStore(ABC):
    """
    Storage capability used by the user service.
    add/replace must enforce email uniqueness atomically with the write.
    """

    @abstractmethod
    async def get(self, user_id: UUID) -> User | None: ...

    @abstractmethod
    async def list_all(self) -> list[User]: ...

    @abstractmethod
    async def add(self, user: User) -> User: ...

    @abstractmethod
    async def replace(self, user: User) -> User: ...

    @abstractmethod
    async def delete(self, user_id: UUID) -> bool: ...


class InMemoryUserStore(UserStore):
    """
    Dict-backed store. Writes hold an asyncio.Lock so the email check and the
    write cannot interleave with another request in this process.
    """

    def __init__(self, seed: list[User] | None = None) -> None:
        self._users: dict[UUID, User] = {}
        self._lock = asyncio.Lock()
        for user in seed or []:
            self._users[user.id] = user

    async def get(self, user_id: UUID) -> User | None:
        return self._users.get(user_id)

    async def list_all(self) -> list[User]:
        return list(self._users.values())

    async def add(self, user: User) -> User:
        async with self._lock:
            self._check_email(user)
            self._users[user.id] = user
            return user

    async def replace(self, user: User) -> User:
        async with self._lock:
            if user.id not in self._users:
                raise KeyError(user.id)
            self._check_email(user)
            self._users[user.id] = user
            return user

    async def delete(self, user_id: UUID) -> bool:
        async with self._lock:
            return self._users.pop(user_id, None) is not None

    def _check_email(self, user: User) -> None:
        for existing in self._users.values():
            if existing.email == user.email and existing.id != user.id:
                raise DuplicateEmailError(user.email)


def create_default_store() -> InMemoryUserStore:
    """Store seeded with the demo admin user."""
    return InMemoryUserStore(seed=[SEED_USER.model_copy()])
