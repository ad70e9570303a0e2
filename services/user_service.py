"""
User business logic: filtering, sorting, pagination and write rules.
Raises AppError via Errors factories; routes stay thin.
"""

import math
import uuid
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from core.errors import Errors
from models.schemas import (
    CreateUserRequest,
    Pagination,
    Role,
    SortField,
    SortOrder,
    UpdateUserRequest,
    User,
    UserListResponse,
)
from services.user_store import DuplicateEmailError, UserStore
from utils.logging import get_logger

logger = get_logger(__name__)

EMAIL_IN_USE = "A user with this email already exists"

# Wire sort keys to model attributes
_SORT_ATTRS: dict[str, str] = {"name": "name", "email": "email", "createdAt": "created_at"}


class UserService:
    """Stateless over an injected UserStore."""

    def __init__(self, store: UserStore) -> None:
        self.store = store

    async def list_users(
        self,
        page: int = 1,
        limit: int = 10,
        role: Role | None = None,
        search: str | None = None,
        sort_by: SortField = "createdAt",
        sort_order: SortOrder = "desc",
    ) -> UserListResponse:
        users = await self.store.list_all()
        if role:
            users = [u for u in users if u.role == role]
        if search:
            needle = search.lower()
            users = [u for u in users if needle in u.name.lower() or needle in u.email.lower()]

        attr = _SORT_ATTRS[sort_by]
        users.sort(key=lambda u: getattr(u, attr), reverse=sort_order == "desc")

        total = len(users)
        start = (page - 1) * limit
        return UserListResponse(
            data=users[start : start + limit],
            pagination=Pagination(
                page=page, limit=limit, total=total, total_pages=math.ceil(total / limit)
            ),
        )

    async def get_user(self, user_id: UUID) -> User:
        user = await self.store.get(user_id)
        if user is None:
            raise Errors.not_found("User", str(user_id))
        return user

    async def create_user(self, body: CreateUserRequest) -> User:
        user = User(
            id=uuid.uuid4(),
            name=body.name,
            email=body.email,
            role=body.role,
            created_at=datetime.now(UTC),
        )
        try:
            await self.store.add(user)
        except DuplicateEmailError as exc:
            raise Errors.conflict(EMAIL_IN_USE, {"email": exc.email}) from exc
        logger.info("user_created", extra={"user_id": str(user.id)})
        return user

    async def update_user(self, user_id: UUID, body: UpdateUserRequest) -> User:
        user = await self.get_user(user_id)
        changes: dict[str, Any] = body.model_dump(exclude_unset=True)
        updated = user.model_copy(update=changes)
        try:
            await self.store.replace(updated)
        except DuplicateEmailError as exc:
            raise Errors.conflict(EMAIL_IN_USE, {"email": exc.email}) from exc
        except KeyError as exc:
            # Deleted between read and write
            raise Errors.not_found("User", str(user_id)) from exc
        return updated

    async def delete_user(self, user_id: UUID) -> None:
        if not await self.store.delete(user_id):
            raise Errors.not_found("User", str(user_id))
        logger.info("user_deleted", extra={"user_id": str(user_id)})
