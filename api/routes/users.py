"""
Users API: demonstration CRUD over the injected user store.
Validation: body, path and query checked by FastAPI/Pydantic; failures become 400 VALIDATION_ERROR.
"""

from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from core.dependencies import UserServiceDep
from models.schemas import (
    CreateUserRequest,
    ErrorResponse,
    Role,
    SortField,
    SortOrder,
    UpdateUserRequest,
    User,
    UserListResponse,
)

router = APIRouter(prefix="/users", tags=["Users"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "User not found"}}
_CONFLICT = {409: {"model": ErrorResponse, "description": "Email already in use"}}
_INVALID = {400: {"model": ErrorResponse, "description": "Validation failed"}}


@router.get("", response_model=UserListResponse, responses=_INVALID, summary="List users")
async def list_users(
    service: UserServiceDep,
    page: int = Query(default=1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(default=10, ge=1, le=100, description="Items per page (max 100)"),
    role: Role | None = Query(default=None, description="Filter by user role"),
    search: str | None = Query(
        default=None, min_length=1, max_length=100, description="Search by name or email"
    ),
    sort_by: SortField = Query(default="createdAt", alias="sortBy", description="Field to sort by"),
    sort_order: SortOrder = Query(default="desc", alias="sortOrder", description="Sort direction"),
) -> UserListResponse:
    """Paginated list with optional role filter, search and sorting."""
    return await service.list_users(
        page=page,
        limit=limit,
        role=role,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get(
    "/{user_id}",
    response_model=User,
    responses={**_INVALID, **_NOT_FOUND},
    summary="Get user by ID",
)
async def get_user(user_id: UUID, service: UserServiceDep) -> User:
    return await service.get_user(user_id)


@router.post(
    "",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    responses={**_INVALID, **_CONFLICT},
    summary="Create a new user",
)
async def create_user(body: CreateUserRequest, service: UserServiceDep) -> User:
    return await service.create_user(body)


@router.patch(
    "/{user_id}",
    response_model=User,
    responses={**_INVALID, **_NOT_FOUND, **_CONFLICT},
    summary="Update a user",
)
async def update_user(user_id: UUID, body: UpdateUserRequest, service: UserServiceDep) -> User:
    """Only provided fields are updated."""
    return await service.update_user(user_id, body)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_INVALID, **_NOT_FOUND},
    summary="Delete a user",
)
async def delete_user(user_id: UUID, service: UserServiceDep) -> Response:
    await service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
