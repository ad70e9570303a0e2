"""
Pydantic schemas for request/response validation.
Reusable across routes; keeps API contracts explicit.
"""

from datetime import datetime
from typing import Annotated, Any, Literal
from uuid import UUID

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, Field, WithJsonSchema, field_validator

Role = Literal["admin", "user", "guest"]
SortField = Literal["name", "email", "createdAt"]
SortOrder = Literal["asc", "desc"]


def _check_email(value: str) -> str:
    """Validate syntax only; the address is kept exactly as sent."""
    try:
        validate_email(value, check_deliverability=False, test_environment=True)
    except EmailNotValidError as exc:
        raise ValueError(f"Invalid email format: {exc}") from exc
    return value


Email = Annotated[
    str,
    AfterValidator(_check_email),
    WithJsonSchema({"type": "string", "format": "email"}),
]


class ErrorBody(BaseModel):
    message: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code for programmatic handling")
    status_code: int = Field(..., alias="statusCode", description="HTTP status code")
    details: dict[str, Any] | None = Field(default=None, description="Additional error context")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """Standard error envelope. All error responses follow this structure."""

    error: ErrorBody


class MessageResponse(BaseModel):
    message: str


class User(BaseModel):
    """Stored and returned user record."""

    id: UUID = Field(..., description="Unique user identifier")
    name: str = Field(..., min_length=1, max_length=100, description="User display name")
    email: Email = Field(..., description="User email address")
    role: Role = Field(..., description="User role for authorization")
    created_at: datetime = Field(..., alias="createdAt", description="ISO 8601 creation timestamp")

    model_config = {"populate_by_name": True, "extra": "forbid"}


class CreateUserRequest(BaseModel):
    """id and createdAt are generated server-side."""

    name: str = Field(..., min_length=1, max_length=100, description="User display name")
    email: Email = Field(..., description="User email address")
    role: Role = Field(default="user", description='User role (defaults to "user")')


class UpdateUserRequest(BaseModel):
    """PATCH semantics: only provided fields are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    email: Email | None = None
    role: Role | None = None

    @field_validator("name", "email", "role", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        # Omit a field to leave it unchanged; null is not a value for any of them
        if v is None:
            raise ValueError("must not be null")
        return v


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int = Field(..., alias="totalPages")

    model_config = {"populate_by_name": True}


class UserListResponse(BaseModel):
    data: list[User] = Field(default_factory=list)
    pagination: Pagination
