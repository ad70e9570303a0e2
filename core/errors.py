"""
Structured application errors.

Raise AppError (or one of the Errors factories) from routes and services;
the error handlers turn it into the standard envelope:
{"error": {"message", "code", "statusCode", "details"?, "stack"?}}
"""

import traceback
from types import MappingProxyType
from typing import Any, Mapping


class AppError(Exception):
    """
    HTTP-aware error with a stable machine-readable code.
    Immutable after construction; details are exposed read-only.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: str = "INTERNAL_ERROR",
        details: Mapping[str, Any] | None = None,
    ) -> None:
        if not 100 <= status_code <= 599:
            raise ValueError(f"status_code must be between 100 and 599, got {status_code}")
        super().__init__(message)
        self._message = message
        self._status_code = status_code
        self._code = code
        self._details = MappingProxyType(dict(details)) if details is not None else None

    @property
    def message(self) -> str:
        return self._message

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def code(self) -> str:
        return self._code

    @property
    def details(self) -> Mapping[str, Any] | None:
        return self._details

    @property
    def stack(self) -> str:
        """Formatted traceback; only the raise site once the error has been raised."""
        if self.__traceback__ is None:
            return "".join(traceback.format_stack()[:-1]) + f"{type(self).__name__}: {self.message}\n"
        return "".join(traceback.format_exception(type(self), self, self.__traceback__))

    def to_dict(self, include_stack: bool = False) -> dict[str, Any]:
        """Serialize to the error envelope. Stack only when include_stack is set."""
        body: dict[str, Any] = {
            "message": self.message,
            "code": self.code,
            "statusCode": self.status_code,
        }
        if self._details is not None:
            body["details"] = dict(self._details)
        if include_stack:
            body["stack"] = self.stack
        return {"error": body}

    def __repr__(self) -> str:
        return f"AppError({self.message!r}, status_code={self.status_code}, code={self.code!r})"


class Errors:
    """Factories for the common cases. Prefer these over raw AppError."""

    @staticmethod
    def not_found(resource: str, id: str | None = None) -> AppError:
        message = f"{resource} with id '{id}' not found" if id else f"{resource} not found"
        return AppError(message, 404, "NOT_FOUND", {"resource": resource, "id": id})

    @staticmethod
    def bad_request(message: str, details: Mapping[str, Any] | None = None) -> AppError:
        return AppError(message, 400, "BAD_REQUEST", details)

    @staticmethod
    def unauthorized(message: str = "Authentication required") -> AppError:
        return AppError(message, 401, "UNAUTHORIZED")

    @staticmethod
    def forbidden(message: str = "Access denied") -> AppError:
        return AppError(message, 403, "FORBIDDEN")

    @staticmethod
    def conflict(message: str, details: Mapping[str, Any] | None = None) -> AppError:
        return AppError(message, 409, "CONFLICT", details)

    @staticmethod
    def internal(message: str = "An unexpected error occurred") -> AppError:
        return AppError(message, 500, "INTERNAL_ERROR")
