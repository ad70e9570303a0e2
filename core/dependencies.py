"""
FastAPI dependency injection: user store and service.
Centralizes dependencies for testability and clean routes.
"""

from typing import Annotated

from fastapi import Depends, Request

from services.user_service import UserService
from services.user_store import UserStore


def get_user_store(request: Request) -> UserStore:
    """Store created by the app factory. Override in tests with app.dependency_overrides."""
    return request.app.state.user_store


UserStoreDep = Annotated[UserStore, Depends(get_user_store)]


def get_user_service(store: UserStoreDep) -> UserService:
    return UserService(store)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
