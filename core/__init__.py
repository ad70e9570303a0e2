"""
Core package: configuration, errors, middleware and dependencies.
Clean separation from API and business logic for testability and deployment flexibility.
"""

from core.config import get_settings

__all__ = ["get_settings"]
