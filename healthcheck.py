"""
Container healthcheck: GET /ping on the local server.
Exit 0 on 200, 1 otherwise. Docker: HEALTHCHECK CMD python healthcheck.py
"""

import sys

import httpx

from core.config import get_settings
from utils.logging import get_logger

logger = get_logger(__name__)

TIMEOUT_SECONDS = 2.0


def check(host: str = "localhost", port: int | None = None, timeout: float = TIMEOUT_SECONDS) -> int:
    """Return the process exit code for a single probe."""
    port = port or get_settings().PORT
    try:
        response = httpx.get(f"http://{host}:{port}/ping", timeout=timeout)
    except httpx.HTTPError as exc:
        logger.error("healthcheck_failed", extra={"error": str(exc)})
        return 1
    logger.info("healthcheck_status", extra={"status": response.status_code})
    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(check())
