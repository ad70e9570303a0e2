"""
Liveness endpoint for load balancers and container healthchecks.
No auth required; keep payload minimal for fast checks.
"""

from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel

router = APIRouter(prefix="/ping", tags=["Ping"])


class PingResponse(BaseModel):
    message: Literal["Pong"] = "Pong"


@router.get("", response_model=PingResponse, summary="Health check")
async def ping() -> PingResponse:
    return PingResponse()
