"""Root and demonstration endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel

from models.schemas import MessageResponse

router = APIRouter(tags=["Root"])


class RootResponse(BaseModel):
    root: bool = True


@router.get("/", response_model=RootResponse)
async def root() -> RootResponse:
    return RootResponse()


@router.get("/example", response_model=MessageResponse, tags=["Example"])
async def example() -> MessageResponse:
    return MessageResponse(message="Hello, world!")
