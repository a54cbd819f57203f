"""
Shared schemas: the response envelope and pagination query parameters.
"""
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from ..config.settings import settings

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Every successful response is wrapped as {"data": ...}."""
    data: T


class PageQuery(BaseModel):
    """Offset pagination. first is the number of rows to skip, last the number to take."""
    first: int = Field(0, ge=0, description="Number of rows to skip")
    last: int = Field(
        settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="Number of rows to return",
    )
