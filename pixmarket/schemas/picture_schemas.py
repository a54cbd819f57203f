"""
Schemas for picture tokens: request bodies, listing queries and responses.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.picture_models import PictureState
from .common import PageQuery


class PictureBase(BaseModel):
    picture_url: str = Field(..., min_length=1, max_length=100)
    picture_title: str = Field(..., min_length=1, max_length=45)
    picture_info: Optional[str] = None
    picture_category: str = Field(..., min_length=1, max_length=45)
    picture_price: int = Field(0, ge=0)


class PictureInsert(PictureBase):
    """Schema for minting a picture record. The owner is the caller."""
    token_id: str = Field(..., min_length=1, max_length=100)


class PictureUpdate(BaseModel):
    """Partial update; only the fields that were sent are written. picture_info may be cleared with null."""
    token_id: str = Field(..., min_length=1, max_length=100)
    picture_url: Optional[str] = Field(default=None, min_length=1, max_length=100)
    picture_title: Optional[str] = Field(default=None, min_length=1, max_length=45)
    picture_info: Optional[str] = None
    picture_category: Optional[str] = Field(default=None, min_length=1, max_length=45)
    picture_price: Optional[int] = Field(default=None, ge=0)

    @field_validator("picture_url", "picture_title", "picture_category", "picture_price")
    @classmethod
    def reject_null(cls, v):
        """These columns are NOT NULL: they may be left out, but not sent as null."""
        if v is None:
            raise ValueError("may be omitted but not set to null")
        return v


class PictureVector(BaseModel):
    """Feature embedding of a picture."""
    picture_vector: List[float] = Field(..., min_length=1)
    picture_norm: float = Field(..., ge=0)


class PictureSale(BaseModel):
    """Body of a sale registration."""
    picture_price: int = Field(..., ge=0)


class Picture(PictureBase):
    """Represents a picture token with all fields."""
    token_id: str
    picture_count: int
    picture_state: PictureState
    picture_vector: Optional[List[float]] = None
    picture_norm: Optional[float] = None
    user_num: int
    createdAt: Optional[datetime] = None

    class Config:
        """Pydantic configuration."""
        from_attributes = True


class PictureList(BaseModel):
    total: int
    items: List[Picture]


class PictureOwner(BaseModel):
    token_id: str
    user_account: str


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


class MyListQuery(PageQuery):
    state: PictureState = PictureState.HELD


class KeywordQuery(PageQuery):
    keyword: str = Field(..., min_length=1, max_length=45)


class CategoryQuery(PageQuery):
    category: str = Field(..., min_length=1, max_length=45)


class PriceQuery(PageQuery):
    order: SortOrder = SortOrder.desc
