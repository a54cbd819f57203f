from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class History(BaseModel):
    """One trade: user_num1 sold to user_num2."""
    history_num: int
    createdAt: Optional[datetime] = None
    user_num1: int
    user_num2: int
    picture_url: str
    picture_title: str
    picture_price: int

    class Config:
        """Pydantic configuration."""
        from_attributes = True


class HistoryList(BaseModel):
    total: int
    items: List[History]
