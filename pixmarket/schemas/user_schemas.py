"""
Schemas for user registration, login and profile updates.
The password is a SHA-256 hex digest computed by the client; only its format is checked here.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .common import PageQuery

SHA256_HEX_PATTERN = r"^[A-Fa-f0-9]{64}$"


class User(BaseModel):
    """Public representation of a user. Never carries the password or private key."""
    user_num: int
    user_id: str
    user_account: str
    createdAt: Optional[datetime] = None

    class Config:
        """Pydantic configuration."""
        from_attributes = True


class UserInsert(BaseModel):
    """Schema for registering a new user."""
    user_id: str = Field(..., min_length=5, max_length=20)
    user_account: str = Field(..., min_length=5, max_length=255)
    user_password: str = Field(..., pattern=SHA256_HEX_PATTERN, description="SHA-256 hex digest of the password")
    user_privatekey: str


class UserUpdate(BaseModel):
    """
    Schema for updating the caller's own profile.
    Only user_id is mutable. A user_num sent in the body is ignored;
    the target is always the authenticated user.
    """
    user_id: Optional[str] = Field(default=None, min_length=5, max_length=64)


class UserLogin(BaseModel):
    """Schema for the login request body."""
    user_id: str = Field(..., min_length=5, max_length=64, description="Accepts any user_id a rename can produce")
    user_password: str = Field(..., pattern=SHA256_HEX_PATTERN, description="SHA-256 hex digest of the password")


class UserListQuery(PageQuery):
    name: str = Field("", max_length=64, description="Substring of the user_id to match")
