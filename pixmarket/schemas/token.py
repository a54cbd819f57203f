"""
Schemas for session tokens issued at login.
"""
from pydantic import BaseModel


class AccessToken(BaseModel):
    """Schema for access token data."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenPayload(BaseModel):
    """Claims carried by an access token, as seen by protected routes."""
    user_num: int
    user_id: str
