import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from ..config.settings import settings  # Use centralized settings
from ..core.errors import UnauthorizedError
from ..db.database import get_db
from ..models.user_models import DBUser as UserModel
from ..schemas import token as token_schema

logger = logging.getLogger(__name__)

# Bearer token extraction; login takes a JSON body, tokenUrl only feeds the docs
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/users/login")


def verify_password(password_digest: str, stored_digest: str) -> bool:
    """Compares two SHA-256 hex digests in constant time, ignoring hex case."""
    return hmac.compare_digest(password_digest.lower(), stored_digest.lower())


def authenticate_user(user: UserModel, password_digest: str) -> bool:
    if not verify_password(password_digest, user.user_password):
        logger.debug("Authentication failed: Invalid password for user '%s'.", user.user_id)
        return False
    logger.info("User '%s' authenticated successfully.", user.user_id)
    return True


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Creates a new access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def sign_token(user: UserModel) -> token_schema.AccessToken:
    """Issues a session token for the user."""
    expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": str(user.user_num), "user_id": user.user_id},
        expires_delta=expires_delta,
    )
    return token_schema.AccessToken(
        access_token=access_token,
        expires_in=int(expires_delta.total_seconds()),
    )


def decode_token(token: str) -> token_schema.TokenPayload:
    """
    Decodes an access token into its payload.
    Raises UnauthorizedError if the token is invalid, expired or not an access token.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning("JWTError while decoding token: %s", e)
        raise UnauthorizedError() from e

    subject: Optional[str] = payload.get("sub")
    user_id: Optional[str] = payload.get("user_id")
    if subject is None or user_id is None or payload.get("type") != "access":
        logger.warning("Invalid token: subject missing or not an access token.")
        raise UnauthorizedError()
    try:
        user_num = int(subject)
    except ValueError as e:
        logger.warning("Invalid token subject '%s'.", subject)
        raise UnauthorizedError() from e
    return token_schema.TokenPayload(user_num=user_num, user_id=user_id)


async def get_token_payload(token: str = Depends(oauth2_scheme)) -> token_schema.TokenPayload:
    """Dependency supplying the authenticated caller's token payload."""
    return decode_token(token)


async def get_current_user(
    payload: token_schema.TokenPayload = Depends(get_token_payload),
    db: Session = Depends(get_db),
) -> UserModel:
    """
    Loads the user behind the token.
    Raises UnauthorizedError if the user no longer exists.
    """
    user: Optional[UserModel] = db.query(UserModel).filter(UserModel.user_num == payload.user_num).first()
    if user is None:
        logger.warning("User %s from token not found in database.", payload.user_num)
        raise UnauthorizedError()
    return user
