"""
Endpoints for registering, authenticating and browsing users.
"""
import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.exc import IntegrityError

from ..config.settings_loader import get_setting
from ..core.errors import BadRequestError, ForbiddenError, NotFoundError, UnauthorizedError
from ..repositories import (HistoryRepository, PictureRepository, UserRepository,
                            get_history_repository, get_picture_repository,
                            get_user_repository)
from ..schemas import history_schemas, picture_schemas, user_schemas
from ..schemas import token as token_schema
from ..schemas.common import DataResponse, PageQuery
from ..utils import auth

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=DataResponse[List[user_schemas.User]])
async def get_user_list_by_name(
    query_params: Annotated[user_schemas.UserListQuery, Query()],
    users: UserRepository = Depends(get_user_repository),
):
    """
    List users whose user_id contains the given name.
    """
    found = users.get_user_list_by_name(query_params.name, query_params.first, query_params.last)
    if not found:
        raise NotFoundError("No users found")
    return {"data": found}


@router.post("", response_model=DataResponse[user_schemas.User])
async def insert_user(
    user_data: user_schemas.UserInsert,
    users: UserRepository = Depends(get_user_repository),
):
    """
    Register a new user.
    """
    if not get_setting("REGISTER_ENDPOINT_ENABLED"):
        raise ForbiddenError("User registration is currently disabled.")

    if users.get_by_user_id(user_data.user_id):
        raise BadRequestError("User ID already registered")

    try:
        db_user = users.insert_with_options(user_data)
    except IntegrityError as e:
        raise BadRequestError("User ID already registered") from e
    if not db_user.user_num:
        raise NotFoundError("User could not be created")
    logger.info("Registered user '%s' as %s.", db_user.user_id, db_user.user_num)
    return {"data": db_user}


@router.post("/login", response_model=DataResponse[token_schema.AccessToken])
async def login(
    login_data: user_schemas.UserLogin,
    users: UserRepository = Depends(get_user_repository),
):
    """
    Authenticate with user_id and password digest, and return a signed access token.
    """
    db_user = users.get_by_user_id(login_data.user_id)
    if db_user is None:
        raise NotFoundError("User not found")
    if not auth.authenticate_user(db_user, login_data.user_password):
        raise UnauthorizedError("Incorrect user ID or password")
    return {"data": auth.sign_token(db_user)}


@router.put("", response_model=DataResponse[user_schemas.User])
async def update_user(
    user_update: user_schemas.UserUpdate,
    payload: token_schema.TokenPayload = Depends(auth.get_token_payload),
    users: UserRepository = Depends(get_user_repository),
):
    """
    Update the caller's own profile. The target is always the token's user.
    """
    if user_update.user_id is not None:
        existing_user = users.get_by_user_id(user_update.user_id)
        if existing_user and existing_user.user_num != payload.user_num:
            raise BadRequestError("User ID already registered")

    try:
        db_user = users.update_with_options(payload.user_num, user_update)
    except IntegrityError as e:
        raise BadRequestError("User ID already registered") from e
    if db_user is None:
        raise NotFoundError("User not found")
    return {"data": db_user}


@router.get("/mylist/{user_id}", response_model=DataResponse[picture_schemas.PictureList])
async def get_my_list(
    query_params: Annotated[picture_schemas.MyListQuery, Query()],
    user_id: str = Path(..., min_length=5, max_length=64),
    users: UserRepository = Depends(get_user_repository),
    pictures: PictureRepository = Depends(get_picture_repository),
):
    """
    List a user's pictures in the given state: N for held, Y for listed for sale.
    """
    db_user = users.get_by_user_id(user_id)
    if db_user is None:
        raise NotFoundError("User not found")

    rows, total = pictures.get_my_list(db_user.user_num, query_params)
    if not rows:
        raise NotFoundError("No pictures found")
    return {"data": {"total": total, "items": rows}}


@router.get("/history/{user_num1}", response_model=DataResponse[history_schemas.HistoryList])
async def get_history(
    page: Annotated[PageQuery, Query()],
    user_num1: int = Path(..., ge=1),
    histories: HistoryRepository = Depends(get_history_repository),
):
    """
    Trade history of a user, newest first.
    """
    rows, total = histories.get_history(user_num1, page)
    if not rows:
        raise NotFoundError("No history found")
    return {"data": {"total": total, "items": rows}}


@router.get("/{user_num}", response_model=DataResponse[Optional[user_schemas.User]])
async def get_one(
    user_num: int,
    users: UserRepository = Depends(get_user_repository),
):
    """
    Retrieve a specific user. Responds with {"data": null} when there is no such user.
    """
    return {"data": users.get_one(user_num)}
