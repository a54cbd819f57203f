"""
Endpoints for minting, listing, browsing and trading picture tokens.
"""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config.settings_loader import get_setting
from ..core.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from ..db.database import get_db
from ..models.picture_models import DBPicture, PictureState
from ..models.user_models import DBUser
from ..repositories import (HistoryRepository, PictureRepository,
                            get_history_repository, get_picture_repository)
from ..schemas import history_schemas, picture_schemas
from ..schemas.common import DataResponse, PageQuery
from ..utils import auth

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/pictures",
    tags=["pictures"],
    responses={404: {"description": "Not found"}},
)

TokenId = Annotated[str, Path(min_length=1, max_length=100)]


def _get_owned_picture(token_id: str, current_user: DBUser, pictures: PictureRepository) -> DBPicture:
    db_picture = pictures.view_picture(token_id)
    if db_picture is None:
        raise NotFoundError("Picture not found")
    if db_picture.user_num != current_user.user_num:
        logger.warning("User %s tried to modify picture '%s' owned by %s.",
                       current_user.user_num, token_id, db_picture.user_num)
        raise ForbiddenError("Not authorized to modify this picture")
    return db_picture


def _listing(rows, total):
    if not rows:
        raise NotFoundError("No pictures found")
    return {"data": {"total": total, "items": rows}}


@router.post("", response_model=DataResponse[picture_schemas.Picture])
async def insert_picture(
    picture_data: picture_schemas.PictureInsert,
    current_user: DBUser = Depends(auth.get_current_user),
    pictures: PictureRepository = Depends(get_picture_repository),
):
    """
    Register a picture token owned by the caller. New pictures are held, not for sale.
    """
    if pictures.view_picture(picture_data.token_id):
        raise BadRequestError("Token ID already registered")
    try:
        db_picture = pictures.insert_with_options(current_user.user_num, picture_data)
    except IntegrityError as e:
        raise BadRequestError("Token ID already registered") from e
    return {"data": db_picture}


@router.put("", response_model=DataResponse[picture_schemas.Picture])
async def update_picture(
    picture_update: picture_schemas.PictureUpdate,
    current_user: DBUser = Depends(auth.get_current_user),
    pictures: PictureRepository = Depends(get_picture_repository),
):
    """
    Partially update one of the caller's pictures.
    """
    _get_owned_picture(picture_update.token_id, current_user, pictures)
    pictures.save_with_options(picture_update)
    return {"data": pictures.view_picture(picture_update.token_id)}


@router.get("/search", response_model=DataResponse[picture_schemas.PictureList])
async def get_list_by_keywords(
    query_params: Annotated[picture_schemas.KeywordQuery, Query()],
    pictures: PictureRepository = Depends(get_picture_repository),
):
    """
    Pictures for sale whose title, info or category contains the keyword.
    """
    rows, total = pictures.get_list_by_keywords(query_params.keyword, query_params)
    return _listing(rows, total)


@router.get("/price", response_model=DataResponse[picture_schemas.PictureList])
async def view_by_price(
    query_params: Annotated[picture_schemas.PriceQuery, Query()],
    pictures: PictureRepository = Depends(get_picture_repository),
):
    """
    Pictures for sale ordered by price, highest first unless order=asc.
    """
    return _listing(*pictures.view_by_price(query_params))


@router.get("/category", response_model=DataResponse[picture_schemas.PictureList])
async def view_by_category(
    query_params: Annotated[picture_schemas.CategoryQuery, Query()],
    pictures: PictureRepository = Depends(get_picture_repository),
):
    return _listing(*pictures.view_by_category(query_params))


@router.get("/popularity", response_model=DataResponse[picture_schemas.PictureList])
async def view_by_popularity(
    page: Annotated[PageQuery, Query()],
    pictures: PictureRepository = Depends(get_picture_repository),
):
    """
    Pictures for sale ordered by view count, most viewed first.
    """
    return _listing(*pictures.view_by_popularity(page))


@router.get("/{token_id}", response_model=DataResponse[picture_schemas.Picture])
async def view_picture(
    token_id: TokenId,
    pictures: PictureRepository = Depends(get_picture_repository),
):
    """
    Picture details. Every call counts as one view.
    """
    if not pictures.update_count(token_id):
        raise NotFoundError("Picture not found")
    return {"data": pictures.view_picture(token_id)}


@router.get("/{token_id}/owner", response_model=DataResponse[picture_schemas.PictureOwner])
async def get_user_id(
    token_id: TokenId,
    pictures: PictureRepository = Depends(get_picture_repository),
):
    """
    Account of the user currently owning the picture.
    """
    row = pictures.get_user_id(token_id)
    if row is None:
        raise NotFoundError("Picture not found")
    return {"data": {"token_id": row.token_id, "user_account": row.user_account}}


@router.put("/{token_id}/vector", response_model=DataResponse[picture_schemas.Picture])
async def insert_vector(
    token_id: TokenId,
    vector: picture_schemas.PictureVector,
    current_user: DBUser = Depends(auth.get_current_user),
    pictures: PictureRepository = Depends(get_picture_repository),
):
    """
    Store the feature embedding of one of the caller's pictures.
    """
    _get_owned_picture(token_id, current_user, pictures)
    pictures.insert_vector(token_id, vector)
    return {"data": pictures.view_picture(token_id)}


@router.post("/{token_id}/sale", response_model=DataResponse[picture_schemas.Picture])
async def register_sale(
    token_id: TokenId,
    sale: picture_schemas.PictureSale,
    current_user: DBUser = Depends(auth.get_current_user),
    pictures: PictureRepository = Depends(get_picture_repository),
):
    """
    List one of the caller's pictures for sale at the given price.
    """
    if not get_setting("SALE_REGISTRATION_ENABLED"):
        raise ForbiddenError("Sale registration is currently disabled.")
    _get_owned_picture(token_id, current_user, pictures)
    pictures.register_sale(token_id, sale.picture_price)
    logger.info("Picture '%s' listed for sale at %s.", token_id, sale.picture_price)
    return {"data": pictures.view_picture(token_id)}


@router.delete("/{token_id}/sale", response_model=DataResponse[picture_schemas.Picture])
async def cancle_sale(
    token_id: TokenId,
    current_user: DBUser = Depends(auth.get_current_user),
    pictures: PictureRepository = Depends(get_picture_repository),
):
    """
    Take one of the caller's pictures off sale. The last price is kept.
    """
    _get_owned_picture(token_id, current_user, pictures)
    pictures.cancle_sale(token_id)
    return {"data": pictures.view_picture(token_id)}


@router.post("/{token_id}/purchase", response_model=DataResponse[history_schemas.History])
async def purchase_picture(
    token_id: TokenId,
    current_user: DBUser = Depends(auth.get_current_user),
    pictures: PictureRepository = Depends(get_picture_repository),
    histories: HistoryRepository = Depends(get_history_repository),
    db: Session = Depends(get_db),
):
    """
    Buy a picture listed for sale. The ownership transfer and the history
    record are committed together or not at all.
    """
    db_picture = pictures.view_picture(token_id)
    if db_picture is None:
        raise NotFoundError("Picture not found")
    if db_picture.picture_state != PictureState.FOR_SALE:
        raise ConflictError("Picture is not for sale")
    seller_num = db_picture.user_num
    buyer_num = current_user.user_num
    if seller_num == buyer_num:
        raise BadRequestError("Cannot purchase your own picture")

    try:
        db_history = histories.insert(seller_num, buyer_num, db_picture)
        if not pictures.transfer(token_id, seller_num, buyer_num):
            raise ConflictError("Picture was sold or withdrawn in the meantime")
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_history)
    logger.info("Picture '%s' sold by %s to %s for %s.",
                token_id, seller_num, buyer_num, db_history.picture_price)
    return {"data": db_history}
