"""
Data access for the pictures table.

Listing queries only ever return pictures that are listed for sale, except
get_my_list which filters on the requested state.
"""
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.engine import Row
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from ..models.picture_models import DBPicture, PictureState
from ..models.user_models import DBUser
from ..schemas import picture_schemas
from ..schemas.common import PageQuery


class PictureRepository:
    def __init__(self, db: Session):
        self.db = db

    def _for_sale(self) -> Query:
        return self.db.query(DBPicture).filter(DBPicture.picture_state == PictureState.FOR_SALE)

    @staticmethod
    def _page(query: Query, page: PageQuery) -> Tuple[List[DBPicture], int]:
        total = query.count()
        rows = query.offset(page.first).limit(page.last).all()
        return rows, total

    def _update(self, token_id: str, values: dict) -> int:
        """Single UPDATE statement without loading the entity. Returns the affected row count."""
        count = (
            self.db.query(DBPicture)
            .filter(DBPicture.token_id == token_id)
            .update(values, synchronize_session=False)
        )
        self.db.commit()
        return count

    def insert_with_options(self, user_num: int, new_value: picture_schemas.PictureInsert) -> DBPicture:
        db_picture = DBPicture(**new_value.model_dump(), user_num=user_num, picture_state=PictureState.HELD)
        self.db.add(db_picture)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        self.db.refresh(db_picture)
        return db_picture

    def insert_vector(self, token_id: str, new_value: picture_schemas.PictureVector) -> int:
        return self._update(token_id, {
            DBPicture.picture_vector: new_value.picture_vector,
            DBPicture.picture_norm: new_value.picture_norm,
        })

    def save_with_options(self, new_value: picture_schemas.PictureUpdate) -> int:
        values = new_value.model_dump(exclude_unset=True, exclude={"token_id"})
        if not values:
            return self.db.query(DBPicture).filter(DBPicture.token_id == new_value.token_id).count()
        return self._update(new_value.token_id, values)

    def register_sale(self, token_id: str, picture_price: int) -> int:
        return self._update(token_id, {
            DBPicture.picture_price: picture_price,
            DBPicture.picture_state: PictureState.FOR_SALE,
        })

    def cancle_sale(self, token_id: str) -> int:
        """Back to held. The listed price is kept."""
        return self._update(token_id, {DBPicture.picture_state: PictureState.HELD})

    def get_list_by_keywords(self, keyword: str, page: PageQuery) -> Tuple[List[DBPicture], int]:
        query = (
            self._for_sale()
            .filter(or_(
                DBPicture.picture_title.contains(keyword, autoescape=True),
                DBPicture.picture_info.contains(keyword, autoescape=True),
                DBPicture.picture_category.contains(keyword, autoescape=True),
            ))
            .order_by(DBPicture.token_id)
        )
        return self._page(query, page)

    def get_my_list(self, user_num: int, query_params: picture_schemas.MyListQuery) -> Tuple[List[DBPicture], int]:
        query = (
            self.db.query(DBPicture)
            .filter(DBPicture.user_num == user_num, DBPicture.picture_state == query_params.state)
            .order_by(DBPicture.token_id)
        )
        return self._page(query, query_params)

    def view_by_price(self, query_params: picture_schemas.PriceQuery) -> Tuple[List[DBPicture], int]:
        price = DBPicture.picture_price
        ordering = price.asc() if query_params.order == picture_schemas.SortOrder.asc else price.desc()
        query = self._for_sale().order_by(ordering, DBPicture.token_id)
        return self._page(query, query_params)

    def view_by_category(self, query_params: picture_schemas.CategoryQuery) -> Tuple[List[DBPicture], int]:
        query = (
            self._for_sale()
            .filter(DBPicture.picture_category == query_params.category)
            .order_by(DBPicture.token_id)
        )
        return self._page(query, query_params)

    def view_by_popularity(self, page: PageQuery) -> Tuple[List[DBPicture], int]:
        query = self._for_sale().order_by(DBPicture.picture_count.desc(), DBPicture.token_id)
        return self._page(query, page)

    def view_picture(self, token_id: str) -> Optional[DBPicture]:
        return self.db.query(DBPicture).filter(DBPicture.token_id == token_id).first()

    def update_count(self, token_id: str) -> int:
        """Increments the view counter in the database: SET picture_count = picture_count + 1."""
        return self._update(token_id, {DBPicture.picture_count: DBPicture.picture_count + 1})

    def get_user_id(self, token_id: str) -> Optional[Row]:
        """Owner's account for a token, as a (token_id, user_account) row."""
        return (
            self.db.query(DBPicture.token_id, DBUser.user_account)
            .join(DBUser, DBPicture.user_num == DBUser.user_num)
            .filter(DBPicture.token_id == token_id)
            .first()
        )

    def transfer(self, token_id: str, seller_num: int, buyer_num: int) -> int:
        """
        Hands a listed picture to the buyer and takes it off sale.
        Matches only while the picture is still for sale and still owned by the
        seller, so of two concurrent purchases at most one updates a row.
        Does not commit; the caller owns the transaction.
        """
        return (
            self.db.query(DBPicture)
            .filter(
                DBPicture.token_id == token_id,
                DBPicture.picture_state == PictureState.FOR_SALE,
                DBPicture.user_num == seller_num,
            )
            .update(
                {DBPicture.user_num: buyer_num, DBPicture.picture_state: PictureState.HELD},
                synchronize_session=False,
            )
        )
