"""
Data access for the trade history table. Rows are only ever appended.
"""
from typing import List, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..models.history_models import DBHistory
from ..models.picture_models import DBPicture
from ..schemas.common import PageQuery


class HistoryRepository:
    def __init__(self, db: Session):
        self.db = db

    def insert(self, seller_num: int, buyer_num: int, picture: DBPicture) -> DBHistory:
        """Snapshots the picture at trade time. Flushes but does not commit."""
        db_history = DBHistory(
            user_num1=seller_num,
            user_num2=buyer_num,
            picture_url=picture.picture_url,
            picture_title=picture.picture_title,
            picture_price=picture.picture_price,
        )
        self.db.add(db_history)
        self.db.flush()
        return db_history

    def get_history(self, user_num: int, page: PageQuery) -> Tuple[List[DBHistory], int]:
        """Trades where the user was seller or buyer, newest first."""
        query = (
            self.db.query(DBHistory)
            .filter(or_(DBHistory.user_num1 == user_num, DBHistory.user_num2 == user_num))
            .order_by(DBHistory.createdAt.desc(), DBHistory.history_num.desc())
        )
        total = query.count()
        rows = query.offset(page.first).limit(page.last).all()
        return rows, total
