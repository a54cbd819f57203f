"""
Data access for the users table.
"""
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.user_models import DBUser
from ..schemas import user_schemas


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        """Commits, rolling back before re-raising a unique constraint violation."""
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise

    def get_user_list_by_name(self, name: str, first: int = 0, last: int = 100) -> List[DBUser]:
        """Users whose user_id contains name literally (% and _ are not wildcards), in registration order."""
        return (
            self.db.query(DBUser)
            .filter(DBUser.user_id.contains(name, autoescape=True))
            .order_by(DBUser.user_num)
            .offset(first)
            .limit(last)
            .all()
        )

    def get_one(self, user_num: int) -> Optional[DBUser]:
        return self.db.query(DBUser).filter(DBUser.user_num == user_num).first()

    def get_by_user_id(self, user_id: str) -> Optional[DBUser]:
        return self.db.query(DBUser).filter(DBUser.user_id == user_id).first()

    def insert_with_options(self, new_value: user_schemas.UserInsert) -> DBUser:
        db_user = DBUser(**new_value.model_dump())
        self.db.add(db_user)
        self._commit()
        self.db.refresh(db_user)
        return db_user

    def update_with_options(self, user_num: int, new_value: user_schemas.UserUpdate) -> Optional[DBUser]:
        """Writes only the fields that were set. Returns None if the user does not exist."""
        db_user = self.get_one(user_num)
        if db_user is None:
            return None
        for key, value in new_value.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(db_user, key, value)
        self._commit()
        self.db.refresh(db_user)
        return db_user
