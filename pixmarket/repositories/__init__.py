"""
Repository layer: one class per table, each built around a request-scoped Session.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from ..db.database import get_db
from .history_repository import HistoryRepository
from .picture_repository import PictureRepository
from .user_repository import UserRepository


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_picture_repository(db: Session = Depends(get_db)) -> PictureRepository:
    return PictureRepository(db)


def get_history_repository(db: Session = Depends(get_db)) -> HistoryRepository:
    return HistoryRepository(db)
