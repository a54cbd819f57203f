"""
Trade history model for SQLAlchemy ORM.
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from ..db.database import Base


class DBHistory(Base):
    """One completed trade. user_num1 sold the picture to user_num2."""
    __tablename__ = "Histories"

    history_num = Column(Integer, primary_key=True, index=True, autoincrement=True)
    createdAt = Column(DateTime, server_default=func.now(), nullable=False)
    user_num1 = Column(Integer, ForeignKey("users.user_num"), nullable=False, index=True)
    user_num2 = Column(Integer, ForeignKey("users.user_num"), nullable=False, index=True)
    picture_url = Column(String(100), nullable=False)
    picture_title = Column(String(45), nullable=False)
    picture_price = Column(Integer, nullable=False)

    user1 = relationship("DBUser", foreign_keys=[user_num1])
    user2 = relationship("DBUser", foreign_keys=[user_num2])
