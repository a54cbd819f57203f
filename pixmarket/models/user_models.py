"""
User model for SQLAlchemy ORM.
"""
from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from ..db.database import Base


class DBUser(Base):
    """SQLAlchemy model for the User table."""
    __tablename__ = "users"

    user_num = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(String(64), unique=True, index=True, nullable=False)
    user_account = Column(String(255), nullable=False)
    user_password = Column(String(64), nullable=False)  # client-side SHA-256 hex digest
    user_privatekey = Column(String(255), nullable=False)
    createdAt = Column(DateTime, server_default=func.now(), nullable=False)

    pictures = relationship("DBPicture", back_populates="user")
