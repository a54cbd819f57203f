"""
Picture token model for SQLAlchemy ORM.
"""
import enum

from sqlalchemy import JSON, Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from ..db.database import Base


class PictureState(str, enum.Enum):
    """Sale-listing flag of a picture. Stored as "Y"/"N"."""
    FOR_SALE = "Y"
    HELD = "N"


class DBPicture(Base):
    """SQLAlchemy model for the Picture table."""
    __tablename__ = "pictures"

    token_id = Column(String(100), primary_key=True, index=True)
    picture_url = Column(String(100), nullable=False)
    picture_title = Column(String(45), nullable=False)
    picture_info = Column(Text, nullable=True)
    picture_category = Column(String(45), nullable=False, index=True)
    picture_price = Column(Integer, nullable=False, default=0)
    picture_count = Column(Integer, nullable=False, default=0)
    picture_state = Column(
        Enum(
            PictureState,
            name="picture_state",
            native_enum=False,
            length=1,
            values_callable=lambda states: [state.value for state in states],
        ),
        nullable=False,
        default=PictureState.HELD,
        index=True,
    )
    picture_vector = Column(JSON, nullable=True)
    picture_norm = Column(Float, nullable=True)
    user_num = Column(Integer, ForeignKey("users.user_num"), nullable=False, index=True)
    createdAt = Column(DateTime, server_default=func.now(), nullable=False)

    user = relationship("DBUser", back_populates="pictures")
