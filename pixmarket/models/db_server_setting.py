"""
Runtime feature flags, editable in the database while the server runs.
"""
from sqlalchemy import Column, DateTime, Integer, String, Text, func

from ..db.database import Base


class ServerSetting(Base):
    """One flag such as REGISTER_ENDPOINT_ENABLED. The value is kept as text and parsed on load."""
    __tablename__ = "server_settings"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(64), unique=True, index=True, nullable=False)
    value = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    updatedAt = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
