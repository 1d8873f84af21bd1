from sqlalchemy import Column, DateTime, LargeBinary, String
from sqlalchemy.sql import func
from .database import Base


class Image(Base):
    """Stored image binary for item photos, keyed by its upload path (images/<millis>_<name>)."""
    __tablename__ = "images"

    path = Column(String, primary_key=True)
    data = Column(LargeBinary, nullable=False)
    content_type = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
