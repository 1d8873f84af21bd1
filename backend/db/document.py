from sqlalchemy import JSON, Column, Integer, String, UniqueConstraint
from .database import Base


class Document(Base):
    """One keyed document in a named collection. Rows are scanned in id (insertion) order."""
    __tablename__ = "documents"
    __table_args__ = (
        UniqueConstraint("collection", "key", name="ux_documents_collection_key"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    collection = Column(String(255), nullable=False, index=True)
    key = Column(String, nullable=False)
    fields = Column(JSON, nullable=False, default=dict)

    @property
    def to_schema(self):
        return {
            "key": self.key,
            "fields": dict(self.fields or {}),
        }
