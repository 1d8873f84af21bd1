"""
Keyed document collections on top of the `documents` table.

Every write commits immediately, so a get followed by a set is two separate
round trips and is not atomic.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import DocumentStoreError
from .document import Document

logger = logging.getLogger(__name__)


class DocumentStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _find(self, collection: str, key: str) -> Optional[Document]:
        result = await self.db.execute(
            select(Document).where(Document.collection == collection, Document.key == key)
        )
        return result.scalar_one_or_none()

    async def list(self, collection: str) -> List[Tuple[str, Dict[str, Any]]]:
        try:
            result = await self.db.execute(
                select(Document).where(Document.collection == collection).order_by(Document.id)
            )
            docs = [d.to_schema for d in result.scalars().all()]
        except SQLAlchemyError as e:
            raise DocumentStoreError(f"Failed to list {collection}: {e}") from e
        return [(d["key"], d["fields"]) for d in docs]

    async def get(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        try:
            doc = await self._find(collection, key)
        except SQLAlchemyError as e:
            raise DocumentStoreError(f"Failed to get {collection}/{key}: {e}") from e
        if doc is None:
            return None
        return dict(doc.fields or {})

    async def set(self, collection: str, key: str, fields: Dict[str, Any], merge: bool = False) -> None:
        """Write a document. merge=True updates the given fields and keeps the rest."""
        try:
            doc = await self._find(collection, key)
            if doc is None:
                self.db.add(Document(collection=collection, key=key, fields=dict(fields)))
            elif merge:
                doc.fields = {**(doc.fields or {}), **fields}
            else:
                doc.fields = dict(fields)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DocumentStoreError(f"Failed to set {collection}/{key}: {e}") from e
        logger.debug("set %s/%s merge=%s", collection, key, merge)

    async def delete(self, collection: str, key: str) -> None:
        try:
            await self.db.execute(
                delete(Document).where(Document.collection == collection, Document.key == key)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DocumentStoreError(f"Failed to delete {collection}/{key}: {e}") from e
        logger.debug("deleted %s/%s", collection, key)

    async def clear(self, collection: str) -> int:
        try:
            res = await self.db.execute(delete(Document).where(Document.collection == collection))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DocumentStoreError(f"Failed to clear {collection}: {e}") from e
        return int(getattr(res, "rowcount", 0) or 0)
