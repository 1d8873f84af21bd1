"""
Inventory operations: store round trips around the reconciler.

Every operation catches store failures at its boundary, logs them and returns a
failed OperationResult; nothing is retried.
"""

import logging
from typing import List, Optional

from core.config import INVENTORY_COLLECTION
from core.converters import document_to_record, optional_record
from core.errors import StoreError
from core.image_store import ImageStore, unique_image_path
from core.reconciler import apply_add, apply_remove
from db.document_store import DocumentStore
from schemas.inventory import InventoryRecord, OperationResult

logger = logging.getLogger(__name__)


class InventoryService:
    def __init__(
        self,
        documents: DocumentStore,
        images: Optional[ImageStore] = None,
        collection: str = INVENTORY_COLLECTION,
    ):
        self.documents = documents
        self.images = images
        self.collection = collection

    async def refresh(self) -> List[InventoryRecord]:
        """Full-collection scan, in the store's insertion order."""
        rows = await self.documents.list(self.collection)
        return [document_to_record(key, fields) for key, fields in rows]

    async def upload_image(self, filename: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Returns the photo URL, or "" when there is nothing to upload or the upload failed."""
        if not data or self.images is None:
            return ""
        path = unique_image_path(filename)
        try:
            url = await self.images.put(path, data, content_type)
        except StoreError as e:
            logger.error("[inventory] upload_image failed: %r", e)
            return ""
        logger.info("[inventory] uploaded %s (%d bytes)", path, len(data))
        return url

    async def add_item(self, name: str, quantity: int, category: str = "", image_url: str = "") -> OperationResult:
        try:
            current = await self.documents.get(self.collection, name)
            change = apply_add(current, quantity, category, image_url)
            await self.documents.set(self.collection, name, change.fields, merge=change.merge)
        except StoreError as e:
            logger.error("[inventory] add_item failed for %r: %r", name, e)
            return OperationResult(ok=False, name=name, reason=str(e))

        logger.info("[inventory] %s %r quantity=%s", change.action, name, change.fields["quantity"])
        return OperationResult(
            ok=True,
            action=change.action,
            name=name,
            record=document_to_record(name, change.fields),
        )

    async def remove_item(self, name: str) -> OperationResult:
        try:
            current = await self.documents.get(self.collection, name)
            change = apply_remove(current)
            if change.deletes:
                await self.documents.delete(self.collection, name)
            elif change.writes:
                await self.documents.set(self.collection, name, change.fields, merge=change.merge)
        except StoreError as e:
            logger.error("[inventory] remove_item failed for %r: %r", name, e)
            return OperationResult(ok=False, name=name, reason=str(e))

        if change.writes:
            logger.info("[inventory] %s %r", change.action, name)
        return OperationResult(
            ok=True,
            action=change.action,
            name=name,
            record=optional_record(name, change.fields),
        )
