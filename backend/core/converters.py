from typing import Any, Dict, Optional
from schemas.inventory import InventoryRecord


def document_to_record(key: str, fields: Dict[str, Any]) -> InventoryRecord:
    """Convert a stored inventory document to the API record"""
    return InventoryRecord(
        name=key,
        quantity=int(fields.get("quantity") or 0),
        category=fields.get("category") or "",
        image_url=fields.get("imageUrl") or "",
    )


def optional_record(key: str, fields: Optional[Dict[str, Any]]) -> Optional[InventoryRecord]:
    if fields is None:
        return None
    return document_to_record(key, fields)
