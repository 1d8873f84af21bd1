from typing import List, Literal, Optional

from pydantic import BaseModel, field_validator


OperationAction = Literal["create", "update", "decrement", "delete", "noop"]


class InventoryRecord(BaseModel):
    name: str
    quantity: int
    category: str = ""
    image_url: str = ""


class InventoryItemCreate(BaseModel):
    name: str
    quantity: int = 1
    category: str = ""

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        # the name is the document key and a path segment of the remove route
        if "/" in v:
            raise ValueError("name cannot contain '/'")
        return v

    @field_validator("category")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> str:
        return (v or "").strip()

    @field_validator("quantity")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("quantity must be a positive integer")
        return v


class OperationResult(BaseModel):
    ok: bool
    action: Optional[OperationAction] = None
    name: str
    record: Optional[InventoryRecord] = None
    reason: Optional[str] = None


class InventoryListResponse(BaseModel):
    items: List[InventoryRecord]
    categories: List[str]


class InventoryMutationResponse(InventoryListResponse):
    result: OperationResult
    # False when the re-fetch after the mutation failed; items/categories are then empty
    refreshed: bool = True
