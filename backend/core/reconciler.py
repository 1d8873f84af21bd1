"""
Inventory reconciliation.

Given the stored document for an item (or None when the item does not exist)
and a requested change, decide what the next persisted document is. Nothing in
here touches a store; the caller performs the write described by the returned
Reconciliation.
"""

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

Action = Literal["create", "update", "decrement", "delete", "noop"]


@dataclass(frozen=True)
class Reconciliation:
    action: Action
    fields: Optional[Dict[str, Any]] = None
    merge: bool = False

    @property
    def writes(self) -> bool:
        return self.action != "noop"

    @property
    def deletes(self) -> bool:
        return self.action == "delete"


NOOP = Reconciliation(action="noop")


def apply_add(
    current: Optional[Dict[str, Any]],
    requested_quantity: int,
    category: str,
    image_url: str,
) -> Reconciliation:
    if current is None:
        return Reconciliation(
            action="create",
            fields={"quantity": requested_quantity, "category": category, "imageUrl": image_url},
        )

    # category/imageUrl are overwritten, only quantity accumulates
    return Reconciliation(
        action="update",
        fields={
            "quantity": int(current.get("quantity") or 0) + requested_quantity,
            "category": category,
            "imageUrl": image_url,
        },
        merge=True,
    )


def apply_remove(current: Optional[Dict[str, Any]]) -> Reconciliation:
    if current is None:
        return NOOP

    quantity = int(current.get("quantity") or 0)
    if quantity <= 1:
        return Reconciliation(action="delete")

    # Full overwrite without imageUrl: a partially decremented item loses its photo.
    fields: Dict[str, Any] = {"quantity": quantity - 1}
    if "category" in current:
        fields["category"] = current["category"]
    return Reconciliation(action="decrement", fields=fields)
