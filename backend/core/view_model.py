"""
Derived views over an inventory snapshot, plus the application state the
presentation layer owns.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from schemas.inventory import InventoryRecord

DEFAULT_CATEGORY = "Unknown"


def display_name(name: str) -> str:
    if not name:
        return name
    return name[0].upper() + name[1:]


def display_category(category: Optional[str]) -> str:
    if not category:
        return DEFAULT_CATEGORY
    return category[0].upper() + category[1:]


def parse_quantity(raw: Any) -> int:
    """Quantity typed into the form. Anything that is not a positive integer becomes 1."""
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return 1
    return value if value > 0 else 1


def filter_inventory(records: Iterable[InventoryRecord], query: Optional[str]) -> List[InventoryRecord]:
    needle = (query or "").lower()
    return [r for r in records if needle in r.name.lower()]


def distinct_categories(records: Iterable[InventoryRecord]) -> List[str]:
    # dict keeps first-seen order
    seen = {}
    for r in records:
        seen.setdefault(r.category or DEFAULT_CATEGORY, None)
    return list(seen)


@dataclass
class SelectedImage:
    filename: str
    data: bytes
    content_type: str = "application/octet-stream"


@dataclass
class AddItemForm:
    item_name: str = ""
    quantity: int = 1
    category: str = ""
    image: Optional[SelectedImage] = None

    def set_quantity(self, raw: Any) -> None:
        self.quantity = parse_quantity(raw)


@dataclass
class InventoryState:
    """State owned by the presentation layer and handed to its event handlers."""

    snapshot: List[InventoryRecord] = field(default_factory=list)
    search_query: str = ""
    open: bool = False
    form: AddItemForm = field(default_factory=AddItemForm)

    def filtered(self) -> List[InventoryRecord]:
        return filter_inventory(self.snapshot, self.search_query)

    def categories(self) -> List[str]:
        return distinct_categories(self.snapshot)

    def replace_snapshot(self, records: Iterable[InventoryRecord]) -> None:
        self.snapshot = list(records)

    def open_form(self) -> None:
        self.open = True

    def close_form(self) -> None:
        # typed fields are kept; only the selected photo is cleared
        self.open = False
        self.form.image = None
