"""
inventory_client.py

Presentation-side client for the inventory API.

What it provides:
- InventoryApiClient: a tiny requests-based client for the HTTP endpoints
- InventoryApp: the page controller. It owns one InventoryState (snapshot,
  search box, add-item form) and every event handler works on that state.
  Each mutation response carries a fresh snapshot which replaces the old one
  wholesale.

Environment variables expected:
- INVENTORY_API_URL: e.g. "http://localhost:8000"
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests

from core.view_model import InventoryState, SelectedImage, display_category, display_name
from schemas.inventory import InventoryRecord, OperationResult

logger = logging.getLogger(__name__)


class ApiError(RuntimeError):
    pass


@dataclass
class InventoryApiClient:
    base_url: str
    timeout: float = 30

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            resp = requests.request(
                method,
                self._url(path),
                headers={"Accept": "application/json"},
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            raise ApiError(f"{method} {path} failed: {e}") from e

        # 503 with a body is a failed mutation reported as a result, not a transport error
        if resp.status_code == 503:
            try:
                data = resp.json()
            except ValueError:
                data = None
            if isinstance(data, dict) and "result" in data:
                return data

        if resp.status_code >= 400:
            raise ApiError(f"{method} {path} failed ({resp.status_code}): {resp.text}")

        if resp.status_code == 204:
            return None
        return resp.json()

    def list_inventory(self, search: str = "") -> Dict[str, Any]:
        """Calls: GET /inventory/"""
        params = {"search": search} if search else None
        return self._request("GET", "/inventory/", params=params)

    def categories(self) -> List[str]:
        """Calls: GET /inventory/categories"""
        return self._request("GET", "/inventory/categories")

    def add_item(
        self,
        *,
        name: str,
        quantity: int,
        category: str = "",
        image: Optional[SelectedImage] = None,
    ) -> Dict[str, Any]:
        """Calls: POST /inventory/ (multipart form, optional photo)"""
        data = {"name": name, "quantity": str(quantity), "category": category}
        files = None
        if image is not None:
            files = {"photo": (image.filename, image.data, image.content_type)}
        return self._request("POST", "/inventory/", data=data, files=files)

    def remove_item(self, name: str) -> Dict[str, Any]:
        """Calls: POST /inventory/{name}/remove"""
        return self._request("POST", f"/inventory/{quote(name, safe='')}/remove")


@dataclass
class InventoryApp:
    client: InventoryApiClient
    state: InventoryState = field(default_factory=InventoryState)

    def _apply(self, data: Dict[str, Any]) -> None:
        if not data.get("refreshed", True):
            # no fresh snapshot came back; keep the old one rather than blanking the list
            return
        self.state.replace_snapshot(InventoryRecord.model_validate(i) for i in data.get("items", []))

    def refresh(self) -> bool:
        try:
            data = self.client.list_inventory()
        except ApiError as e:
            logger.error("Error updating inventory: %s", e)
            return False
        self._apply(data)
        return True

    def set_search(self, query: str) -> None:
        self.state.search_query = query

    def select_image(self, filename: str, data: bytes, content_type: str = "application/octet-stream") -> None:
        self.state.form.image = SelectedImage(filename=filename, data=data, content_type=content_type)

    def submit_form(self) -> OperationResult:
        """Add the item described by the form, then close the form."""
        form = self.state.form
        try:
            data = self.client.add_item(
                name=form.item_name,
                quantity=form.quantity,
                category=form.category,
                image=form.image,
            )
            result = OperationResult.model_validate(data["result"])
            self._apply(data)
        except ApiError as e:
            logger.error("Error adding item: %s", e)
            result = OperationResult(ok=False, name=form.item_name, reason=str(e))
        self.state.close_form()
        return result

    def remove(self, name: str) -> OperationResult:
        try:
            data = self.client.remove_item(name)
        except ApiError as e:
            logger.error("Error removing item: %s", e)
            return OperationResult(ok=False, name=name, reason=str(e))
        self._apply(data)
        return OperationResult.model_validate(data["result"])

    def rows(self) -> List[Tuple[str, int, str, str]]:
        """(name, quantity, category, image_url) for the filtered list, formatted for display"""
        return [
            (display_name(r.name), r.quantity, display_category(r.category), r.image_url)
            for r in self.state.filtered()
        ]

    def category_labels(self) -> List[str]:
        return [display_category(c) for c in self.state.categories()]


def make_client_from_env() -> InventoryApiClient:
    base_url = os.getenv("INVENTORY_API_URL", "").strip()
    if not base_url:
        raise RuntimeError("Missing INVENTORY_API_URL")
    return InventoryApiClient(base_url=base_url)


if __name__ == "__main__":
    app = InventoryApp(make_client_from_env())
    if app.refresh():
        for row in app.rows():
            print(*row, sep="\t")
