import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import StoreError
from core.image_store import build_image_store
from core.inventory import InventoryService
from core.view_model import distinct_categories, filter_inventory, parse_quantity
from db.database import get_async_session
from db.document_store import DocumentStore
from schemas.inventory import (
    InventoryItemCreate,
    InventoryListResponse,
    InventoryMutationResponse,
    OperationResult,
)

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_IMAGE_BYTES = 25 * 1024 * 1024


async def get_inventory_service(db: AsyncSession = Depends(get_async_session)) -> InventoryService:
    return InventoryService(DocumentStore(db), build_image_store(db))


async def _snapshot(service: InventoryService):
    try:
        return await service.refresh()
    except StoreError as e:
        logger.error("[inventory] refresh failed: %r", e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Error loading inventory: {e}",
        )


async def _mutation_response(service: InventoryService, result: OperationResult):
    # the whole collection is re-fetched after every mutation
    try:
        items = await service.refresh()
    except StoreError as e:
        # the write may already be committed, so the result still goes back
        logger.error("[inventory] refresh after %s failed: %r", result.action or "mutation", e)
        body = InventoryMutationResponse(result=result, items=[], categories=[], refreshed=False)
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body.model_dump())

    body = InventoryMutationResponse(result=result, items=items, categories=distinct_categories(items))
    if not result.ok:
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body.model_dump())
    return body


@router.get("/", response_model=InventoryListResponse)
async def list_inventory(
    search: str = Query("", description="Case-insensitive substring of the item name"),
    service: InventoryService = Depends(get_inventory_service),
):
    """List inventory items matching the search, with categories of the whole inventory"""
    items = await _snapshot(service)
    return InventoryListResponse(
        items=filter_inventory(items, search),
        categories=distinct_categories(items),
    )


@router.get("/categories", response_model=List[str])
async def list_categories(service: InventoryService = Depends(get_inventory_service)):
    """Distinct categories in first-seen order"""
    return distinct_categories(await _snapshot(service))


@router.post("/", response_model=InventoryMutationResponse)
async def add_item(
    name: str = Form(""),
    quantity: Optional[str] = Form(None),
    category: str = Form(""),
    photo: Optional[UploadFile] = File(None),
    service: InventoryService = Depends(get_inventory_service),
):
    """
    Add an item, or add to the quantity of an existing one.
    A failed photo upload does not stop the add; the item is stored without an image.
    """
    try:
        item = InventoryItemCreate(name=name, quantity=parse_quantity(quantity), category=category)
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=[f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()],
        )

    image_url = ""
    if photo is not None and photo.filename:
        content_type = (photo.content_type or "").strip().lower()
        if content_type and content_type != "application/octet-stream" and not content_type.startswith("image/"):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File must be an image")
        data = await photo.read()
        if len(data) > MAX_IMAGE_BYTES:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Image size must be less than 25MB")
        image_url = await service.upload_image(photo.filename, data, content_type)

    result = await service.add_item(item.name, item.quantity, item.category, image_url)
    return await _mutation_response(service, result)


@router.post("/{name}/remove", response_model=InventoryMutationResponse)
async def remove_item(name: str, service: InventoryService = Depends(get_inventory_service)):
    """Take one unit of an item away; the item is deleted when its last unit goes"""
    result = await service.remove_item(name)
    return await _mutation_response(service, result)
