from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.database import get_async_session
from db.image import Image

router = APIRouter()


@router.get("/serve/{path:path}", response_class=Response)
async def serve_image(
    path: str,
    db: AsyncSession = Depends(get_async_session),
):
    """Serve image binary by its upload path. No auth required so img src works."""
    result = await db.execute(select(Image).where(Image.path == path))
    row = result.scalar_one_or_none()
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    return Response(content=bytes(row.data), media_type=row.content_type)
