from fastapi import FastAPI
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from core.config import settings
from core.log import configure_logging
from db.database import create_db_and_tables
from routers.inventory import router as inventory_router
from routers.images import router as images_router
from contextlib import asynccontextmanager


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    await create_db_and_tables()
    yield


app = FastAPI(
    title="Stockroom Inventory API",
    description="API for tracking inventory items, their quantities, categories and photos",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}


# Image serving routes (database image store)
app.include_router(images_router, prefix="/images", tags=["images"])

# Inventory routes
app.include_router(inventory_router, prefix="/inventory", tags=["inventory"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
