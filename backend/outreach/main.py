"""
LinkedIn Outreach Manager - FastAPI Application Entry Point
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .database import init_db
from .repositories import InMemoryContactRepository
from .routers import csv_import_router, contact_lists_router, contacts_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting {settings.app_name} API (storage: {settings.storage_backend})...")
    if settings.storage_backend == "memory":
        app.state.contact_repository = InMemoryContactRepository()
    else:
        init_db()
        logger.info("Database initialized")

    yield

    logger.info(f"Shutting down {settings.app_name} API...")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Import LinkedIn outreach contacts from CSV into dated contact lists",
    version="1.0.0",
    lifespan=lifespan
)

cors_origins = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]
cors_origins.extend(settings.cors_origin_list)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(csv_import_router)
app.include_router(contact_lists_router)
app.include_router(contacts_router)


@app.get("/api")
def api_root():
    """API root endpoint - API info."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs"
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
