"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api import signup, tides
from src.api.errors import (
    flood_alert_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from src.config import get_settings
from src.database import init_db
from src.services.exceptions import FloodAlertError

logger = logging.getLogger(__name__)
settings = get_settings()

ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema on startup."""
    init_db()
    logger.info(f"Application started ({settings.environment})")
    yield


app = FastAPI(
    title="Bike Path Flood Alert",
    description="Flood alerts for the Mill Valley-Sausalito bike path",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(FloodAlertError, flood_alert_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Register routers
app.include_router(signup.router)
app.include_router(tides.router)

app.mount("/assets", StaticFiles(directory=ASSETS_DIR), name="assets")


@app.get("/", include_in_schema=False)
async def home():
    """Serve the home page."""
    return FileResponse(ASSETS_DIR / "index.html")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
