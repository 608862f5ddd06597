"""FastAPI application - package builder service."""

import logging

from fastapi import FastAPI

from backend.app.api.routes.builder import router as builder_router
from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.api.routes.packages import router as packages_router
from backend.app.config import get_settings

logging.basicConfig(level=get_settings().log_level)

app = FastAPI(title="Package Builder API", version="0.1.0")

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(builder_router, tags=["builder"])
app.include_router(packages_router, tags=["packages"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Package Builder API", "version": "0.1.0"}
