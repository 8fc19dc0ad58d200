"""Health & Readiness Probes — liveness plus database and image-directory checks.

Invariants:
    - GET /api/health/ returns 200 whenever the process serves requests
    - GET /api/health/ready returns 503 naming every failed check
"""

import logging
import os

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from marketplace.config import Settings, get_settings
from marketplace.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": "marketplace-api"}


@router.get("/ready")
async def readiness_check(settings: Settings = Depends(get_settings)):
    manager = database.db_manager
    checks = {
        "database": bool(manager) and await manager.health_check(),
        "images": settings.images_dir.is_dir() and os.access(settings.images_dir, os.W_OK),
    }
    failed = [name for name, ok in checks.items() if not ok]
    if failed:
        logger.warning(f"Readiness failed: {', '.join(failed)}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "failed": failed},
        )
    return {"status": "ready", "checks": {name: "healthy" for name in checks}}
