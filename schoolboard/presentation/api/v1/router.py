"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from schoolboard.presentation.api.v1.endpoints.health import router as health_router
from schoolboard.presentation.api.v1.endpoints.collections import router as collections_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(collections_router)
