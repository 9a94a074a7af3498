"""FastAPI application factory for the fixture API.

Serves the demo fixture collections through the backend's listing
contract so list views can be developed without the real backend.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from schoolboard.application.interfaces import CollectionSource
from schoolboard.config import get_settings
from schoolboard.infrastructure.dependencies import build_fixture_sources
from schoolboard.infrastructure.logging.log_config import setup_logging
from schoolboard.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging and report what is served."""
    setup_logging()
    sources: dict[str, CollectionSource] = app.state.fixture_sources
    logger.info(
        "Fixture API serving %d collection(s): %s",
        len(sources),
        ", ".join(sorted(sources)),
    )
    yield


async def _http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render errors in the backend's ``{ success, message }`` shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def create_app(fixture_sources: dict[str, CollectionSource] | None = None) -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=f"{settings.app_title} Fixture API",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.fixture_sources = (
        fixture_sources if fixture_sources is not None else build_fixture_sources(settings)
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(HTTPException, _http_exception_handler)

    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "schoolboard.main:app",
        host="0.0.0.0",
        port=get_settings().fixture_api_port,
        reload=True,
    )
