"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from panels.web.exceptions import register_exception_handlers
from panels.web.routers import (
    boq_router,
    designs_router,
    feedback_router,
    import_router,
    layouts_router,
    placement_router,
    properties_router,
)
from panels.web.schemas import ErrorResponseSchema


# Documented on every route; bodies come from the registered handlers
ERROR_RESPONSES: dict[int | str, dict] = {
    status: {"model": ErrorResponseSchema} for status in (400, 403, 404, 409, 422, 502)
}


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="Panel Configurator API",
        description="REST API for designing hotel switch panels and importing projects",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS middleware for browser access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(designs_router, prefix="/api/v1", responses=ERROR_RESPONSES)
    app.include_router(layouts_router, prefix="/api/v1", responses=ERROR_RESPONSES)
    app.include_router(properties_router, prefix="/api/v1", responses=ERROR_RESPONSES)
    app.include_router(boq_router, prefix="/api/v1", responses=ERROR_RESPONSES)
    app.include_router(feedback_router, prefix="/api/v1", responses=ERROR_RESPONSES)
    app.include_router(import_router, prefix="/api/v1", responses=ERROR_RESPONSES)
    app.include_router(placement_router, prefix="/api/v1", responses=ERROR_RESPONSES)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


# Application instance for ASGI servers (uvicorn)
app = create_app()
