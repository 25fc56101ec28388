"""Custom exceptions and error handlers for the REST API."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from panels.application.config import ConfigError
from panels.application.designs import DesignDataError
from panels.application.results import OperationResult
from panels.domain.services.layout import LayoutError
from panels.infrastructure.images import UnsupportedImageError

ERROR_STATUS_CODES: dict[str, int] = {
    "invalid": 422,
    "forbidden": 403,
    "not_found": 404,
    "conflict": 409,
    "db": 502,
}


class ServiceError(Exception):
    """Raised when a service call returns a failed OperationResult."""

    def __init__(self, result: OperationResult) -> None:
        self.result = result
        super().__init__(result.message)

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_CODES.get(self.result.error or "", 400)


def unwrap(result: OperationResult) -> dict[str, Any]:
    """Return the response body of a successful result, raise ServiceError otherwise."""
    if not result.success:
        raise ServiceError(result)
    return result.to_dict()


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.result.message,
                "error_type": exc.result.error or "unknown",
                "details": exc.result.data.get("details"),
            },
        )

    @app.exception_handler(DesignDataError)
    async def design_data_error_handler(
        request: Request, exc: DesignDataError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": exc.message,
                "error_type": "invalid_design",
                "details": exc.details,
            },
        )

    @app.exception_handler(LayoutError)
    async def layout_error_handler(request: Request, exc: LayoutError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"error": str(exc), "error_type": "layout", "details": None},
        )

    @app.exception_handler(UnsupportedImageError)
    async def image_error_handler(
        request: Request, exc: UnsupportedImageError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=415,
            content={"error": str(exc), "error_type": "unsupported_image", "details": None},
        )

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content={
                "error": exc.message,
                "error_type": f"config_{exc.error_type}",
                "details": exc.details,
            },
        )
