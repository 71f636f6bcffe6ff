"""FastAPI application factory for kubescout.

Usage::

    from kubescout.api.app import create_app

    app = create_app(config=config)

The factory is used by the ``serve`` CLI command and by unit tests.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from kubescout.api.routes import router
from kubescout.api.schemas import ErrorResponse
from kubescout.collector.normalize import MalformedResourceError
from kubescout.models.config import KubeScoutConfig
from kubescout.observability.logging import get_logger

_log = get_logger("api.app")

_API_PREFIX = "/api/v1"


def create_app(config: KubeScoutConfig | None = None) -> FastAPI:
    """Create and configure the kubescout FastAPI application.

    Args:
        config: KubeScoutConfig. Supplies the default cluster name, snapshot
                flags and repository classification thresholds.

    Returns:
        Configured FastAPI application, ready to be served by uvicorn.
    """
    from kubescout import __version__

    app = FastAPI(
        title="kubescout",
        summary="Kubernetes ownership and GitOps pattern inference API",
        version=__version__,
        description=(
            "kubescout classifies who manages each Kubernetes resource, builds a "
            "typed relation graph between resources and suggests an "
            "organizational structure from the GitOps repositories in use."
        ),
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
    )

    app.state.config = config or KubeScoutConfig()

    app.include_router(router, prefix=_API_PREFIX)
    app.mount("/metrics", make_asgi_app())

    # -----------------------------------------------------------------------
    # Exception handlers
    # -----------------------------------------------------------------------

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        _request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Map Pydantic validation errors to our error envelope."""
        errors = exc.errors()
        detail = ""
        if errors:
            locs = errors[0].get("loc", ())
            field = ".".join(str(part) for part in locs)
            detail = f"{field}: {errors[0].get('msg', '')}" if field else str(errors[0].get("msg", ""))

        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="INVALID_REQUEST", detail=detail).model_dump(),
        )

    @app.exception_handler(MalformedResourceError)
    async def malformed_resource_handler(
        _request: Request,
        exc: MalformedResourceError,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=ErrorResponse(error="MALFORMED_RESOURCE", detail=str(exc)).model_dump(),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all for unhandled exceptions; never expose stack traces."""
        _log.error(
            "unhandled_exception",
            path=str(request.url.path),
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="INTERNAL_ERROR",
                detail="An unexpected error occurred.",
            ).model_dump(),
        )

    return app
