"""
FastAPI application factory.
Wires routes, middleware and the request error handler around an AppContext.
"""
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from upload_gateway import __version__
from upload_gateway.api.router import api_router
from upload_gateway.config import load_settings
from upload_gateway.context import AppContext, build_context
from upload_gateway.errors import RequestError
from upload_gateway.middleware.metrics_middleware import MetricsMiddleware


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """
    Create the FastAPI app.

    Args:
        context: Prebuilt application context. When omitted, settings are
            loaded from the environment and a new S3 client is created.

    Raises:
        StartupConfigurationError: If no context is given and the
            environment is missing required settings
    """
    if context is None:
        context = build_context(load_settings())

    app = FastAPI(
        title="Upload Gateway",
        description="Relays uploaded files to S3-compatible object storage",
        version=__version__,
    )
    app.state.context = context

    app.add_middleware(MetricsMiddleware)

    @app.exception_handler(RequestError)
    async def request_error_handler(request: Request, exc: RequestError):
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    app.include_router(api_router)

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )

    return app
