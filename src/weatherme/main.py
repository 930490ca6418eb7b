"""Main FastAPI application for the WeatherMe relay."""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional

import uvicorn
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from weatherme.api.endpoints import router as weather_router
from weatherme.config import DEBUG, HOST, LOG_LEVEL, PORT, SERVICE_NAME, SERVICE_VERSION, RelaySettings
from weatherme.logging_config import configure_logging
from weatherme.weather.errors import ConfigurationError

logger = logging.getLogger(__name__)

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info(f"Starting {SERVICE_NAME} {SERVICE_VERSION}")
    try:
        yield
    finally:
        logger.info(f"Shutting down {SERVICE_NAME}")


def list_routes(router: APIRouter) -> List[str]:
    """Routes declared on a router, as 'METHOD /path' strings.

    Reads the router itself; newer FastAPI releases no longer copy
    included routes into `app.routes`.
    """
    routes = []
    for route in router.routes:
        if isinstance(route, APIRoute) and route.include_in_schema:
            for method in sorted(route.methods):
                routes.append(f"{method} {route.path}")
    return routes


def create_app(settings: Optional[RelaySettings] = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: Relay settings; read from the environment if omitted

    Returns:
        Configured FastAPI application instance

    Raises:
        ConfigurationError: If no API key is configured
    """
    settings = settings or RelaySettings.from_env()

    app = FastAPI(
        title="WeatherMe Relay",
        description="Relays current weather and forecasts from OpenWeatherMap without exposing the API key",
        version=SERVICE_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(weather_router)
    valid_routes = list_routes(weather_router)

    # Registered last so every real route matches first
    @app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def route_not_found(path: str) -> JSONResponse:
        logger.info(f"Unmatched route: /{path}")
        return JSONResponse(
            status_code=404,
            content={"detail": "Route not found", "routes": valid_routes}
        )

    return app


def main() -> None:
    """Main entry point for the relay."""
    configure_logging(LOG_LEVEL)
    # Build eagerly so a missing API key stops the process before binding
    try:
        app = create_app()
    except ConfigurationError as e:
        logger.error(f"Refusing to start: {e}")
        raise
    logger.info(f"Starting server on {HOST}:{PORT}")
    uvicorn.run(
        app,
        host=HOST,
        port=PORT,
        log_level="info" if not DEBUG else "debug"
    )


if __name__ == "__main__":
    main()
