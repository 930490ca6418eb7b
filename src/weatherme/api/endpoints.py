"""API endpoints for the weather relay."""

import logging
import time
from typing import Any, AsyncIterator, Awaitable, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from weatherme.config import SERVICE_NAME, SERVICE_VERSION
from weatherme.weather.client import OpenWeatherClient
from weatherme.weather.errors import WeatherServiceError
from weatherme.weather.models import ErrorResponse, HealthStatus
from weatherme.weather.service import WeatherService

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or invalid parameters"},
    401: {"model": ErrorResponse, "description": "Provider rejected the server's API key"},
    404: {"model": ErrorResponse, "description": "No data for the requested location"},
    500: {"model": ErrorResponse, "description": "Provider or network failure"},
}


async def get_weather_service(request: Request) -> AsyncIterator[WeatherService]:
    """Dependency yielding a weather service bound to the app's settings."""
    settings = request.app.state.settings
    async with WeatherService(OpenWeatherClient.from_settings(settings)) as service:
        yield service


async def relay(call: Awaitable[Dict[str, Any]], description: str) -> Dict[str, Any]:
    """Await a service call and map relay errors to HTTP errors.

    Args:
        call: Pending service call
        description: What is being fetched, for logging

    Returns:
        Upstream payload

    Raises:
        HTTPException: With the status of the relay error
    """
    try:
        return await call
    except WeatherServiceError as e:
        logger.warning(f"Error fetching {description}: {e.status_code} {e.message}")
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/weather", tags=["weather"], responses=ERROR_RESPONSES)
async def get_weather_by_city(
    city: Optional[str] = Query(None, description="City name"),
    service: WeatherService = Depends(get_weather_service)
) -> Dict[str, Any]:
    """Current weather for a city, as returned by the provider."""
    return await relay(service.get_weather_by_city(city), f"city weather for {city!r}")


@router.get("/weather/geo", tags=["weather"], responses=ERROR_RESPONSES)
async def get_weather_by_coordinates(
    lat: Optional[str] = Query(None, description="Latitude in decimal degrees, -90 to 90"),
    lon: Optional[str] = Query(None, description="Longitude in decimal degrees, -180 to 180"),
    service: WeatherService = Depends(get_weather_service)
) -> Dict[str, Any]:
    """Current weather for a coordinate pair, as returned by the provider.

    Coordinates are taken as strings so malformed values produce a 400
    rather than FastAPI's 422.
    """
    return await relay(service.get_weather_by_coordinates(lat, lon), f"geo weather for {lat}, {lon}")


@router.get("/forecast", tags=["forecast"], responses=ERROR_RESPONSES)
async def get_forecast(
    lat: Optional[str] = Query(None, description="Latitude in decimal degrees, -90 to 90"),
    lon: Optional[str] = Query(None, description="Longitude in decimal degrees, -180 to 180"),
    service: WeatherService = Depends(get_weather_service)
) -> Dict[str, Any]:
    """Forecast series for a coordinate pair.

    Returns:
        The provider payload plus `daily` (every 8th entry) and `hourly`
        (first 24 entries)
    """
    return await relay(service.get_forecast(lat, lon), f"forecast for {lat}, {lon}")


@router.get("/forecast/city", tags=["forecast"], responses=ERROR_RESPONSES)
async def get_forecast_by_city(
    city: Optional[str] = Query(None, description="City name"),
    service: WeatherService = Depends(get_weather_service)
) -> Dict[str, Any]:
    """Forecast series for a city, with `daily` and `hourly` added."""
    return await relay(service.get_forecast_by_city(city), f"forecast for {city!r}")


@router.get("/health", tags=["health"], response_model=HealthStatus)
async def health_check(request: Request) -> HealthStatus:
    """Health check endpoint.

    Returns:
        Service status, uptime in seconds and whether an API key is configured
    """
    state = request.app.state
    return HealthStatus(
        status="ok",
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        uptime=round(time.monotonic() - state.started_at, 3),
        api_key_configured=bool(state.settings.api_key)
    )
