"""HTTP client for the OpenWeatherMap API."""

import logging
from typing import Any, Dict, Optional

import httpx

from weatherme.config import OPENWEATHER_API_BASE_URL, UNITS, UPSTREAM_TIMEOUT_SECONDS, RelaySettings
from weatherme.weather.errors import NotFound, Unauthorized, UpstreamError

logger = logging.getLogger(__name__)


class OpenWeatherClient:
    """Async client for the OpenWeatherMap current-weather and forecast endpoints."""

    def __init__(
        self,
        api_key: str,
        base_url: str = OPENWEATHER_API_BASE_URL,
        units: str = UNITS,
        timeout: float = UPSTREAM_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """Initialize the weather client.

        Args:
            api_key: Provider API key, attached to every request as `appid`
            base_url: Base URL of the provider API
            units: Unit system requested from the provider
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.units = units
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings: RelaySettings) -> "OpenWeatherClient":
        return cls(
            api_key=settings.api_key,
            base_url=settings.base_url,
            units=settings.units,
            timeout=settings.timeout
        )

    async def get_current_by_city(self, city: str) -> Dict[str, Any]:
        """Fetch current conditions for a city name."""
        return await self._get("weather", {"q": city}, f"City '{city}' not found")

    async def get_current_by_coordinates(self, lat: float, lon: float) -> Dict[str, Any]:
        """Fetch current conditions for a coordinate pair."""
        return await self._get(
            "weather", {"lat": lat, "lon": lon}, f"No weather data for lat={lat}, lon={lon}"
        )

    async def get_forecast_by_city(self, city: str) -> Dict[str, Any]:
        """Fetch the 5 day / 3 hour forecast for a city name."""
        return await self._get("forecast", {"q": city}, f"City '{city}' not found")

    async def get_forecast_by_coordinates(self, lat: float, lon: float) -> Dict[str, Any]:
        """Fetch the 5 day / 3 hour forecast for a coordinate pair."""
        return await self._get(
            "forecast", {"lat": lat, "lon": lon}, f"No forecast data for lat={lat}, lon={lon}"
        )

    async def _get(self, resource: str, params: Dict[str, Any], not_found_message: str) -> Dict[str, Any]:
        """Issue a GET against the provider and map its failures.

        Args:
            resource: Provider resource name ('weather' or 'forecast')
            params: Query parameters identifying the location
            not_found_message: Message used when the provider answers 404

        Returns:
            Decoded JSON body, unmodified

        Raises:
            NotFound: Provider returned 404
            Unauthorized: Provider rejected the API key
            UpstreamError: Any other provider or transport failure
        """
        url = f"{self.base_url}/{resource}"
        query = {**params, "appid": self.api_key, "units": self.units}

        logger.info(f"Fetching {resource} for {params}")

        try:
            response = await self.client.get(url, params=query)
            response.raise_for_status()
            data = response.json()

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"HTTP error from OpenWeatherMap: {status} for {resource} {params}")
            if status == 404:
                raise NotFound(not_found_message) from e
            if status == 401:
                raise Unauthorized("Weather provider rejected the configured API key") from e
            raise UpstreamError(f"Weather provider returned HTTP {status}") from e
        except httpx.RequestError as e:
            logger.error(f"Request error to OpenWeatherMap: {e.__class__.__name__}: {e}")
            raise UpstreamError("Weather provider is unreachable") from e
        except ValueError as e:
            logger.error(f"Invalid JSON from OpenWeatherMap: {e}")
            raise UpstreamError("Weather provider returned an invalid response") from e

        if not isinstance(data, dict):
            raise UpstreamError("Weather provider returned an invalid response")

        return data

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
