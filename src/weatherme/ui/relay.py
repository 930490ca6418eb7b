"""HTTP client the presentation layer uses to talk to the relay."""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from weatherme.config import RELAY_URL
from weatherme.weather.models import ForecastEntry, Observation

logger = logging.getLogger(__name__)


class RelayRequestError(Exception):
    """Raised when the relay answers with an error or cannot be reached."""

    def __init__(self, detail: str, status_code: Optional[int] = None):
        """Initialize the error.

        Args:
            detail: Message from the relay, or a description of the failure
            status_code: HTTP status of the relay response; None if none arrived
        """
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class RelayClient:
    """Async client for the WeatherMe relay."""

    def __init__(self, base_url: str = RELAY_URL, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the relay client.

        Args:
            base_url: Relay base URL
            transport: Optional httpx transport, used by tests
        """
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(base_url=self.base_url, transport=transport)

    async def weather_by_city(self, city: str) -> Observation:
        """Get current weather for a city.

        Args:
            city: City name as typed by the user

        Returns:
            Latest observation for the city

        Raises:
            RelayRequestError: If the relay fails or returns an invalid observation
        """
        data = await self._get("/weather", {"city": city})
        return self._parse_observation(data)

    async def weather_by_coordinates(self, lat: float, lon: float) -> Observation:
        """Get current weather for a coordinate pair.

        Args:
            lat: Latitude
            lon: Longitude

        Returns:
            Latest observation at the coordinates

        Raises:
            RelayRequestError: If the relay fails or returns an invalid observation
        """
        data = await self._get("/weather/geo", {"lat": lat, "lon": lon})
        return self._parse_observation(data)

    async def forecast(self, lat: float, lon: float) -> List[ForecastEntry]:
        """Get daily forecast samples for a coordinate pair.

        Args:
            lat: Latitude
            lon: Longitude

        Returns:
            The relay's `daily` entries, one per day

        Raises:
            RelayRequestError: If the relay fails or returns an invalid forecast
        """
        data = await self._get("/forecast", {"lat": lat, "lon": lon})
        try:
            return [ForecastEntry.model_validate(entry) for entry in data.get("daily", [])]
        except ValidationError as e:
            raise RelayRequestError(f"Invalid forecast from relay: {e.error_count()} errors") from e

    async def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """GET a relay path and decode the JSON body.

        Raises:
            RelayRequestError: On transport failure, error status or non-JSON body
        """
        try:
            response = await self.client.get(path, params=params)
        except httpx.RequestError as e:
            logger.error(f"Relay unreachable at {self.base_url}: {e}")
            raise RelayRequestError("Relay is unreachable") from e

        if response.is_error:
            detail = self._error_detail(response)
            logger.warning(f"Relay returned {response.status_code} for {path}: {detail}")
            raise RelayRequestError(detail, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise RelayRequestError("Relay returned an invalid response", response.status_code) from e

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            return str(response.json().get("detail", response.reason_phrase))
        except (ValueError, AttributeError):
            return response.reason_phrase

    @staticmethod
    def _parse_observation(data: Dict[str, Any]) -> Observation:
        try:
            return Observation.model_validate(data)
        except ValidationError as e:
            raise RelayRequestError(f"Invalid observation from relay: {e.error_count()} errors") from e

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
