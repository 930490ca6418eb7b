"""Weather relay service: input validation, upstream calls and forecast decoration."""

import logging
from typing import Any, Dict, List, Optional, Sequence, TypeVar, Union

from pydantic import ValidationError

from weatherme.config import DAILY_STRIDE, HOURLY_WINDOW
from weatherme.weather.client import OpenWeatherClient
from weatherme.weather.errors import BadRequest, UpstreamError
from weatherme.weather.models import ForecastSeries, Observation, WeatherQuery

logger = logging.getLogger(__name__)

T = TypeVar("T")

CoordinateParam = Union[str, float, None]


def select_daily_subset(series: Sequence[T], stride: int = DAILY_STRIDE) -> List[T]:
    """Pick one sample per day from a 3-hourly series.

    Takes every `stride`-th entry starting with the first, so the result has
    ceil(len(series) / stride) entries. Index based, not calendar aligned.
    """
    return list(series[::stride])


def select_hourly_window(series: Sequence[T], window: int = HOURLY_WINDOW) -> List[T]:
    """First `window` raw entries; at 3-hour granularity that covers ~3 days."""
    return list(series[:window])


def parse_city_query(city: Optional[str]) -> WeatherQuery:
    """Validate a city lookup.

    Raises:
        BadRequest: If the city is missing or blank
    """
    if city is None or not city.strip():
        raise BadRequest("City name is required")
    return WeatherQuery(city=city.strip())


def parse_coordinate_query(lat: CoordinateParam, lon: CoordinateParam) -> WeatherQuery:
    """Validate a coordinate lookup.

    Raises:
        BadRequest: If a coordinate is missing, non-numeric or out of range
    """
    if lat is None or lon is None or str(lat).strip() == "" or str(lon).strip() == "":
        raise BadRequest("Latitude and longitude are required")

    try:
        return WeatherQuery(lat=lat, lon=lon)
    except ValidationError as e:
        logger.warning(f"Rejected coordinates lat={lat!r}, lon={lon!r}: {e.error_count()} errors")
        raise BadRequest(
            f"Invalid coordinates: lat={lat}, lon={lon}. "
            "Latitude must be within [-90, 90] and longitude within [-180, 180]."
        )


class WeatherService:
    """Stateless relay between API callers and the weather provider."""

    def __init__(self, client: OpenWeatherClient):
        """Initialize the weather service.

        Args:
            client: Upstream weather client
        """
        self.client = client

    async def get_weather_by_city(self, city: Optional[str]) -> Dict[str, Any]:
        """Current conditions for a city, passed through unmodified.

        Raises:
            BadRequest: If the city is missing
            NotFound: If the provider does not know the city
            Unauthorized: If the provider rejects the API key
            UpstreamError: On any other provider failure
        """
        query = parse_city_query(city)
        data = await self.client.get_current_by_city(query.city)
        observation = self._check_observation(data)
        if not observation.name:
            raise UpstreamError("Weather provider returned an observation without a location name")

        logger.info(f"Current weather for '{query.city}' resolved to {observation.name}")
        return data

    async def get_weather_by_coordinates(self, lat: CoordinateParam, lon: CoordinateParam) -> Dict[str, Any]:
        """Current conditions for a coordinate pair, passed through unmodified."""
        query = parse_coordinate_query(lat, lon)
        data = await self.client.get_current_by_coordinates(query.lat, query.lon)
        self._check_observation(data)
        return data

    async def get_forecast(self, lat: CoordinateParam, lon: CoordinateParam) -> Dict[str, Any]:
        """Forecast for a coordinate pair with `daily` and `hourly` added."""
        query = parse_coordinate_query(lat, lon)
        data = await self.client.get_forecast_by_coordinates(query.lat, query.lon)
        return self._decorate_forecast(data)

    async def get_forecast_by_city(self, city: Optional[str]) -> Dict[str, Any]:
        """Forecast for a city with `daily` and `hourly` added."""
        query = parse_city_query(city)
        data = await self.client.get_forecast_by_city(query.city)
        return self._decorate_forecast(data)

    def _check_observation(self, data: Dict[str, Any]) -> Observation:
        try:
            return Observation.model_validate(data)
        except ValidationError as e:
            logger.error(f"Invalid observation payload: {e}")
            raise UpstreamError("Weather provider returned an invalid observation")

    def _decorate_forecast(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            series = ForecastSeries.model_validate(data).entries
        except ValidationError as e:
            logger.error(f"Invalid forecast payload: {e}")
            raise UpstreamError("Weather provider returned an invalid forecast")

        # `hourly` is really 3-hourly; the name is part of the response contract
        daily = select_daily_subset(series)
        hourly = select_hourly_window(series)
        logger.info(f"Forecast with {len(series)} entries -> {len(daily)} daily, {len(hourly)} hourly")
        return {**data, "daily": daily, "hourly": hourly}

    async def aclose(self):
        """Close the weather client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
