"""Presentation controller: turns user commands into relay calls and state."""

import logging
from typing import Awaitable, Callable, Optional, Tuple

from weatherme.ui.location import GeolocationDenied, GeolocationUnsupported, LocationProvider
from weatherme.ui.presentation import derive_display_state
from weatherme.ui.relay import RelayClient, RelayRequestError
from weatherme.ui.state import ClientState, DisplayState, Phase
from weatherme.weather.models import Observation

logger = logging.getLogger(__name__)

CITY_ERROR = "❌ Could not fetch weather for the city."
LOCATION_WEATHER_ERROR = "❌ Could not fetch weather by location."
LOCATION_FAILED_ERROR = "❌ Failed to get your location."
GEOLOCATION_UNSUPPORTED_ERROR = "Geolocation is not supported on this device."


class WeatherApp:
    """Owns the client state and applies the results of user queries.

    Every submission takes a new generation number. Results of a request that
    was superseded by a newer one are dropped, including its loading flag.
    """

    def __init__(self, relay: RelayClient, locator: Optional[LocationProvider] = None):
        """Initialize the controller.

        Args:
            relay: Client for the relay service
            locator: Device location provider; None when geolocation is unavailable
        """
        self.relay = relay
        self.locator = locator
        self.state = ClientState()
        self._generation = 0

    @property
    def display(self) -> Optional[DisplayState]:
        if self.state.observation is None:
            return None
        return derive_display_state(self.state.observation)

    def set_query(self, text: str) -> None:
        self.state.query = text

    async def submit_city_query(self, text: Optional[str] = None) -> None:
        """Look up current weather and forecast for a city name."""
        if text is not None:
            self.set_query(text)
        city = self.state.query.strip()
        if not city:
            return

        generation = self._begin()
        await self._run(generation, lambda: self.relay.weather_by_city(city), CITY_ERROR)

    async def submit_location_query(self) -> None:
        """Look up current weather and forecast for the device location."""
        if self.locator is None:
            self._begin()
            self._fail(GEOLOCATION_UNSUPPORTED_ERROR)
            return

        generation = self._begin()
        self.state.loading = True
        self.state.phase = Phase.LOADING
        self.state.error = ""
        try:
            lat, lon = await self.locator.locate()
        except GeolocationUnsupported as e:
            logger.warning(f"Geolocation unsupported: {e}")
            self._finish_failed(generation, GEOLOCATION_UNSUPPORTED_ERROR)
            return
        except GeolocationDenied as e:
            logger.warning(f"Geolocation failed: {e}")
            self._finish_failed(generation, LOCATION_FAILED_ERROR)
            return

        await self._run(
            generation,
            lambda: self.relay.weather_by_coordinates(lat, lon),
            LOCATION_WEATHER_ERROR,
            forecast_coordinates=(lat, lon),
        )

    async def _run(
        self,
        generation: int,
        fetch: Callable[[], Awaitable[Observation]],
        error_message: str,
        forecast_coordinates: Optional[Tuple[float, float]] = None,
    ) -> None:
        self.state.loading = True
        self.state.phase = Phase.LOADING
        self.state.error = ""
        try:
            try:
                observation = await fetch()
            except RelayRequestError as e:
                logger.warning(f"Weather request failed: {e.status_code} {e.detail}")
                if self._is_current(generation):
                    self._fail(error_message)
                return

            if not self._is_current(generation):
                logger.debug(f"Dropping stale result of request {generation}")
                return

            self.state.observation = observation
            self.state.error = ""
            self.state.phase = Phase.SUCCESS

            # Forecast follows the observation's own coordinates unless the device's are known
            lat, lon = forecast_coordinates or (observation.coord.lat, observation.coord.lon)
            await self._fetch_forecast(generation, lat, lon)
        finally:
            if self._is_current(generation):
                self.state.loading = False

    async def _fetch_forecast(self, generation: int, lat: float, lon: float) -> None:
        try:
            forecast = await self.relay.forecast(lat, lon)
        except RelayRequestError as e:
            logger.info(f"Forecast not available: {e.detail}")
            forecast = []

        if self._is_current(generation):
            self.state.forecast = forecast

    def _begin(self) -> int:
        self._generation += 1
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _fail(self, message: str) -> None:
        self.state.error = message
        self.state.observation = None
        self.state.forecast = []
        self.state.loading = False
        self.state.phase = Phase.FAILED

    def _finish_failed(self, generation: int, message: str) -> None:
        if self._is_current(generation):
            self._fail(message)
