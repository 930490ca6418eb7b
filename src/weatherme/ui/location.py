"""Device location providers for the presentation client."""

import asyncio
import logging
from typing import Optional, Tuple

from geopy.exc import GeocoderServiceError, GeocoderTimedOut, GeocoderUnavailable
from geopy.geocoders import Nominatim

from weatherme.config import GEOCODING_USER_AGENT

logger = logging.getLogger(__name__)


class GeolocationUnsupported(Exception):
    """Raised when no way of locating the device is available."""
    pass


class GeolocationDenied(Exception):
    """Raised when locating the device is refused, times out or fails."""
    pass


class LocationProvider:
    """Source of the viewer's current coordinates."""

    async def locate(self) -> Tuple[float, float]:
        """Return (latitude, longitude) of the device.

        Raises:
            GeolocationUnsupported: If the capability is absent
            GeolocationDenied: If the location could not be obtained
        """
        raise NotImplementedError


class FixedLocationProvider(LocationProvider):
    """Provider for coordinates supplied up front (e.g. from the command line)."""

    def __init__(self, lat: float, lon: float):
        """Initialize the provider.

        Args:
            lat: Device latitude
            lon: Device longitude
        """
        self.lat = lat
        self.lon = lon

    async def locate(self) -> Tuple[float, float]:
        """Return the configured coordinates."""
        return self.lat, self.lon


class GeopyLocationProvider(LocationProvider):
    """Resolves the device's configured home place name through Nominatim."""

    def __init__(self, place: Optional[str], geolocator=None, timeout: float = 10.0):
        """Initialize the provider.

        Args:
            place: Free-text place name standing in for the device location
            geolocator: geopy geocoder (defaults to Nominatim)
            timeout: Geocoding timeout in seconds
        """
        self.place = place.strip() if place else None
        self.geolocator = geolocator or Nominatim(user_agent=GEOCODING_USER_AGENT, timeout=timeout)

    async def locate(self) -> Tuple[float, float]:
        """Geocode the configured place name.

        Returns:
            (latitude, longitude) of the place

        Raises:
            GeolocationUnsupported: If no place name is configured
            GeolocationDenied: If geocoding times out, fails or finds nothing
        """
        if not self.place:
            raise GeolocationUnsupported("No device location is configured")

        logger.info(f"Geocoding device location: {self.place}")
        try:
            # geopy is blocking
            location = await asyncio.to_thread(self.geolocator.geocode, self.place)
        except (GeocoderUnavailable, GeocoderTimedOut) as e:
            logger.error(f"Geocoding service unavailable for '{self.place}': {e}")
            raise GeolocationDenied("Location service timed out or is unavailable") from e
        except GeocoderServiceError as e:
            logger.error(f"Geocoding failed for '{self.place}': {e}")
            raise GeolocationDenied(f"Location lookup failed: {e}") from e

        if not location:
            raise GeolocationDenied(f"Location '{self.place}' not found")

        logger.info(f"Resolved '{self.place}' to ({location.latitude}, {location.longitude})")
        return location.latitude, location.longitude
