"""Configuration settings for the WeatherMe relay and client."""

import os
from typing import Final, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from weatherme.weather.errors import ConfigurationError

load_dotenv()

SERVICE_NAME: Final[str] = "weatherme-relay"
SERVICE_VERSION: Final[str] = "0.1.0"

# Upstream provider
OPENWEATHER_API_BASE_URL: Final[str] = "https://api.openweathermap.org/data/2.5"
UNITS: Final[str] = "metric"
UPSTREAM_TIMEOUT_SECONDS: float = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "30"))

# Forecast decoration: the provider samples every 3 hours
DAILY_STRIDE: Final[int] = 8
HOURLY_WINDOW: Final[int] = 24

# Server configuration
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "5000"))
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Client configuration
RELAY_URL: str = os.getenv("RELAY_URL", f"http://localhost:{PORT}")
HOME_LOCATION: Optional[str] = os.getenv("WEATHERME_HOME_LOCATION") or None
GEOCODING_USER_AGENT: Final[str] = "WeatherMe/0.1 (weatherme@example.com)"


class RelaySettings(BaseModel):
    """Configuration injected into the relay application."""
    api_key: str = Field(..., min_length=1, repr=False, description="OpenWeatherMap API key")
    base_url: str = Field(OPENWEATHER_API_BASE_URL, description="Upstream API base URL")
    units: str = Field(UNITS, description="Unit system requested from upstream")
    timeout: float = Field(UPSTREAM_TIMEOUT_SECONDS, gt=0, description="Upstream timeout in seconds")

    @classmethod
    def from_env(cls) -> "RelaySettings":
        """Build settings from the environment.

        Raises:
            ConfigurationError: If OPENWEATHER_API_KEY is not set
        """
        api_key = os.getenv("OPENWEATHER_API_KEY", "").strip()
        if not api_key:
            raise ConfigurationError("OPENWEATHER_API_KEY is not configured")
        return cls(api_key=api_key)
