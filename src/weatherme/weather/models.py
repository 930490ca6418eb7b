"""Data models for the weather relay and client."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class WeatherQuery(BaseModel):
    """A lookup by city name or by coordinates, never both."""
    city: Optional[str] = Field(None, min_length=1, description="Free-text city name")
    lat: Optional[float] = Field(None, ge=-90, le=90, allow_inf_nan=False, description="Latitude in decimal degrees")
    lon: Optional[float] = Field(None, ge=-180, le=180, allow_inf_nan=False, description="Longitude in decimal degrees")

    @model_validator(mode="after")
    def check_single_form(self) -> "WeatherQuery":
        has_city = self.city is not None
        has_coordinates = self.lat is not None or self.lon is not None
        if has_city and has_coordinates:
            raise ValueError("Use either city or lat/lon, not both")
        if not has_city and (self.lat is None or self.lon is None):
            raise ValueError("Provide a city or both lat and lon")
        return self

    @property
    def by_city(self) -> bool:
        return self.city is not None


class UpstreamModel(BaseModel):
    """Provider payload fragment; unknown fields are kept."""
    model_config = ConfigDict(extra="allow")


class Coordinates(UpstreamModel):
    lat: float
    lon: float


class Condition(UpstreamModel):
    """One entry of the provider's `weather` array."""
    main: str = ""
    description: str = ""


class Readings(UpstreamModel):
    temp: float
    feels_like: Optional[float] = None
    humidity: Optional[int] = None


class Wind(UpstreamModel):
    speed: Optional[float] = None


class SystemInfo(UpstreamModel):
    country: Optional[str] = None


class Observation(UpstreamModel):
    """Current-conditions snapshot for one location."""
    name: str = ""
    coord: Coordinates
    weather: List[Condition] = Field(default_factory=list)
    main: Readings
    wind: Wind = Field(default_factory=Wind)
    sys: SystemInfo = Field(default_factory=SystemInfo)
    visibility: Optional[int] = Field(None, description="Visibility in metres")
    dt: int = Field(..., description="Observation time, Unix seconds UTC")
    timezone: int = Field(0, description="Location offset from UTC in seconds")

    @property
    def condition(self) -> Condition:
        return self.weather[0] if self.weather else Condition()


class ForecastEntry(UpstreamModel):
    """One 3-hourly forecast sample."""
    dt: int
    main: Readings
    weather: List[Condition] = Field(default_factory=list)
    dt_txt: Optional[str] = None

    @property
    def condition(self) -> Condition:
        return self.weather[0] if self.weather else Condition()


class ForecastSeries(UpstreamModel):
    """Raw forecast response: `list` holds samples in timestamp order."""
    entries: List[dict] = Field(..., alias="list")


class HealthStatus(BaseModel):
    """Health endpoint response model."""
    status: str = Field(..., description="Always 'ok' while the process serves requests")
    service: str
    version: str
    uptime: float = Field(..., description="Seconds since the application was created")
    api_key_configured: bool


class ErrorResponse(BaseModel):
    """Error response model."""
    detail: str = Field(..., description="Error message")
    routes: Optional[List[str]] = Field(None, description="Valid routes, for unmatched paths")
