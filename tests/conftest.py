import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from weatherme.api.endpoints import get_weather_service
from weatherme.config import RelaySettings
from weatherme.main import create_app
from weatherme.weather.client import OpenWeatherClient
from weatherme.weather.service import WeatherService

BASE_DT = 1700000000  # 2023-11-14 22:13:20 UTC
STEP = 3 * 3600


def observation_payload(
    name="London",
    lat=51.5,
    lon=-0.12,
    temp=12.3,
    main="Clouds",
    description="broken clouds",
    dt=BASE_DT,
    timezone=0,
    country="GB",
    visibility=10000,
):
    """OpenWeatherMap /weather response shape."""
    return {
        "coord": {"lon": lon, "lat": lat},
        "weather": [{"id": 803, "main": main, "description": description, "icon": "04d"}],
        "base": "stations",
        "main": {"temp": temp, "feels_like": temp - 1, "temp_min": temp - 2, "temp_max": temp + 2,
                 "pressure": 1012, "humidity": 81},
        "visibility": visibility,
        "wind": {"speed": 4.12, "deg": 250},
        "clouds": {"all": 75},
        "dt": dt,
        "sys": {"type": 2, "id": 2075535, "country": country, "sunrise": 1699946400, "sunset": 1699979000},
        "timezone": timezone,
        "id": 2643743,
        "name": name,
        "cod": 200,
    }


def forecast_payload(count=40, start=BASE_DT):
    """OpenWeatherMap /forecast response shape with `count` 3-hourly samples."""
    entries = []
    for i in range(count):
        entries.append({
            "dt": start + i * STEP,
            "main": {"temp": 10.0 + i * 0.1, "humidity": 70},
            "weather": [{"main": "Rain", "description": f"light rain {i}"}],
            "dt_txt": f"sample {i}",
        })
    return {
        "cod": "200",
        "message": 0,
        "cnt": count,
        "list": entries,
        "city": {"name": "London", "country": "GB", "timezone": 0, "coord": {"lat": 51.5, "lon": -0.12}},
    }


class FakeProvider:
    """Stands in for OpenWeatherMap: records requests and answers via `handler`."""

    def __init__(self):
        self.requests = []
        self.handler = self.default_handler

    @staticmethod
    def default_handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/forecast"):
            return httpx.Response(200, json=forecast_payload())
        return httpx.Response(200, json=observation_payload())

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def settings():
    return RelaySettings(api_key="test-key")


@pytest.fixture
def weather_client(provider, settings):
    return OpenWeatherClient(api_key=settings.api_key, transport=httpx.MockTransport(provider))


@pytest.fixture
def test_app(settings, provider):
    """
    Relay app whose weather service talks to the fake provider.
    """
    app = create_app(settings)

    async def override_get_weather_service():
        client = OpenWeatherClient(api_key=settings.api_key, transport=httpx.MockTransport(provider))
        async with WeatherService(client) as service:
            yield service

    app.dependency_overrides[get_weather_service] = override_get_weather_service
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def api(test_app):
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
