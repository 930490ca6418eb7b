import httpx
import pytest

from weatherme.weather.client import OpenWeatherClient
from weatherme.weather.errors import NotFound, Unauthorized, UpstreamError

from conftest import observation_payload


@pytest.mark.asyncio
async def test_current_by_city_sends_key_and_units(weather_client, provider):
    async with weather_client:
        data = await weather_client.get_current_by_city("London")

    assert data == observation_payload()
    params = provider.requests[0].url.params
    assert params["q"] == "London"
    assert params["appid"] == "test-key"
    assert params["units"] == "metric"
    assert str(provider.requests[0].url).startswith("https://api.openweathermap.org/data/2.5/weather")


@pytest.mark.asyncio
async def test_forecast_by_coordinates_uses_forecast_resource(weather_client, provider):
    async with weather_client:
        data = await weather_client.get_forecast_by_coordinates(51.5, -0.12)

    assert len(data["list"]) == 40
    request = provider.requests[0]
    assert request.url.path == "/data/2.5/forecast"
    assert request.url.params["lat"] == "51.5"
    assert request.url.params["lon"] == "-0.12"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,error",
    [(404, NotFound), (401, Unauthorized), (400, UpstreamError), (429, UpstreamError), (502, UpstreamError)],
)
async def test_status_errors_are_mapped(weather_client, provider, status, error):
    provider.handler = lambda request: httpx.Response(status, json={"message": "error"})

    async with weather_client:
        with pytest.raises(error) as exc_info:
            await weather_client.get_current_by_city("Atlantis")

    assert exc_info.value.status_code in (400, 401, 404, 500)
    if status == 404:
        assert "Atlantis" in exc_info.value.message


@pytest.mark.asyncio
async def test_timeout_is_an_upstream_error(weather_client, provider):
    def slow(request):
        raise httpx.ReadTimeout("timed out", request=request)

    provider.handler = slow

    async with weather_client:
        with pytest.raises(UpstreamError):
            await weather_client.get_current_by_coordinates(1.0, 2.0)


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [b"not json", b"[1, 2, 3]"])
async def test_invalid_body_is_an_upstream_error(weather_client, provider, content):
    provider.handler = lambda request: httpx.Response(200, content=content)

    async with weather_client:
        with pytest.raises(UpstreamError):
            await weather_client.get_forecast_by_city("London")


def test_custom_base_url_is_normalized():
    client = OpenWeatherClient(api_key="k", base_url="http://localhost:9000/owm/")

    assert client.base_url == "http://localhost:9000/owm"
