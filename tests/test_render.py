from datetime import timedelta

from weatherme.ui.render import LOADING_TEXT, format_visibility, render
from weatherme.ui.state import ClientState
from weatherme.weather.models import ForecastEntry, Observation

from conftest import forecast_payload, observation_payload


def state_with_observation(**kwargs) -> ClientState:
    daily = forecast_payload()["list"][::8]
    return ClientState(
        observation=Observation.model_validate(observation_payload(**kwargs)),
        forecast=[ForecastEntry.model_validate(entry) for entry in daily],
    )


def test_format_visibility():
    assert format_visibility(10000) == "10.0 km"
    assert format_visibility(2500) == "2.5 km"
    assert format_visibility(None) == "N/A"


def test_render_observation_card():
    text = render(state_with_observation(temp=12.6), viewer_offset=timedelta(0))

    assert "London, GB" in text
    assert "https://flagcdn.com/48x36/gb.png" in text
    assert "Tuesday, November 14, 2023 at 10:13 PM" in text
    assert "13°C  [cloud]" in text
    assert "Broken clouds" in text
    assert "A light jacket is fine." in text
    assert "Humidity:   81%" in text
    assert "10.0 km" in text
    assert "Feels Like: 12°C" in text


def test_render_forecast_skips_first_daily_sample():
    text = render(state_with_observation(), viewer_offset=timedelta(0))

    assert "3-Day Forecast" in text
    assert "Light rain 0" not in text
    assert "Light rain 8" in text
    assert "Light rain 24" in text
    assert "Light rain 32" not in text


def test_render_missing_visibility():
    text = render(state_with_observation(visibility=None), viewer_offset=timedelta(0))

    assert "Visibility: N/A" in text


def test_render_loading_and_error():
    assert render(ClientState(loading=True)) == LOADING_TEXT
    assert render(ClientState(error="❌ Could not fetch weather for the city.")) == "❌ Could not fetch weather for the city."
