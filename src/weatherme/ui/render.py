"""Plain-text rendering of the client state."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from weatherme.ui.presentation import derive_display_state
from weatherme.ui.state import ClientState
from weatherme.weather.models import ForecastEntry, Observation

LOADING_TEXT = "Fetching weather data..."
FORECAST_DAYS = 3


def format_visibility(visibility: Optional[int]) -> str:
    if not visibility:
        return "N/A"
    return f"{visibility / 1000:.1f} km"


def format_forecast_day(entry: ForecastEntry, utc_offset: timedelta = timedelta(0)) -> str:
    moment = datetime.fromtimestamp(entry.dt, tz=timezone(utc_offset))
    return f"{moment:%a, %b} {moment.day}"


def render_observation(observation: Observation, viewer_offset: Optional[timedelta] = None) -> List[str]:
    display = derive_display_state(observation, viewer_offset)
    condition = observation.condition
    readings = observation.main

    heading = observation.name or "Unknown location"
    if observation.sys.country:
        heading = f"{heading}, {observation.sys.country}"

    lines = [heading]
    if display.flag_url:
        lines.append(f"Flag: {display.flag_url}")
    lines += [
        display.local_time,
        "",
        f"{round(readings.temp)}°C  [{display.animation.value}]",
        f"🌥 {condition.description.capitalize()}",
        display.suggestion,
        "",
        f"💧 Humidity:   {readings.humidity if readings.humidity is not None else 'N/A'}%",
        f"🌬 Wind Speed: {observation.wind.speed if observation.wind.speed is not None else 'N/A'} m/s",
        f"👁 Visibility: {format_visibility(observation.visibility)}",
    ]
    if readings.feels_like is not None:
        lines.append(f"🌡 Feels Like: {round(readings.feels_like)}°C")
    return lines


def render_forecast(forecast: List[ForecastEntry], utc_offset: timedelta = timedelta(0)) -> List[str]:
    # The first daily sample is the current period; show the days after it
    upcoming = forecast[1:1 + FORECAST_DAYS]
    if not upcoming:
        return []
    lines = [f"📅 {FORECAST_DAYS}-Day Forecast"]
    for entry in upcoming:
        description = entry.condition.description.capitalize()
        lines.append(f"  {format_forecast_day(entry, utc_offset):<12} {round(entry.main.temp):>4}°  {description}")
    return lines


def render(state: ClientState, viewer_offset: Optional[timedelta] = None) -> str:
    """Render the whole view for a terminal."""
    lines: List[str] = []
    if state.loading:
        lines.append(LOADING_TEXT)
    if state.error:
        lines.append(state.error)
    if state.observation is not None:
        lines += render_observation(state.observation, viewer_offset)
        location_offset = timedelta(seconds=state.observation.timezone)
        forecast_lines = render_forecast(state.forecast, location_offset)
        if forecast_lines:
            lines.append("")
            lines += forecast_lines
    return "\n".join(lines)
