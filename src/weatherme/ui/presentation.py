"""Pure display derivations from an observation."""

from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Tuple

from weatherme.ui.state import AnimationCategory, DisplayState
from weatherme.weather.models import Observation

COLD_SUGGESTION = "🧣 Wear a jacket, it's cold!"
MILD_SUGGESTION = "🧥 A light jacket is fine."
HOT_SUGGESTION = "🧢 Stay hydrated and wear sunglasses!"

FLAG_URL_TEMPLATE = "https://flagcdn.com/48x36/{code}.png"


def _mentions(*keywords: str) -> Callable[[str], bool]:
    return lambda text: any(keyword in text for keyword in keywords)


# Order matters: first match wins
ANIMATION_RULES: List[Tuple[Callable[[str], bool], AnimationCategory]] = [
    (_mentions("rain"), AnimationCategory.RAIN),
    (_mentions("snow"), AnimationCategory.SNOW),
    (_mentions("thunderstorm", "storm"), AnimationCategory.STORM),
    (_mentions("cloud"), AnimationCategory.CLOUD),
    (_mentions("clear", "sunny"), AnimationCategory.CLEAR),
]


def derive_animation_category(observation: Observation) -> AnimationCategory:
    """Pick the background animation for the current conditions.

    Keywords are matched against the condition label and description; the
    temperature only decides when no keyword matches.
    """
    condition = observation.condition
    text = f"{condition.main} {condition.description}".lower()
    for matches, category in ANIMATION_RULES:
        if matches(text):
            return category

    temp = observation.main.temp
    if temp < 0:
        return AnimationCategory.SNOW
    if temp > 25:
        return AnimationCategory.CLEAR
    return AnimationCategory.CLOUD


def derive_suggestion(observation: Observation) -> str:
    """Clothing suggestion bucketed by temperature (5 and 25 are mild)."""
    temp = observation.main.temp
    if temp < 5:
        return COLD_SUGGESTION
    if temp <= 25:
        return MILD_SUGGESTION
    return HOT_SUGGESTION


def local_utc_offset() -> timedelta:
    """UTC offset of the machine the client runs on."""
    return datetime.now().astimezone().utcoffset() or timedelta(0)


def format_full_datetime(moment: datetime) -> str:
    """Format like 'Thursday, January 1, 1970 at 1:00 AM'."""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{moment:%A, %B} {moment.day}, {moment.year} at {hour}:{moment:%M} {meridiem}"


def derive_local_time(observation: Observation, viewer_offset: Optional[timedelta] = None) -> str:
    """Formatted time for the observation, shifted by both UTC offsets.

    The observation instant is moved by the location's offset and by the
    viewer's offset, then read as a UTC wall clock. A viewer at UTC sees
    the location's wall-clock time.

    Args:
        observation: Latest observation
        viewer_offset: Viewer's UTC offset, east-positive; the local
            machine's if omitted

    Returns:
        Full date and time string, e.g. "Tuesday, November 14, 2023 at 11:13 PM"
    """
    if viewer_offset is None:
        viewer_offset = local_utc_offset()
    shifted = observation.dt + observation.timezone + viewer_offset.total_seconds()
    moment = datetime.fromtimestamp(shifted, tz=timezone.utc)
    return format_full_datetime(moment)


def flag_url(country: Optional[str]) -> Optional[str]:
    if not country:
        return None
    return FLAG_URL_TEMPLATE.format(code=country.lower())


def derive_display_state(observation: Observation, viewer_offset: Optional[timedelta] = None) -> DisplayState:
    """All derived display values for one observation. Nothing is cached."""
    return DisplayState(
        local_time=derive_local_time(observation, viewer_offset),
        animation=derive_animation_category(observation),
        suggestion=derive_suggestion(observation),
        flag_url=flag_url(observation.sys.country),
    )
