"""Client-side UI state."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from weatherme.weather.models import ForecastEntry, Observation


class Phase(str, Enum):
    """Lifecycle of the most recent query."""
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"


class AnimationCategory(str, Enum):
    """Background animation chosen from the observed conditions."""
    CLEAR = "clear"
    RAIN = "rain"
    SNOW = "snow"
    STORM = "storm"
    CLOUD = "cloud"


@dataclass
class ClientState:
    """Everything the view renders. Replaced field by field, never merged."""
    query: str = ""
    observation: Optional[Observation] = None
    forecast: List[ForecastEntry] = field(default_factory=list)
    error: str = ""
    loading: bool = False
    phase: Phase = Phase.IDLE


@dataclass(frozen=True)
class DisplayState:
    """Values derived from the latest observation."""
    local_time: str
    animation: AnimationCategory
    suggestion: str
    flag_url: Optional[str]
