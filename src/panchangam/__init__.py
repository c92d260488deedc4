"""panchangam public API.

Keep this surface small: users should mostly interact with functions re-exported here.
"""

import logging

from .api import (
    default_provider,
    festival_tithi,
    panchangam_for,
    rashi_chart_for,
    sankrantis,
    tithi_boundaries,
)
from .core.config import DEFAULT_CONFIG, EngineConfig
from .core.errors import PanchangamError
from .core.types import CalendarSnapshot, Location, TithiBoundary

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "panchangam_for",
    "tithi_boundaries",
    "sankrantis",
    "rashi_chart_for",
    "festival_tithi",
    "default_provider",
    "Location",
    "CalendarSnapshot",
    "TithiBoundary",
    "EngineConfig",
    "DEFAULT_CONFIG",
    "PanchangamError",
]
