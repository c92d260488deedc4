# tests/conftest.py

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional

import pytest

from panchangam.core.time import date_to_jd, local_midnight_jd
from panchangam.core.types import Location, MoonTimes, SunTimes
from panchangam.engines.interfaces import Body

# 2024-01-01 00:00 UT
EPOCH = 2460310.5


@dataclass(frozen=True)
class LinearEphemeris:
    """
    Stub provider with linear motion: the Sun advances at sun_rate deg/day
    and the lunar phase (Moon - Sun) runs 0 -> 360 over `synodic` days,
    starting at phase0 at `epoch`. Sunrise/sunset at fixed local clock hours.
    """
    epoch: float = EPOCH
    sun0: float = 280.0
    sun_rate: float = 360.0 / 365.25
    synodic: float = 29.53
    phase0: float = 0.0
    ayanamsa_deg: float = 0.0
    sunrise_hour: float = 6.0
    sunset_hour: float = 18.0
    rahu: Optional[float] = None
    planets: Dict[Body, float] = field(default_factory=dict)

    def phase(self, jd: float) -> float:
        return (self.phase0 + 360.0 * (jd - self.epoch) / self.synodic) % 360.0

    def longitude(self, body: Body, jd_ut: float) -> Optional[float]:
        sun = (self.sun0 + self.sun_rate * (jd_ut - self.epoch)) % 360.0
        if body is Body.SUN:
            return sun
        if body is Body.MOON:
            return (sun + self.phase(jd_ut)) % 360.0
        if body is Body.RAHU:
            return self.rahu
        return self.planets.get(body)

    def ayanamsa(self, jd_ut: float) -> float:
        return self.ayanamsa_deg

    def sun_times(self, d: date, location: Location) -> SunTimes:
        mid = local_midnight_jd(d, location.offset_on(d))
        return SunTimes(mid + self.sunrise_hour / 24.0, mid + self.sunset_hour / 24.0)

    def moon_times(self, d: date, location: Location) -> MoonTimes:
        return MoonTimes(None, None)


@dataclass(frozen=True)
class HoleyEphemeris(LinearEphemeris):
    """LinearEphemeris whose Moon is unavailable inside [hole_start, hole_end)."""
    hole_start: float = 0.0
    hole_end: float = 0.0

    def longitude(self, body: Body, jd_ut: float) -> Optional[float]:
        if body is Body.MOON and self.hole_start <= jd_ut < self.hole_end:
            return None
        return super().longitude(body, jd_ut)


@pytest.fixture
def linear_provider():
    return LinearEphemeris()


@pytest.fixture
def utc_location():
    return Location(0.0, 0.0, 0.0, 0.0)


@pytest.fixture
def hyderabad():
    return Location(17.385, 78.4867, 505.0, "Asia/Kolkata")


def jd_of(y: int, m: int, d: int, hour: float = 0.0) -> float:
    return date_to_jd(date(y, m, d)) + hour / 24.0
