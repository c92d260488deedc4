"""
panchangam.engines.interfaces
-----------------------------
The boundary between the calendar engines and whatever supplies raw
astronomy.

Reference frame: every `jd_ut` is a Julian Date in Universal Time. Providers
apply ΔT internally. Longitudes are tropical, geocentric, apparent, in
[0, 360). The ayanamsa is returned as a positive angle and the engines form
sidereal = tropical − ayanamsa.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional, Protocol

from ..core.types import Location, MoonTimes, SunTimes


class Body(str, Enum):
    SUN = "sun"
    MOON = "moon"
    MARS = "mars"
    MERCURY = "mercury"
    JUPITER = "jupiter"
    VENUS = "venus"
    SATURN = "saturn"
    RAHU = "rahu"  # mean ascending lunar node


MANDATORY_BODIES = (Body.SUN, Body.MOON)


class EphemerisProvider(Protocol):
    def longitude(self, body: Body, jd_ut: float) -> Optional[float]:
        """
        Tropical longitude in degrees, or None when the provider does not
        model `body` (planets are optional). Sun and Moon must be provided;
        a failure for them raises EphemerisUnavailableError.
        """
        ...

    def ayanamsa(self, jd_ut: float) -> float:
        """Positive precession correction in degrees (Lahiri ~23.86 at J2000)."""
        ...

    def sun_times(self, d: date, location: Location) -> SunTimes:
        """Sunrise/sunset JD (UT) for the local civil date `d`; None in polar day/night."""
        ...

    def moon_times(self, d: date, location: Location) -> MoonTimes:
        """Moonrise/moonset JD (UT) within the local civil date `d`; None when absent."""
        ...
