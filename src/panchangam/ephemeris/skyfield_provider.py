# ephemeris/skyfield_provider.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from ..core.errors import EphemerisUnavailableError
from ..core.time import local_midnight_jd
from ..core.types import Location, MoonTimes, SunTimes
from ..engines.interfaces import Body
from ..reference import astro_args as aa
from . import require_ephemeris
from .ayanamsa import lahiri_ayanamsa

logger = logging.getLogger(__name__)

# DE421 segment names; outer planets only have barycentres
_TARGETS: Dict[Body, str] = {
    Body.SUN: "sun",
    Body.MOON: "moon",
    Body.MARS: "mars barycenter",
    Body.MERCURY: "mercury",
    Body.JUPITER: "jupiter barycenter",
    Body.VENUS: "venus",
    Body.SATURN: "saturn barycenter",
}


@dataclass
class SkyfieldEphemeris:
    """
    Apparent geocentric ecliptic-of-date longitudes from a JPL kernel via skyfield.

    Requires optional deps:
      pip install "panchangam[ephemeris]"
    """
    eph: Any
    ts: Any

    @classmethod
    def load(cls, kernel: str = "de421.bsp", directory: Optional[str] = None) -> "SkyfieldEphemeris":
        require_ephemeris()
        from skyfield.api import Loader, load

        loader = Loader(directory) if directory is not None else load
        try:
            eph = loader(kernel)
        except OSError as e:
            raise EphemerisUnavailableError(f"Could not load ephemeris kernel '{kernel}': {e}") from e
        return cls(eph=eph, ts=loader.timescale())

    def _time(self, jd_ut: float):
        return self.ts.ut1_jd(jd_ut)

    def longitude(self, body: Body, jd_ut: float) -> Optional[float]:
        body = Body(body)
        if body is Body.RAHU:
            t = self._time(jd_ut)
            return aa.mean_lunar_node_deg(aa.T_centuries(float(t.tt)))
        name = _TARGETS.get(body)
        if name is None:
            return None
        try:
            target = self.eph[name]
        except KeyError:
            if body in (Body.SUN, Body.MOON):
                raise EphemerisUnavailableError(f"kernel has no segment for {name}")
            logger.warning("kernel has no segment for %s", name)
            return None
        t = self._time(jd_ut)
        astrometric = self.eph["earth"].at(t).observe(target).apparent()
        _, lon, _ = astrometric.ecliptic_latlon(epoch="date")
        return aa.wrap_deg(float(lon.degrees))

    def ayanamsa(self, jd_ut: float) -> float:
        return lahiri_ayanamsa(jd_ut)

    def _observer(self, location: Location):
        from skyfield.api import wgs84

        return self.eph["earth"] + wgs84.latlon(location.latitude, location.longitude, elevation_m=location.elevation)

    def _first_events(self, target_name: str, d: date, location: Location):
        import numpy as np
        from skyfield import almanac

        start = local_midnight_jd(d, location.offset_on(d))
        t0, t1 = self._time(start), self._time(start + 1.0)
        observer = self._observer(location)
        target = self.eph[target_name]

        def first(times, flags) -> Optional[float]:
            hits = np.flatnonzero(np.asarray(flags, dtype=bool))
            if hits.size == 0:
                return None
            return float(times[int(hits[0])].ut1)

        r_times, r_flags = almanac.find_risings(observer, target, t0, t1)
        s_times, s_flags = almanac.find_settings(observer, target, t0, t1)
        return first(r_times, r_flags), first(s_times, s_flags)

    def sun_times(self, d: date, location: Location) -> SunTimes:
        rise, sset = self._first_events("sun", d, location)
        return SunTimes(sunrise=rise, sunset=sset)

    def moon_times(self, d: date, location: Location) -> MoonTimes:
        rise, sset = self._first_events("moon", d, location)
        return MoonTimes(moonrise=rise, moonset=sset)
