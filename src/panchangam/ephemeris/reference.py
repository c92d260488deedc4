"""
panchangam.ephemeris.reference
------------------------------
Analytic ephemeris built on the truncated Meeus series in
`panchangam.reference`: Sun (~0.01°), Moon (~10"), mean lunar node, Lahiri
ayanamsa, sunrise/sunset and moonrise/moonset.

Planets are not modelled and come back as None, which the engines treat as
the planet-free degraded mode.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.time import local_midnight_jd, date_to_jd
from ..core.types import Location, MoonTimes, SunTimes
from ..engines.interfaces import Body
from ..reference import astro_args as aa
from ..reference import lunar, solar
from ..reference.deltat import DeltaTModel, EspenakMeeusDeltaT
from .ayanamsa import lahiri_ayanamsa

logger = logging.getLogger(__name__)

# Moon's standard altitude at rise/set: 0.7275 * parallax - refraction
MOON_H0_DEG = 0.125
_MOON_SCAN_STEP = 1.0 / 144.0  # 10 minutes


@dataclass(frozen=True)
class ReferenceEphemeris:
    deltat: DeltaTModel = field(default_factory=EspenakMeeusDeltaT)

    def _tt(self, jd_ut: float) -> float:
        return jd_ut + self.deltat.seconds(jd_ut) / 86400.0

    # ------------------------------------------------------------
    # longitudes
    # ------------------------------------------------------------

    def longitude(self, body: Body, jd_ut: float) -> Optional[float]:
        body = Body(body)
        jd_tt = self._tt(jd_ut)
        if body is Body.SUN:
            return solar.solar_longitude(jd_tt).L_app_deg
        if body is Body.MOON:
            return lunar.lunar_position(jd_tt).L_app_deg
        if body is Body.RAHU:
            return aa.mean_lunar_node_deg(aa.T_centuries(jd_tt))
        return None

    def ayanamsa(self, jd_ut: float) -> float:
        return lahiri_ayanamsa(jd_ut)

    # ------------------------------------------------------------
    # rise / set
    # ------------------------------------------------------------

    def sun_times(self, d: date, location: Location) -> SunTimes:
        jd0 = date_to_jd(d)
        h0 = solar.horizon_depression_deg(location.elevation)
        dt = self.deltat.seconds(jd0)
        kw = dict(delta_t_seconds=dt, h0_deg=h0)
        rise = solar.solar_event_jd(jd0, location.latitude, location.longitude, rising=True, **kw)
        sset = solar.solar_event_jd(jd0, location.latitude, location.longitude, rising=False, **kw)
        if rise is None or sset is None:
            logger.debug("no sunrise/sunset on %s at lat=%.3f", d, location.latitude)
        return SunTimes(sunrise=rise, sunset=sset)

    def _moon_altitude(self, jd_ut: float, location: Location) -> float:
        jd_tt = self._tt(jd_ut)
        pos = lunar.lunar_position(jd_tt)
        eps = aa.mean_obliquity_deg(aa.T_centuries(jd_tt))
        ra, dec = aa.ecliptic_to_equatorial(pos.L_app_deg, pos.B_deg, eps)
        return aa.altitude_deg(ra, dec, location.latitude, location.longitude, jd_ut) - MOON_H0_DEG

    def _bisect_altitude(self, lo: float, hi: float, location: Location) -> float:
        f_lo = self._moon_altitude(lo, location)
        while hi - lo > 1e-5:
            mid = 0.5 * (lo + hi)
            f_mid = self._moon_altitude(mid, location)
            if (f_mid > 0) == (f_lo > 0):
                lo, f_lo = mid, f_mid
            else:
                hi = mid
        return hi

    def moon_times(self, d: date, location: Location) -> MoonTimes:
        start = local_midnight_jd(d, location.offset_on(d))
        n = int(round(1.0 / _MOON_SCAN_STEP))
        rise: Optional[float] = None
        sset: Optional[float] = None
        prev_jd = start
        prev_alt = self._moon_altitude(prev_jd, location)
        for i in range(1, n + 1):
            jd = start + i * _MOON_SCAN_STEP
            alt = self._moon_altitude(jd, location)
            if rise is None and prev_alt <= 0 < alt:
                rise = self._bisect_altitude(prev_jd, jd, location)
            elif sset is None and prev_alt > 0 >= alt:
                sset = self._bisect_altitude(prev_jd, jd, location)
            if rise is not None and sset is not None:
                break
            prev_jd, prev_alt = jd, alt
        return MoonTimes(moonrise=rise, moonset=sset)
