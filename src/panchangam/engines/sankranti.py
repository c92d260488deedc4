"""
panchangam.engines.sankranti
----------------------------
Solar ingresses: instants when the Sun's sidereal longitude reaches a
multiple of 30 deg. Same scan + bisection as the lunar boundaries, driven by
the sidereal Sun instead of the lunar phase.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from .. import names
from ..core.config import DEFAULT_CONFIG, EngineConfig
from ..core.time import local_midnight_jd
from ..core.types import CalendarInstant, Location, Sankranti
from .angles import PhaseCalculator
from .interfaces import EphemerisProvider
from .search import find_phase_crossing

logger = logging.getLogger(__name__)

MAKARA = 9


def find_sankranti(
    rashi: int,
    start_jd: float,
    end_jd: float,
    provider: EphemerisProvider,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Optional[float]:
    """First ingress of the Sun into sign `rashi` (0 = Mesha) within [start_jd, end_jd)."""
    calc = PhaseCalculator(provider)
    return find_phase_crossing(
        start_jd, end_jd, (rashi % 12) * 30.0, calc.sidereal_sun,
        step=config.sankranti_step_days, precision=config.precision_days,
    )


def sankrantis_for_year(
    year: int,
    location: Location,
    provider: EphemerisProvider,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[Sankranti]:
    """
    Every ingress falling in the local civil year, sorted by time.

    A sign whose ingress lands just outside the year (possible at the year
    edges) is absent rather than substituted.
    """
    y0 = local_midnight_jd(date(year, 1, 1), location.offset_on(date(year, 1, 1)))
    y1 = local_midnight_jd(date(year + 1, 1, 1), location.offset_on(date(year + 1, 1, 1)))

    out: List[Sankranti] = []
    for r in range(12):
        jd = find_sankranti(r, y0, y1, provider, config)
        if jd is None:
            logger.info("no %s sankranti inside %d", names.name("rashi", r), year)
            continue
        out.append(Sankranti(r, names.name("rashi", r), CalendarInstant(jd, location.utc_offset_hours(jd))))
    out.sort(key=lambda s: s.instant.jd)
    return out


def makara_sankranti(
    year: int,
    location: Location,
    provider: EphemerisProvider,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Optional[Sankranti]:
    y0 = local_midnight_jd(date(year, 1, 1), location.offset_on(date(year, 1, 1)))
    jd = find_sankranti(MAKARA, y0, y0 + 60.0, provider, config)
    if jd is None:
        return None
    return Sankranti(MAKARA, names.name("rashi", MAKARA), CalendarInstant(jd, location.utc_offset_hours(jd)))
