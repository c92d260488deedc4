"""
panchangam.engines.rashi
------------------------
Rashi chart: sidereal sign and degree of the nine grahas at an instant,
placement onto a 12-cell display grid, and the small derived attributes
(guna, trinity, gana) reported with a day.

A body the provider cannot supply is left out of the chart and listed in
`missing`; it is never placed in a default sign.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple, Union

import numpy as np

from .. import names
from ..core.errors import ConfigurationError
from ..core.time import local_midnight_jd
from ..core.types import CalendarInstant, GrahaPosition, Location, RashiChart
from .angles import normalize_angle, rashi_index, sidereal_longitude
from .interfaces import Body, EphemerisProvider

logger = logging.getLogger(__name__)

GRAHA_BODIES: Tuple[Tuple[str, Body], ...] = (
    ("Sun", Body.SUN),
    ("Moon", Body.MOON),
    ("Mars", Body.MARS),
    ("Mercury", Body.MERCURY),
    ("Jupiter", Body.JUPITER),
    ("Venus", Body.VENUS),
    ("Saturn", Body.SATURN),
    ("Rahu", Body.RAHU),
)

# Deva 0, Manushya 1, Rakshasa 2 by nakshatra
GANA_BY_NAKSHATRA = (0, 1, 2, 1, 0, 1, 0, 0, 2, 2, 1, 1, 0, 2, 0, 2, 0, 2, 2, 1, 1, 0, 2, 2, 1, 1, 0)

# cell used for anything a grid mapping does not cover
UNMAPPED_CELL = 5

ChartAt = Union[str, Tuple[int, int]]


def guna_index(rashi: int) -> int:
    return rashi % 3


def trinity_index(nakshatra: int) -> int:
    return nakshatra // 9


def gana_index(nakshatra: int) -> int:
    return GANA_BY_NAKSHATRA[nakshatra % 27]


def day_attributes(sun_rashi: int, nakshatra: int) -> Dict[str, Dict[str, object]]:
    g = guna_index(sun_rashi)
    t = trinity_index(nakshatra)
    ga = gana_index(nakshatra)
    return {
        "guna": {"index": g, "name": names.name("guna", g)},
        "trinity": {"index": t, "name": names.name("trinity", t)},
        "gana": {"index": ga, "name": names.name("gana", ga)},
    }


def graha_position(graha: str, tropical: float, ayanamsa: float) -> GrahaPosition:
    sid = sidereal_longitude(tropical, ayanamsa)
    idx = rashi_index(sid)
    return GrahaPosition(
        graha=graha,
        rashi_index=idx,
        degree_in_rashi=sid - 30.0 * idx,
        tropical_longitude=normalize_angle(tropical),
        sidereal_longitude=sid,
    )


def rashi_chart(jd: float, provider: EphemerisProvider, tz_offset_hours: float = 0.0) -> RashiChart:
    ay = provider.ayanamsa(jd)
    positions: List[GrahaPosition] = []
    missing: List[str] = []
    rahu: Optional[float] = None

    for graha, body in GRAHA_BODIES:
        lon = provider.longitude(body, jd)
        if lon is None:
            missing.append(graha)
            continue
        positions.append(graha_position(graha, lon, ay))
        if body is Body.RAHU:
            rahu = lon

    if rahu is None:
        missing.append("Ketu")
    else:
        positions.append(graha_position("Ketu", rahu + 180.0, ay))

    if missing:
        logger.warning("rashi chart at JD %.5f without %s", jd, ", ".join(missing))
    return RashiChart(
        instant=CalendarInstant(jd, tz_offset_hours),
        ayanamsa=ay,
        positions=tuple(positions),
        missing=tuple(missing),
    )


def chart_instant(d: date, location: Location, provider: EphemerisProvider, at: ChartAt = "sunrise") -> float:
    """
    JD of the chart moment on a civil day: "sunrise" (local 06:00 when there
    is none), "midnight", "noon", or an (hour, minute) local clock time.
    """
    tz = location.offset_on(d)
    midnight = local_midnight_jd(d, tz)
    if at == "sunrise":
        rise = provider.sun_times(d, location).sunrise
        if rise is None:
            logger.warning("no sunrise on %s; charting at local 06:00", d)
            return midnight + 0.25
        return rise
    if at == "midnight":
        return midnight
    if at == "noon":
        return midnight + 0.5
    if isinstance(at, tuple) and len(at) == 2:
        hour, minute = at
        if not (0 <= hour < 24 and 0 <= minute < 60):
            raise ValueError(f"invalid chart time {hour:02d}:{minute:02d}")
        return midnight + (hour + minute / 60.0) / 24.0
    raise ValueError(f"Unknown chart instant {at!r}. Use sunrise, midnight, noon or (hour, minute).")


# ============================================================
# Display grid
# ============================================================

@dataclass(frozen=True)
class RashiGrid:
    """Maps the 12 signs to display cells (default: sign i -> cell i)."""
    cells: Tuple[int, ...] = tuple(range(12))
    conflicts: Tuple[Tuple[int, Tuple[int, ...]], ...] = field(default=())

    def __post_init__(self) -> None:
        if len(self.cells) != 12:
            raise ConfigurationError(f"grid mapping needs 12 cells, got {len(self.cells)}")

    def cell_of(self, rashi: int) -> int:
        c = self.cells[rashi % 12]
        return UNMAPPED_CELL if c < 0 else c

    def place(self, chart: RashiChart) -> Dict[int, List[str]]:
        out: Dict[int, List[str]] = {}
        for p in chart.positions:
            out.setdefault(self.cell_of(p.rashi_index), []).append(p.graha)
        return out


def infer_mapping(samples: Iterable[Tuple[int, int]], n_cells: int = 12) -> RashiGrid:
    """
    Learn a sign -> cell mapping from observed (rashi, cell) pairs by majority
    vote. Signs never observed map to -1 (UNMAPPED_CELL when placing); signs
    seen in more than one cell are reported in `conflicts`.
    """
    counts = np.zeros((12, n_cells), dtype=int)
    for rashi, cell in samples:
        if not 0 <= cell < n_cells:
            raise ConfigurationError(f"cell {cell} outside 0..{n_cells - 1}")
        counts[rashi % 12, cell] += 1

    cells: List[int] = []
    conflicts: List[Tuple[int, Tuple[int, ...]]] = []
    for r in range(12):
        row = counts[r]
        if row.sum() == 0:
            cells.append(-1)
            continue
        cells.append(int(np.argmax(row)))
        seen = tuple(int(c) for c in np.flatnonzero(row))
        if len(seen) > 1:
            conflicts.append((r, seen))
    return RashiGrid(cells=tuple(cells), conflicts=tuple(conflicts))
