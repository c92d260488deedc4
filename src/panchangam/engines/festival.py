"""
panchangam.engines.festival
---------------------------
Tithi-in-masa lookups used for festivals, without a full year batch.

Resolution order when several new moons carry the requested masa (the
year edges make this common): a candidate in the target Gregorian year
first (leap or regular according to `prefer_leap`), then one in January to
March of the following year (regular first), then whatever is left.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from .. import names
from ..core.config import DEFAULT_CONFIG, EngineConfig
from ..core.errors import AmbiguousMasaResolutionError
from ..core.time import date_to_jd, jd_to_datetime, julian_day_to_civil
from ..core.types import Location, MasaInfo, TithiBoundary
from .angles import TITHI_SPAN, PhaseCalculator
from .batch import TithiBoundaryTable
from .interfaces import EphemerisProvider
from .masa import SYNODIC_MONTH, MasaResolver
from .search import find_phase_crossing, refine_crossing

logger = logging.getLogger(__name__)

SAMVATSARA_EPOCH = 1867  # Prabhava


@dataclass(frozen=True)
class NewMoonCandidate:
    jd: float
    masa: MasaInfo

    @property
    def year(self) -> int:
        return julian_day_to_civil(self.jd).year

    @property
    def month(self) -> int:
        return julian_day_to_civil(self.jd).month


def new_moon_candidates(
    year: int,
    provider: EphemerisProvider,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[NewMoonCandidate]:
    """New moons from Jan 1 of `year` to Apr 1 of `year + 1`, each tagged with its masa."""
    calc = PhaseCalculator(provider)
    resolver = MasaResolver(provider, config)
    start = date_to_jd(date(year, 1, 1))
    end = date_to_jd(date(year + 1, 4, 1))

    found: List[float] = []
    prev_jd = start
    prev = calc.phase(prev_jd)
    n = int(end - start)
    for i in range(1, n + 1):
        jd = start + i
        curr = calc.phase(jd)
        if prev > 200.0 and curr < 100.0:
            found.append(refine_crossing(prev_jd, jd, 0.0, calc.phase, precision=config.precision_days))
        prev_jd, prev = jd, curr

    out: List[NewMoonCandidate] = []
    for nm in found:
        nxt = find_phase_crossing(
            nm + SYNODIC_MONTH - 2.0, nm + SYNODIC_MONTH + 2.0, 0.0, calc.phase,
            step=config.batch_step_days, precision=config.precision_days,
        )
        out.append(NewMoonCandidate(nm, resolver.masa_at_new_moon(nm, nxt)))
    return out


def select_new_moon(
    candidates: List[NewMoonCandidate],
    masa_ino: int,
    year: int,
    prefer_leap: bool = False,
) -> Optional[NewMoonCandidate]:
    matches = sorted((c for c in candidates if c.masa.amanta_index == masa_ino), key=lambda c: c.jd)
    if not matches:
        return None

    in_year = [c for c in matches if c.year == year]
    if in_year:
        if prefer_leap:
            leap = [c for c in in_year if c.masa.is_leap_month]
            if leap:
                return leap[0]
        regular = [c for c in in_year if not c.masa.is_leap_month]
        return regular[0] if regular else in_year[0]

    early_next = [c for c in matches if c.year == year + 1 and c.month <= 3]
    if early_next:
        regular = [c for c in early_next if not c.masa.is_leap_month]
        return regular[0] if regular else early_next[0]

    regular = [c for c in matches if not c.masa.is_leap_month]
    return regular[0] if regular else matches[0]


def find_new_moon_for_masa(
    masa_ino: int,
    year: int,
    provider: EphemerisProvider,
    config: EngineConfig = DEFAULT_CONFIG,
    *,
    prefer_leap: bool = False,
) -> NewMoonCandidate:
    hit = select_new_moon(new_moon_candidates(year, provider, config), masa_ino, year, prefer_leap)
    if hit is None:
        raise AmbiguousMasaResolutionError(f"no new moon opens masa {masa_ino} around {year}")
    return hit


def tithi_in_masa(
    tithi_ino: int,
    masa_ino: int,
    year: int,
    location: Location,
    provider: EphemerisProvider,
    config: EngineConfig = DEFAULT_CONFIG,
    *,
    prefer_leap: bool = False,
) -> Optional[TithiBoundary]:
    """The occurrence of tithi `tithi_ino` (0..29) in masa `masa_ino` for `year`, or None."""
    calc = PhaseCalculator(provider)
    nm = find_new_moon_for_masa(masa_ino, year, provider, config, prefer_leap=prefer_leap)

    if tithi_ino == 0:
        start: Optional[float] = nm.jd
    else:
        # Krishna paksha tithis start after the full moon
        search = nm.jd + 14.75 if tithi_ino + 1 > 15 else nm.jd
        start = find_phase_crossing(
            search - 1.0, search + 20.0, tithi_ino * TITHI_SPAN, calc.phase,
            step=config.scan_step_days * 10, precision=config.precision_days,
        )
    if start is None:
        logger.info("tithi %d of masa %d not found in %d", tithi_ino, masa_ino, year)
        return None
    end = find_phase_crossing(
        start + config.precision_days, start + config.end_search_days,
        ((tithi_ino + 1) % 30) * TITHI_SPAN, calc.phase,
        step=config.scan_step_days, precision=config.precision_days,
    )
    if end is None or end <= start:
        return None
    return TithiBoundary(
        tithi_ino=tithi_ino,
        start_time=jd_to_datetime(start, location.utc_offset_hours(start)),
        end_time=jd_to_datetime(end, location.utc_offset_hours(end)),
        masa_ino=nm.masa.amanta_index,
        is_leap_month=nm.masa.is_leap_month,
    )


def tithi_occurrences_in_year(
    tithi_ino: int,
    year: int,
    location: Location,
    provider: EphemerisProvider,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[TithiBoundary]:
    """Every occurrence of one tithi across the lunations opening in `year`."""
    calc = PhaseCalculator(provider)
    out: List[TithiBoundary] = []
    for nm in new_moon_candidates(year, provider, config):
        if nm.year != year:
            continue
        target = tithi_ino * TITHI_SPAN
        start = nm.jd if tithi_ino == 0 else find_phase_crossing(
            nm.jd, nm.jd + SYNODIC_MONTH, target, calc.phase,
            step=config.batch_step_days, precision=config.precision_days,
        )
        if start is None:
            continue
        end = find_phase_crossing(
            start + config.precision_days, start + config.end_search_days,
            ((tithi_ino + 1) % 30) * TITHI_SPAN, calc.phase,
            step=config.scan_step_days, precision=config.precision_days,
        )
        if end is None:
            continue
        out.append(TithiBoundary(
            tithi_ino, jd_to_datetime(start, location.utc_offset_hours(start)),
            jd_to_datetime(end, location.utc_offset_hours(end)),
            nm.masa.amanta_index, nm.masa.is_leap_month,
        ))
    return out


# ============================================================
# Ugadi and the 60-year cycle
# ============================================================

def ugadi(
    year: int,
    location: Location,
    provider: EphemerisProvider,
    config: EngineConfig = DEFAULT_CONFIG,
    table: Optional[TithiBoundaryTable] = None,
) -> Optional[TithiBoundary]:
    """Chaitra Shukla Pratipada of `year` (regular Chaitra)."""
    if table is not None:
        for b in table.occurrences(0, 0, False):
            if b.start_time.year == year:
                return b
    return tithi_in_masa(0, 0, year, location, provider, config)


def cycle_index(year: int, new_year_started: bool = True) -> int:
    """Position in the 60-year cycle; before Ugadi the previous year's name holds."""
    y = year if new_year_started else year - 1
    return (y - SAMVATSARA_EPOCH) % 60


def samvatsara_index(
    d: date,
    location: Location,
    provider: EphemerisProvider,
    config: EngineConfig = DEFAULT_CONFIG,
) -> int:
    start = ugadi(d.year, location, provider, config)
    started = start is not None and d >= start.start_time.date()
    return cycle_index(d.year, started)


def samvatsara_name(
    d: date,
    location: Location,
    provider: EphemerisProvider,
    config: EngineConfig = DEFAULT_CONFIG,
) -> str:
    return names.name("samvatsara", samvatsara_index(d, location, provider, config))
