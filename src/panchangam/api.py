from __future__ import annotations

from datetime import date
from typing import List, Optional

from .core.config import DEFAULT_CONFIG, EngineConfig
from .core.types import CalendarSnapshot, Location, RashiChart, Sankranti, SnapshotAt, TithiBoundary
from .engines.batch import BoundaryCache, TithiBoundaryTable, compute_all_tithi_boundaries
from .engines.calendar import PanchangamCalendar
from .engines.festival import tithi_in_masa
from .engines.interfaces import EphemerisProvider
from .engines.rashi import ChartAt, chart_instant, rashi_chart
from .engines.sankranti import sankrantis_for_year
from .ephemeris.reference import ReferenceEphemeris


def default_provider() -> EphemerisProvider:
    """A fresh analytic provider (Sun, Moon, lunar node; no planets)."""
    return ReferenceEphemeris()


def _provider(provider: Optional[EphemerisProvider]) -> EphemerisProvider:
    return provider if provider is not None else default_provider()


def panchangam_for(
    d: date,
    location: Location,
    *,
    at: SnapshotAt = "sunrise",
    provider: Optional[EphemerisProvider] = None,
    config: EngineConfig = DEFAULT_CONFIG,
    locale: str = "en",
) -> CalendarSnapshot:
    return PanchangamCalendar(_provider(provider), config, locale=locale).snapshot(d, location, at=at)


def tithi_boundaries(
    year: int,
    location: Location,
    *,
    provider: Optional[EphemerisProvider] = None,
    config: EngineConfig = DEFAULT_CONFIG,
    cache_dir: Optional[str] = None,
) -> TithiBoundaryTable:
    """Year batch as a lookup table; `cache_dir` enables the JSON cache."""
    prov = _provider(provider)
    if cache_dir is not None:
        return BoundaryCache(cache_dir).get_or_compute(year, location, prov, config)
    return TithiBoundaryTable(compute_all_tithi_boundaries(year, location, prov, config))


def sankrantis(
    year: int,
    location: Location,
    *,
    provider: Optional[EphemerisProvider] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[Sankranti]:
    return sankrantis_for_year(year, location, _provider(provider), config)


def rashi_chart_for(
    d: date,
    location: Location,
    *,
    at: ChartAt = "sunrise",
    provider: Optional[EphemerisProvider] = None,
) -> RashiChart:
    prov = _provider(provider)
    jd = chart_instant(d, location, prov, at)
    return rashi_chart(jd, prov, location.utc_offset_hours(jd))


def festival_tithi(
    tithi_ino: int,
    masa_ino: int,
    year: int,
    location: Location,
    *,
    prefer_leap: bool = False,
    provider: Optional[EphemerisProvider] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Optional[TithiBoundary]:
    """Occurrence of tithi `tithi_ino` (0..29) in masa `masa_ino` (0 = Chaitra) of `year`."""
    if not 0 <= tithi_ino < 30:
        raise ValueError(f"tithi index must be in 0..29, got {tithi_ino}")
    if not 0 <= masa_ino < 12:
        raise ValueError(f"masa index must be in 0..11, got {masa_ino}")
    return tithi_in_masa(
        tithi_ino, masa_ino, year, location, _provider(provider), config, prefer_leap=prefer_leap,
    )
