"""
panchangam.engines.batch
------------------------
Year boundary batch: every tithi of a civil year in one pass, each tagged
with its masa, so festival lookups become dictionary hits.

Pass outline
  1. sample the lunar phase on a fixed grid (batch_step_days) from
     batch_padding_days before the local year start to the same after its end;
  2. on every tithi change, bisect the exact start inside the grid bracket;
  3. search the end (next tithi start) within end_search_days;
  4. tag masa from the opening new moon of the lunation and the next one;
  5. keep boundaries overlapping the year, sort, and close float gaps so
     consecutive records tile exactly.

A boundary whose ephemeris calls fail is logged and skipped; the rest of the
year is still returned.
"""

from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from ..core.config import DEFAULT_CONFIG, EngineConfig
from ..core.errors import CalculationUnavailableError, EphemerisUnavailableError
from ..core.time import datetime_to_jd, jd_to_datetime, local_midnight_jd
from ..core.types import Location, MasaInfo, TithiBoundary
from .angles import PhaseCalculator, tithi_index, TITHI_SPAN
from .interfaces import EphemerisProvider
from .masa import SYNODIC_MONTH, MasaResolver
from .search import find_last_crossing, find_phase_crossing, refine_crossing

logger = logging.getLogger(__name__)

# ends closer than this to the next start are the same instant
_TILE_TOLERANCE_DAYS = 1e-3

Key = Tuple[int, int, bool]


@dataclass(frozen=True)
class _RawBoundary:
    tithi_ino: int
    start: float
    end: float
    masa: MasaInfo


class _BatchRun:
    def __init__(self, provider: EphemerisProvider, config: EngineConfig):
        self.calc = PhaseCalculator(provider)
        self.masa = MasaResolver(provider, config)
        self.config = config
        self._masa_cache: Dict[int, MasaInfo] = {}

    def year_grid(self, y0: float, y1: float) -> np.ndarray:
        cfg = self.config
        start = y0 - cfg.batch_padding_days
        end = y1 + cfg.batch_padding_days
        n = int(math.ceil((end - start) / cfg.batch_step_days))
        return start + np.arange(n + 1, dtype=float) * cfg.batch_step_days

    def new_moon_before(self, start: float, tithi_ino: int) -> Optional[float]:
        if tithi_ino == 0:
            return start
        cfg = self.config
        return find_last_crossing(
            start - cfg.new_moon_lookback_days, start, 0.0, self.calc.phase,
            step=cfg.batch_step_days, precision=cfg.precision_days,
        )

    def masa_for_new_moon(self, new_moon: float) -> MasaInfo:
        # boundaries of one lunation share a new moon; key at ~1 minute resolution
        key = int(round(new_moon * 1440.0))
        hit = self._masa_cache.get(key)
        if hit is not None:
            return hit
        cfg = self.config
        next_nm = find_phase_crossing(
            new_moon + SYNODIC_MONTH - 2.0, new_moon + SYNODIC_MONTH + 2.0, 0.0, self.calc.phase,
            step=cfg.batch_step_days, precision=cfg.precision_days,
        )
        info = self.masa.masa_at_new_moon(new_moon, next_nm)
        self._masa_cache[key] = info
        return info

    def boundary(self, lo: float, hi: float, tithi_now: int) -> Optional[_RawBoundary]:
        cfg = self.config
        start = refine_crossing(lo, hi, tithi_now * TITHI_SPAN, self.calc.phase, precision=cfg.precision_days)
        ino = tithi_index(self.calc.phase(start + 0.001))
        end = find_phase_crossing(
            start + cfg.precision_days, start + cfg.end_search_days,
            ((ino + 1) % 30) * TITHI_SPAN, self.calc.phase,
            step=cfg.batch_step_days, precision=cfg.precision_days,
        )
        if end is None or end <= start:
            logger.warning("tithi %d starting JD %.5f has no end within %.1f days; skipped",
                           ino, start, cfg.end_search_days)
            return None
        nm = self.new_moon_before(start, ino)
        if nm is None:
            logger.warning("no new moon before tithi %d at JD %.5f; skipped", ino, start)
            return None
        return _RawBoundary(ino, start, end, self.masa_for_new_moon(nm))


def _tile(raw: List[_RawBoundary]) -> List[_RawBoundary]:
    out: List[_RawBoundary] = []
    for i, b in enumerate(raw):
        if i + 1 < len(raw):
            nxt = raw[i + 1].start
            if abs(b.end - nxt) < _TILE_TOLERANCE_DAYS:
                b = _RawBoundary(b.tithi_ino, b.start, nxt, b.masa)
        out.append(b)
    return out


def compute_all_tithi_boundaries(
    year: int,
    location: Location,
    provider: EphemerisProvider,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[TithiBoundary]:
    """
    All tithi occurrences overlapping the local civil `year`, sorted by start.

    Best effort: boundaries that could not be computed are missing from the
    list (and logged). An empty list is a valid result.
    """
    jan1 = date(year, 1, 1)
    next_jan1 = date(year + 1, 1, 1)
    y0 = local_midnight_jd(jan1, location.offset_on(jan1))
    y1 = local_midnight_jd(next_jan1, location.offset_on(next_jan1))

    run = _BatchRun(provider, config)
    grid = run.year_grid(y0, y1)

    raw: List[_RawBoundary] = []
    prev_jd: Optional[float] = None
    prev_idx: Optional[int] = None
    for jd in grid:
        jd = float(jd)
        try:
            idx = tithi_index(run.calc.phase(jd))
        except EphemerisUnavailableError as e:
            logger.warning("phase unavailable at JD %.5f: %s", jd, e)
            prev_jd, prev_idx = None, None
            continue

        if prev_idx is not None and idx != prev_idx:
            try:
                b = run.boundary(prev_jd, jd, idx)
            except (EphemerisUnavailableError, CalculationUnavailableError) as e:
                logger.warning("tithi boundary near JD %.5f skipped: %s", jd, e)
                b = None
            if b is not None and b.start < y1 and b.end > y0:
                raw.append(b)
        prev_jd, prev_idx = jd, idx

    raw.sort(key=lambda b: b.start)
    logger.debug("year %d: %d tithi boundaries", year, len(raw))

    out: List[TithiBoundary] = []
    for b in _tile(raw):
        out.append(TithiBoundary(
            tithi_ino=b.tithi_ino,
            start_time=jd_to_datetime(b.start, location.utc_offset_hours(b.start)),
            end_time=jd_to_datetime(b.end, location.utc_offset_hours(b.end)),
            masa_ino=b.masa.amanta_index,
            is_leap_month=b.masa.is_leap_month,
        ))
    return out


# ============================================================
# Lookup table
# ============================================================

class TithiBoundaryTable:
    """Read-only index over a year's boundaries, keyed by (tithi, masa, is_leap)."""

    def __init__(self, boundaries: Iterable[TithiBoundary]):
        self._items: Tuple[TithiBoundary, ...] = tuple(sorted(boundaries, key=lambda b: b.start_time))
        index: Dict[Key, List[TithiBoundary]] = {}
        for b in self._items:
            index.setdefault(b.key, []).append(b)
        self._index = {k: tuple(v) for k, v in index.items()}

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[TithiBoundary]:
        return iter(self._items)

    def occurrences(self, tithi_ino: int, masa_ino: int, is_leap_month: bool = False) -> Tuple[TithiBoundary, ...]:
        return self._index.get((tithi_ino, masa_ino, is_leap_month), ())

    def first(self, tithi_ino: int, masa_ino: int, is_leap_month: bool = False) -> Optional[TithiBoundary]:
        hits = self.occurrences(tithi_ino, masa_ino, is_leap_month)
        return hits[0] if hits else None

    def for_date(self, d: date) -> Tuple[TithiBoundary, ...]:
        """Boundaries overlapping the civil date `d` in each record's own offset."""
        out = []
        for b in self._items:
            if b.start_time.date() <= d <= b.end_time.date():
                out.append(b)
        return tuple(out)

    def gaps(self) -> List[Tuple[TithiBoundary, TithiBoundary]]:
        """Consecutive pairs that do not tile (end != next start)."""
        return [
            (a, b) for a, b in zip(self._items, self._items[1:])
            if abs(datetime_to_jd(a.end_time) - datetime_to_jd(b.start_time)) > _TILE_TOLERANCE_DAYS
        ]

    def leap_masas(self) -> List[int]:
        return sorted({b.masa_ino for b in self._items if b.is_leap_month})

    def to_json(self) -> str:
        return json.dumps([b.to_dict() for b in self._items], indent=2)

    @classmethod
    def from_json(cls, text: str) -> "TithiBoundaryTable":
        return cls(TithiBoundary.from_dict(d) for d in json.loads(text))

    def dump(self, path: os.PathLike) -> None:
        Path(path).write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: os.PathLike) -> "TithiBoundaryTable":
        return cls.from_json(Path(path).read_text(encoding="utf-8"))


class BoundaryCache:
    """Optional on-disk cache of year tables, one JSON file per (year, location)."""

    def __init__(self, directory: os.PathLike):
        self.directory = Path(directory)

    def path_for(self, year: int, location: Location) -> Path:
        tz = location.timezone if isinstance(location.timezone, str) else f"{float(location.timezone):+.2f}"
        tz = str(tz).replace("/", "_")
        name = f"tithi-{year}-{location.latitude:.4f}-{location.longitude:.4f}-{location.elevation:.0f}-{tz}.json"
        return self.directory / name

    def get(self, year: int, location: Location) -> Optional[TithiBoundaryTable]:
        p = self.path_for(year, location)
        if not p.is_file():
            return None
        try:
            return TithiBoundaryTable.load(p)
        except (ValueError, KeyError) as e:
            logger.warning("ignoring unreadable cache %s: %s", p, e)
            return None

    def get_or_compute(
        self,
        year: int,
        location: Location,
        provider: EphemerisProvider,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> TithiBoundaryTable:
        hit = self.get(year, location)
        if hit is not None:
            return hit
        table = TithiBoundaryTable(compute_all_tithi_boundaries(year, location, provider, config))
        self.directory.mkdir(parents=True, exist_ok=True)
        table.dump(self.path_for(year, location))
        return table
