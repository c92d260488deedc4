"""
panchangam.engines.calendar
---------------------------
Orchestrator for a single civil day: sunrise (or sunset/pradosha) reference
instant -> raw indices -> skip correction -> masa -> named elements with
start/end instants.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Callable, List, Optional, Tuple

from .. import names
from ..core.config import DEFAULT_CONFIG, EngineConfig
from ..core.time import local_midnight_jd, weekday_index
from ..core.types import (
    Ayana,
    CalendarInstant,
    CalendarSnapshot,
    DayAnga,
    Karana,
    Location,
    Masa,
    Nakshatra,
    Paksha,
    PanchangamElement,
    Rashi,
    Ritu,
    SnapshotAt,
    Tithi,
    Vara,
    Yoga,
)
from .angles import (
    KARANA,
    KINDS,
    NAKSHATRA,
    TITHI,
    YOGA,
    ElementKind,
    PhaseCalculator,
    karana_from_half_tithi,
    rashi_index,
)
from .day import select_day_elements
from .interfaces import EphemerisProvider
from .masa import MasaResolver, ayana_index, drik_ritu_index, ritu_index
from .rashi import day_attributes
from .search import find_last_crossing, find_phase_crossing
from .skip import resolve_skipped_element

logger = logging.getLogger(__name__)

_ELEMENT_TYPES = {
    "tithi": Tithi,
    "nakshatra": Nakshatra,
    "yoga": Yoga,
    "karana": Karana,
}

Interval = Tuple[Optional[float], Optional[float]]


class PanchangamCalendar:
    def __init__(
        self,
        provider: EphemerisProvider,
        config: EngineConfig = DEFAULT_CONFIG,
        *,
        locale: str = "en",
    ):
        self.provider = provider
        self.config = config
        self.locale = locale
        self.calc = PhaseCalculator(provider)
        self.masa = MasaResolver(provider, config)

    # ---------------------------------------------------------
    # reference instants
    # ---------------------------------------------------------

    def sunrise(self, d: date, location: Location) -> float:
        """Sunrise JD (UT), or local 06:00 when the Sun does not rise."""
        st = self.provider.sun_times(d, location)
        if st.sunrise is not None:
            return st.sunrise
        logger.warning("no sunrise on %s at lat=%.3f; using local 06:00", d, location.latitude)
        return local_midnight_jd(d, location.offset_on(d)) + 0.25

    def sunset(self, d: date, location: Location) -> float:
        st = self.provider.sun_times(d, location)
        if st.sunset is not None:
            return st.sunset
        logger.warning("no sunset on %s at lat=%.3f; using local 18:00", d, location.latitude)
        return local_midnight_jd(d, location.offset_on(d)) + 0.75

    def pradosha(self, d: date, location: Location) -> float:
        """Pradosha: first fifth of the night after sunset."""
        sset = self.sunset(d, location)
        nxt = self.sunrise(d + timedelta(days=1), location)
        return sset + (nxt - sset) / 5.0

    def reference_instant(self, d: date, location: Location, at: SnapshotAt = "sunrise") -> float:
        if at == "sunrise":
            return self.sunrise(d, location)
        if at == "sunset":
            return self.sunset(d, location)
        if at == "pradosha":
            return self.pradosha(d, location)
        raise ValueError(f"Unknown snapshot instant '{at}'. Use sunrise, sunset or pradosha.")

    # ---------------------------------------------------------
    # intervals
    # ---------------------------------------------------------

    def _interval(
        self,
        fn: Callable[[float], float],
        span: float,
        modulus: int,
        index: int,
        before_jd: float,
        window: float,
        step: float,
    ) -> Interval:
        """
        [start, end) of the element `index` whose start is the latest crossing
        of index*span at or before `before_jd`.
        """
        cfg = self.config
        start = find_last_crossing(
            before_jd - window, before_jd + cfg.precision_days, (index * span) % 360.0, fn,
            step=step, precision=cfg.precision_days,
        )
        search_from = start if start is not None else before_jd - window
        end = find_phase_crossing(
            search_from + cfg.precision_days, search_from + window + 1.0,
            (((index + 1) % modulus) * span) % 360.0, fn,
            step=step, precision=cfg.precision_days,
        )
        return start, end

    def element_interval(self, kind: ElementKind, index: int, before_jd: float) -> Interval:
        """Start/end JD of element `index` (karana: half-tithi number) starting no later than before_jd."""
        w = self.config.element_window_days
        return self._interval(
            self.calc.angle_function(kind), kind.span, kind.modulus, index, before_jd,
            w, self.config.scan_step_days,
        )

    def _instant(self, jd: Optional[float], tz: float) -> Optional[CalendarInstant]:
        return CalendarInstant(jd, tz) if jd is not None else None

    def _element(self, kind: str, index: int, interval: Interval, tz: float, **extra) -> PanchangamElement:
        cls = _ELEMENT_TYPES.get(kind, PanchangamElement)
        return cls(
            index=index,
            name=names.name(kind, index),
            name_localized=names.localized_name(kind, index, self.locale),
            start=self._instant(interval[0], tz),
            end=self._instant(interval[1], tz),
            **extra,
        )

    # ---------------------------------------------------------
    # elements
    # ---------------------------------------------------------

    def corrected_index(self, kind: ElementKind, ref: float, ref_next: float) -> int:
        return resolve_skipped_element(self.calc.index_at(kind, ref), self.calc.index_at(kind, ref_next), kind.modulus)

    def _day_element(self, kind: ElementKind, ref: float, ref_next: Optional[float], tz: float) -> PanchangamElement:
        if ref_next is None:
            idx = self.calc.index_at(kind, ref)
            bound = ref
        else:
            idx = self.corrected_index(kind, ref, ref_next)
            bound = ref_next
        return self._element(kind.name, idx, self.element_interval(kind, idx, bound), tz)

    def _karana(self, ref: float, tz: float) -> Karana:
        nk = self.calc.index_at(KARANA, ref)
        interval = self.element_interval(KARANA, nk, ref)
        return self._element("karana", karana_from_half_tithi(nk), interval, tz)

    def day_angas(self, d: date, location: Location, kind: str = "tithi") -> Tuple[DayAnga, ...]:
        """
        Every element of `kind` overlapping [sunrise, sunrise + 24h) on `d`,
        tagged Vriddhi/Kshaya for tithi.
        """
        ek = KINDS[kind]
        tz = location.offset_on(d)
        s = self.sunrise(d, location)
        day_end = s + 1.0

        out: List[PanchangamElement] = []
        idx = self.calc.index_at(ek, s)
        before = s
        for _ in range(ek.modulus):
            start, end = self.element_interval(ek, idx, before)
            if kind == "karana":
                el = self._element("karana", karana_from_half_tithi(idx), (start, end), tz)
            else:
                el = self._element(kind, idx, (start, end), tz)
            out.append(el)
            if end is None or end >= day_end:
                break
            idx = (idx + 1) % ek.modulus
            before = end + self.config.precision_days
        return select_day_elements(out, s, next_sunrise=day_end)

    def _paksha(self, tithi: int, ref: float, tz: float) -> Paksha:
        p = 0 if tithi < 15 else 1
        start, end = self._interval(
            self.calc.phase, 180.0, 2, p, ref, 16.0, self.config.batch_step_days,
        )
        return Paksha(p, names.name("paksha", p), names.localized_name("paksha", p, self.locale),
                      self._instant(start, tz), self._instant(end, tz))

    def _full_moon(self, lo: float, hi: float) -> Optional[float]:
        cfg = self.config
        return find_phase_crossing(lo, hi, 180.0, self.calc.phase, step=cfg.batch_step_days, precision=cfg.precision_days)

    def _rashi(self, fn: Callable[[float], float], ref: float, tz: float, window: float, step: float) -> Rashi:
        idx = rashi_index(fn(ref))
        start, end = self._interval(fn, 30.0, 12, idx, ref, window, step)
        return Rashi(idx, names.name("rashi", idx), names.localized_name("rashi", idx, self.locale),
                     self._instant(start, tz), self._instant(end, tz))

    def _named(self, cls, kind: str, idx: int, start=None, end=None, **extra):
        return cls(idx, names.name(kind, idx), names.localized_name(kind, idx, self.locale), start, end, **extra)

    # ---------------------------------------------------------
    # snapshot
    # ---------------------------------------------------------

    def snapshot(self, d: date, location: Location, *, at: SnapshotAt = "sunrise") -> CalendarSnapshot:
        tz = location.offset_on(d)
        ref = self.reference_instant(d, location, at)
        if at == "sunrise":
            ref_next: Optional[float] = self.sunrise(d + timedelta(days=1), location)
        elif at == "pradosha":
            ref_next = self.pradosha(d + timedelta(days=1), location)
        else:
            # at sunset the raw elements are reported
            ref_next = None

        tithi = self._day_element(TITHI, ref, ref_next, tz)
        nakshatra = self._day_element(NAKSHATRA, ref, ref_next, tz)
        yoga = self._day_element(YOGA, ref, ref_next, tz)
        karana = self._karana(ref, tz)
        # paksha and masa follow the reported tithi, which may start after ref
        mid = _midpoint(tithi, ref)
        paksha = self._paksha(tithi.index, mid, tz)

        info = self.masa.masa_at(mid, tithi.index + 1)
        last_nm, next_nm = self.masa.new_moons_around(mid)
        masa = self._named(
            Masa, "masa", info.amanta_index,
            self._instant(last_nm, tz), self._instant(next_nm, tz), is_leap_month=info.is_leap_month,
        )
        fm = self._full_moon(last_nm, next_nm)
        if tithi.index >= 15:
            p_start, p_end = fm, self._full_moon(next_nm, next_nm + 17.0)
        else:
            p_start, p_end = self._full_moon(last_nm - 17.0, last_nm), fm
        purnimanta = self._named(
            Masa, "masa", info.purnimanta_index,
            self._instant(p_start, tz), self._instant(p_end, tz), is_leap_month=info.is_leap_month,
        )

        sid_sun = self.calc.sidereal_sun(ref)
        ritu = self._named(Ritu, "ritu", ritu_index(info.amanta_index))
        drik = self._named(Ritu, "ritu", drik_ritu_index(self.calc.sun(ref)))
        ayana = self._named(Ayana, "ayana", ayana_index(sid_sun))

        sunrise = self.sunrise(d, location)
        next_sunrise = self.sunrise(d + timedelta(days=1), location)
        vara = self._named(
            Vara, "vara", weekday_index(sunrise, tz),
            self._instant(sunrise, tz), self._instant(next_sunrise, tz),
        )

        sun_rashi = self._rashi(self.calc.sidereal_sun, ref, tz, 32.0, self.config.sankranti_step_days)
        moon_rashi = self._rashi(self.calc.sidereal_moon, ref, tz, 3.0, self.config.scan_step_days * 5)

        st = self.provider.sun_times(d, location)
        mt = self.provider.moon_times(d, location)

        return CalendarSnapshot(
            civil_date=d,
            location=location,
            at=at,
            reference=CalendarInstant(ref, tz),
            tithi=tithi,
            paksha=paksha,
            nakshatra=nakshatra,
            yoga=yoga,
            karana=karana,
            masa=masa,
            purnimanta_masa=purnimanta,
            masa_info=info,
            ritu=ritu,
            drik_ritu=drik,
            ayana=ayana,
            vara=vara,
            sun_rashi=sun_rashi,
            moon_rashi=moon_rashi,
            sunrise=self._instant(st.sunrise, tz),
            sunset=self._instant(st.sunset, tz),
            moonrise=self._instant(mt.moonrise, tz),
            moonset=self._instant(mt.moonset, tz),
            day_angas=self.day_angas(d, location, "tithi"),
            attributes=day_attributes(sun_rashi.index, nakshatra.index),
        )


def _midpoint(el: PanchangamElement, fallback: float) -> float:
    if el.start is None or el.end is None:
        return fallback
    return 0.5 * (el.start.jd + el.end.jd)
