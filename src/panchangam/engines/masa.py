"""
panchangam.engines.masa
-----------------------
Lunar month (masa) resolution.

A lunar month takes its name from the solar month (sidereal sign of the Sun)
that begins inside it. If the Sun stays in one sign from the opening new
moon to the closing one, no solar month begins and the lunar month is
adhika (leap) and keeps the number of the solar month it lies in, so its
masa index is one below that of the regular month that follows it.

Solar month numbers are 1..12 with Mesha = 1, using ceil(sidereal / 30) as
in the traditional tables; masa indices are 0..11 with Chaitra = 0.
"""

from __future__ import annotations

import math
from typing import Callable, Optional, Tuple

from ..core.config import DEFAULT_CONFIG, EngineConfig
from ..core.errors import CalculationUnavailableError, EphemerisUnavailableError
from ..core.types import MasaInfo
from .angles import PhaseCalculator, normalize_angle, sidereal_longitude
from .interfaces import EphemerisProvider
from .search import find_last_crossing, find_phase_crossing

SolarMonthFn = Callable[[float], int]

SYNODIC_MONTH = 29.530588853


def solar_month_index(longitude: float, ayanamsa: float) -> int:
    """Solar month 1..12 of a tropical solar longitude; 0 deg sidereal counts as 12."""
    m = int(math.ceil(sidereal_longitude(longitude, ayanamsa) / 30.0))
    return 12 if m == 0 else m


def masa_from_solar_months(current: int, following: int) -> Tuple[int, bool]:
    """(month_index, is_leap) from the solar months at the bracketing new moons."""
    if current == following:
        return current, True
    nxt = current + 1
    return (nxt - 12 if nxt > 12 else nxt), False


def amanta_index(month_index: int) -> int:
    """Amanta masa 0..11 (Chaitra = 0) of a month index 1..12, leap or not."""
    return (month_index - 1) % 12


def purnimanta_index(amanta: int, tithi_ordinal: int) -> int:
    """Purnimanta months start at full moon, so the Krishna paksha belongs to the next month."""
    return (amanta + 1) % 12 if tithi_ordinal > 15 else amanta


def ritu_index(amanta: int) -> int:
    return (amanta % 12) // 2


def drik_ritu_index(tropical_sun: float) -> int:
    """Seasons by tropical Sun: Vasanta starts at 330 deg (Sun in Pisces)."""
    return int(normalize_angle(tropical_sun + 30.0) // 60.0) % 6


def ayana_index(sidereal_sun: float) -> int:
    """0 uttarayana (Sun in Makara..Mithuna), 1 dakshinayana (Karka..Dhanu)."""
    s = normalize_angle(sidereal_sun)
    return 1 if 90.0 <= s < 270.0 else 0


def resolve_masa(tithi_ordinal: int, reference_jd: float, solar_month_at: SolarMonthFn) -> MasaInfo:
    """
    Masa of the lunar month holding `reference_jd`, whose tithi ordinal (1..30) is known.

    The bracketing new moons are approximated by walking back `ordinal - 1`
    days and forward `29 - (ordinal - 1)` days.
    """
    if tithi_ordinal is None or not 1 <= tithi_ordinal <= 30:
        raise CalculationUnavailableError(f"tithi ordinal must be 1..30, got {tithi_ordinal!r}")
    last_new_moon = reference_jd - (tithi_ordinal - 1)
    next_new_moon = reference_jd + (29 - (tithi_ordinal - 1))
    try:
        current = solar_month_at(last_new_moon)
        following = solar_month_at(next_new_moon)
    except EphemerisUnavailableError as e:
        raise CalculationUnavailableError(f"masa unavailable at JD {reference_jd:.5f}: {e}") from e

    month, leap = masa_from_solar_months(current, following)
    amanta = amanta_index(month)
    return MasaInfo(
        month_index=month,
        is_leap_month=leap,
        amanta_index=amanta,
        purnimanta_index=purnimanta_index(amanta, tithi_ordinal),
        solar_month_start=current,
        solar_month_end=following,
    )


class MasaResolver:
    """Binds masa resolution to an ephemeris provider."""

    def __init__(self, provider: EphemerisProvider, config: EngineConfig = DEFAULT_CONFIG):
        self.calc = PhaseCalculator(provider)
        self.config = config

    def solar_month_at(self, jd: float) -> int:
        return solar_month_index(self.calc.sun(jd), self.calc.ayanamsa(jd))

    def resolve(self, tithi_ordinal: int, reference_jd: float) -> MasaInfo:
        return resolve_masa(tithi_ordinal, reference_jd, self.solar_month_at)

    def masa_at_new_moon(self, new_moon_jd: float, next_new_moon_jd: Optional[float] = None) -> MasaInfo:
        """
        Masa of the lunation opening at an exact new moon.

        With the closing new moon known the comparison uses it; otherwise the
        29-day walk of resolve_masa applies.
        """
        if next_new_moon_jd is None:
            return self.resolve(1, new_moon_jd)
        try:
            current = self.solar_month_at(new_moon_jd)
            following = self.solar_month_at(next_new_moon_jd)
        except EphemerisUnavailableError as e:
            raise CalculationUnavailableError(f"masa unavailable at JD {new_moon_jd:.5f}: {e}") from e
        month, leap = masa_from_solar_months(current, following)
        amanta = amanta_index(month)
        return MasaInfo(month, leap, amanta, amanta, current, following)

    def new_moons_around(self, jd: float) -> Tuple[float, float]:
        """Exact new moons opening and closing the lunation that holds `jd`."""
        cfg = self.config
        window = SYNODIC_MONTH + 1.5
        last = find_last_crossing(jd - window, jd + cfg.precision_days, 0.0, self.calc.phase,
                                  step=cfg.batch_step_days, precision=cfg.precision_days)
        nxt = find_phase_crossing(jd + cfg.precision_days, jd + window, 0.0, self.calc.phase,
                                  step=cfg.batch_step_days, precision=cfg.precision_days)
        if last is None or nxt is None:
            raise CalculationUnavailableError(f"could not bracket JD {jd:.5f} between new moons")
        return last, nxt

    def masa_at(self, jd: float, tithi_ordinal: int) -> MasaInfo:
        """Masa at an instant from the exact bracketing new moons."""
        last, nxt = self.new_moons_around(jd)
        info = self.masa_at_new_moon(last, nxt)
        return MasaInfo(
            month_index=info.month_index,
            is_leap_month=info.is_leap_month,
            amanta_index=info.amanta_index,
            purnimanta_index=purnimanta_index(info.amanta_index, tithi_ordinal),
            solar_month_start=info.solar_month_start,
            solar_month_end=info.solar_month_end,
        )
