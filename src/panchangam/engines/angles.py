"""
panchangam.engines.angles
-------------------------
Angle/phase calculator: normalisation, sidereal conversion, and the mapping
from continuous angles to discrete element indices.

All index functions expect their angle already normalised to [0, 360), which
is what keeps every index inside its modulus.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict

from ..core.errors import EphemerisUnavailableError
from .interfaces import Body, EphemerisProvider

TITHI_SPAN = 12.0
KARANA_SPAN = 6.0
NAKSHATRA_SPAN = 360.0 / 27.0
YOGA_SPAN = 360.0 / 27.0
RASHI_SPAN = 30.0


def normalize_angle(deg: float) -> float:
    """Normalise to [0, 360) for any real input, negatives included."""
    y = math.fmod(deg, 360.0)
    if y < 0.0:
        y += 360.0
    if y >= 360.0:
        y = 0.0
    return y


def sidereal_longitude(tropical: float, ayanamsa: float) -> float:
    return normalize_angle(tropical - ayanamsa)


def element_index_from_angle(angle: float, degrees_per_element: float) -> int:
    n = int(round(360.0 / degrees_per_element))
    idx = int(math.floor(normalize_angle(angle) / degrees_per_element))
    # floor(359.9999999/13.333..) can land on n through rounding
    return min(idx, n - 1)


def tithi_index(phase: float) -> int:
    return element_index_from_angle(phase, TITHI_SPAN)


def nakshatra_index(sidereal_moon: float) -> int:
    return element_index_from_angle(sidereal_moon, NAKSHATRA_SPAN)


def yoga_angle(sidereal_sun: float, sidereal_moon: float) -> float:
    return normalize_angle(sidereal_sun + sidereal_moon)


def yoga_index(sidereal_sun: float, sidereal_moon: float) -> int:
    return element_index_from_angle(yoga_angle(sidereal_sun, sidereal_moon), YOGA_SPAN)


def rashi_index(sidereal: float) -> int:
    return element_index_from_angle(sidereal, RASHI_SPAN)


def karana_from_half_tithi(nk: int) -> int:
    """
    Karana for half-tithi number nk in 0..59.

    nk 0 is Kimstughna (10); nk 57..59 are Shakuni, Chatushpada, Naga (7..9);
    everything in between cycles through the seven movable karanas.
    """
    if nk == 0:
        return 10
    if nk >= 57:
        return nk - 50
    return (nk - 1) % 7


def karana_index(phase: float) -> int:
    return karana_from_half_tithi(element_index_from_angle(phase, KARANA_SPAN))


# ============================================================
# Element kinds
# ============================================================

@dataclass(frozen=True)
class ElementKind:
    name: str
    modulus: int
    span: float


TITHI = ElementKind("tithi", 30, TITHI_SPAN)
NAKSHATRA = ElementKind("nakshatra", 27, NAKSHATRA_SPAN)
YOGA = ElementKind("yoga", 27, YOGA_SPAN)
KARANA = ElementKind("karana", 60, KARANA_SPAN)  # searched by half-tithi
RASHI = ElementKind("rashi", 12, RASHI_SPAN)

KINDS: Dict[str, ElementKind] = {k.name: k for k in (TITHI, NAKSHATRA, YOGA, KARANA, RASHI)}


# ============================================================
# Provider-bound calculator
# ============================================================

@dataclass(frozen=True)
class PhaseCalculator:
    provider: EphemerisProvider

    def _mandatory(self, body: Body, jd: float) -> float:
        lon = self.provider.longitude(body, jd)
        if lon is None:
            raise EphemerisUnavailableError(f"provider returned no {body.value} longitude at JD {jd:.5f}")
        return normalize_angle(lon)

    def sun(self, jd: float) -> float:
        return self._mandatory(Body.SUN, jd)

    def moon(self, jd: float) -> float:
        return self._mandatory(Body.MOON, jd)

    def ayanamsa(self, jd: float) -> float:
        return self.provider.ayanamsa(jd)

    def phase(self, jd: float) -> float:
        """Lunar phase angle Moon − Sun in [0, 360)."""
        return normalize_angle(self.moon(jd) - self.sun(jd))

    def sidereal_sun(self, jd: float) -> float:
        return sidereal_longitude(self.sun(jd), self.ayanamsa(jd))

    def sidereal_moon(self, jd: float) -> float:
        return sidereal_longitude(self.moon(jd), self.ayanamsa(jd))

    def yoga_angle(self, jd: float) -> float:
        ay = self.ayanamsa(jd)
        return yoga_angle(sidereal_longitude(self.sun(jd), ay), sidereal_longitude(self.moon(jd), ay))

    def angle_function(self, kind: ElementKind) -> Callable[[float], float]:
        """The continuous angle whose span-multiples delimit elements of `kind`."""
        if kind.name in ("tithi", "karana"):
            return self.phase
        if kind.name == "nakshatra":
            return self.sidereal_moon
        if kind.name == "yoga":
            return self.yoga_angle
        if kind.name == "rashi":
            return self.sidereal_sun
        raise KeyError(f"Unknown element kind '{kind.name}'. Available: {sorted(KINDS)}")

    def index_at(self, kind: ElementKind, jd: float) -> int:
        """Raw element index at `jd` (karana returns the half-tithi number 0..59)."""
        return element_index_from_angle(self.angle_function(kind)(jd), kind.span)


def lunar_phase_angle(provider: EphemerisProvider, jd: float) -> float:
    return PhaseCalculator(provider).phase(jd)
