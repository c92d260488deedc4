"""
panchangam.reference.deltat

ΔT (= TT − UT1) used to move provider inputs from Universal Time to the
dynamical time of the analytic series.

The calendar engine only ever sees UT; ΔT is applied inside the ephemeris
layer. The model is the Espenak–Meeus (NASA) piecewise polynomial for the
modern era (1600..2150) with the long-term parabola outside it, which is ample
for the supported 1800–2100 window. Callers wanting a fixed value (tests,
comparisons against almanacs that quote one) use ConstantDeltaT.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Protocol, Tuple


class DeltaTModel(Protocol):
    def seconds(self, jd_ut: float) -> float: ...
    def info(self) -> Dict[str, Any]: ...


def _poly(u: float, coeffs: Tuple[float, ...]) -> float:
    """Horner evaluation for Σ coeffs[k] u^k."""
    acc = 0.0
    for c in reversed(coeffs):
        acc = acc * u + c
    return acc


def decimal_year_from_jd(jd_ut: float) -> float:
    """Decimal year for ΔT purposes (Julian-year approximation, good to a day)."""
    return 2000.0 + (jd_ut - 2451544.5) / 365.2425


def delta_t_em2006(y: float) -> float:
    """Espenak–Meeus ΔT(y) in seconds; y is the decimal year."""
    if y < 1600.0 or y >= 2150.0:
        u = (y - 1820.0) / 100.0
        return -20.0 + 32.0 * u * u
    if y < 1700.0:
        t = y - 1600.0
        return 120.0 - 0.9808 * t - 0.01532 * t * t + (t ** 3) / 7129.0
    if y < 1800.0:
        t = y - 1700.0
        return 8.83 + 0.1603 * t - 0.0059285 * t * t + 0.00013336 * (t ** 3) - (t ** 4) / 1174000.0
    if y < 1860.0:
        t = y - 1800.0
        return _poly(t, (
            13.72,
            -0.332447,
            0.0068612,
            0.0041116,
            -0.00037436,
            0.0000121272,
            -0.0000001699,
            0.000000000875,
        ))
    if y < 1900.0:
        t = y - 1860.0
        return 7.62 + 0.5737 * t - 0.251754 * (t ** 2) + 0.01680668 * (t ** 3) - 0.0004473624 * (t ** 4) + (t ** 5) / 233174.0
    if y < 1920.0:
        t = y - 1900.0
        return -2.79 + 1.494119 * t - 0.0598939 * (t ** 2) + 0.0061966 * (t ** 3) - 0.000197 * (t ** 4)
    if y < 1941.0:
        t = y - 1920.0
        return 21.20 + 0.84493 * t - 0.076100 * (t ** 2) + 0.0020936 * (t ** 3)
    if y < 1961.0:
        t = y - 1950.0
        return 29.07 + 0.407 * t - (t ** 2) / 233.0 + (t ** 3) / 2547.0
    if y < 1986.0:
        t = y - 1975.0
        return 45.45 + 1.067 * t - (t ** 2) / 260.0 - (t ** 3) / 718.0
    if y < 2005.0:
        t = y - 2000.0
        return _poly(t, (63.86, 0.3345, -0.060374, 0.0017275, 0.000651814, 0.00002373599))
    if y < 2050.0:
        t = y - 2000.0
        return 62.92 + 0.32217 * t + 0.005589 * (t ** 2)
    # 2050..2150: blend into the parabola without a jump at 2150
    u = (y - 1820.0) / 100.0
    return -20.0 + 32.0 * u * u - 0.5628 * (2150.0 - y)


@dataclass(frozen=True)
class EspenakMeeusDeltaT:
    def seconds(self, jd_ut: float) -> float:
        return float(delta_t_em2006(decimal_year_from_jd(jd_ut)))

    def info(self) -> Dict[str, Any]:
        return {"type": "em2006"}


@dataclass(frozen=True)
class ConstantDeltaT:
    value_seconds: float

    def seconds(self, jd_ut: float) -> float:
        return float(self.value_seconds)

    def info(self) -> Dict[str, Any]:
        return {"type": "constant", "seconds": self.value_seconds}


def delta_t_seconds(jd_ut: float) -> float:
    return EspenakMeeusDeltaT().seconds(jd_ut)
