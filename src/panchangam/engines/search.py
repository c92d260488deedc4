"""
panchangam.engines.search
-------------------------
Boundary search: the instant a continuous, increasing angle (lunar phase,
sidereal longitude, yoga sum) crosses a target value.

Two phases:
  1. coarse scan on the fixed grid start + i*step, looking for the pair of
     samples that straddles the target;
  2. bisection on that bracket until it is narrower than `precision`.

The angle wraps at 360 -> 0, so straddling is judged on the signed
difference to the target in [-180, 180). For a target of 0 that is the same
as "previous sample above 340, next sample below 20". A jump larger than
_MAX_STEP_DEG between samples is the far side of the circle, not a crossing.

Grid points are computed from their index rather than accumulated, so a
given (start, end, step) always evaluates the same instants.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional

from ..core.errors import NoCrossingFoundError
from .angles import normalize_angle

logger = logging.getLogger(__name__)

PhaseFn = Callable[[float], float]

DEFAULT_STEP = 0.01
DEFAULT_PRECISION = 1e-5
_MAX_STEP_DEG = 40.0


def _offset(angle: float, target: float) -> float:
    """Signed angular distance angle - target in [-180, 180)."""
    return normalize_angle(angle - target + 180.0) - 180.0


def crosses(prev: float, curr: float, target: float) -> bool:
    """True if an increasing angle passes `target` between samples prev and curr."""
    target = normalize_angle(target)
    if target == 0.0:
        return prev > 360.0 - _MAX_STEP_DEG / 2 and curr < _MAX_STEP_DEG / 2
    d0 = _offset(prev, target)
    d1 = _offset(curr, target)
    return d0 < 0.0 <= d1 and (d1 - d0) < _MAX_STEP_DEG


def refine_crossing(
    lo: float,
    hi: float,
    target: float,
    phase_fn: PhaseFn,
    *,
    precision: float = DEFAULT_PRECISION,
) -> float:
    """
    Bisect a bracket [lo, hi] known to contain the crossing.
    Returns the upper end, the first point at or past the target.
    """
    target = normalize_angle(target)
    while hi - lo > precision:
        mid = 0.5 * (lo + hi)
        if _offset(phase_fn(mid), target) < 0.0:
            lo = mid
        else:
            hi = mid
    return hi


def _grid_size(start_jd: float, end_jd: float, step: float) -> int:
    return int(math.ceil((end_jd - start_jd) / step - 1e-9))


def find_phase_crossing(
    start_jd: float,
    end_jd: float,
    target_deg: float,
    phase_fn: PhaseFn,
    *,
    step: float = DEFAULT_STEP,
    precision: float = DEFAULT_PRECISION,
) -> Optional[float]:
    """
    First instant in [start_jd, end_jd) where phase_fn crosses target_deg
    from below, or None if the window holds no crossing.
    """
    if end_jd <= start_jd:
        return None
    n = _grid_size(start_jd, end_jd, step)
    prev_jd = start_jd
    prev = phase_fn(prev_jd)
    for i in range(1, n + 1):
        jd = min(start_jd + i * step, end_jd)
        curr = phase_fn(jd)
        if crosses(prev, curr, target_deg):
            logger.debug("crossing of %.4f bracketed in [%.5f, %.5f]", target_deg, prev_jd, jd)
            hit = refine_crossing(prev_jd, jd, target_deg, phase_fn, precision=precision)
            return hit if hit < end_jd else None
        prev_jd, prev = jd, curr
    return None


def find_last_crossing(
    start_jd: float,
    end_jd: float,
    target_deg: float,
    phase_fn: PhaseFn,
    *,
    step: float = DEFAULT_STEP,
    precision: float = DEFAULT_PRECISION,
) -> Optional[float]:
    """Latest crossing in [start_jd, end_jd), scanning backwards from end_jd."""
    if end_jd <= start_jd:
        return None
    n = _grid_size(start_jd, end_jd, step)
    next_jd = end_jd
    nxt = phase_fn(next_jd)
    for i in range(1, n + 1):
        jd = max(end_jd - i * step, start_jd)
        curr = phase_fn(jd)
        if crosses(curr, nxt, target_deg):
            hit = refine_crossing(jd, next_jd, target_deg, phase_fn, precision=precision)
            return hit if hit < end_jd else None
        next_jd, nxt = jd, curr
    return None


def require_crossing(
    start_jd: float,
    end_jd: float,
    target_deg: float,
    phase_fn: PhaseFn,
    **kw,
) -> float:
    """find_phase_crossing that raises NoCrossingFoundError instead of returning None."""
    jd = find_phase_crossing(start_jd, end_jd, target_deg, phase_fn, **kw)
    if jd is None:
        raise NoCrossingFoundError(
            f"no crossing of {target_deg:.4f} deg in JD [{start_jd:.5f}, {end_jd:.5f})"
        )
    return jd
