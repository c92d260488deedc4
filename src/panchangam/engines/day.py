"""
panchangam.engines.day
----------------------
Which element intervals belong to a sunrise-to-sunrise day, and the
Vriddhi/Kshaya tags for them.

Given a sunrise S and the following sunrise S' (S + 24h when not supplied):
  - an interval that starts after S and ends before S' never holds a sunrise:
    Kshaya;
  - an interval that starts before S and ends after S' holds both sunrises:
    Vriddhi;
  - an interval ending exactly at S is not part of the day.
Tags are only applied to tithi; other kinds are returned untagged.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..core.types import AngaTag, DayAnga, PanchangamElement

TAGGED_KINDS = ("tithi",)


def classify_interval(
    start: float,
    end: float,
    sunrise: float,
    next_sunrise: Optional[float] = None,
) -> Optional[AngaTag]:
    nxt = sunrise + 1.0 if next_sunrise is None else next_sunrise
    if start > sunrise and end < nxt:
        return "kshaya"
    if start < sunrise and end > nxt:
        return "vriddhi"
    return None


def overlaps_day(start: float, end: float, sunrise: float, next_sunrise: float) -> bool:
    return end > sunrise and start < next_sunrise


def select_intervals(
    intervals: Sequence[Tuple[float, float]],
    sunrise: float,
    *,
    kind: str,
    next_sunrise: Optional[float] = None,
) -> List[Tuple[float, float, Optional[AngaTag]]]:
    """Plain (start, end) form of select_day_elements, handy for bare JDs."""
    nxt = sunrise + 1.0 if next_sunrise is None else next_sunrise
    out = []
    for start, end in intervals:
        if not overlaps_day(start, end, sunrise, nxt):
            continue
        tag = classify_interval(start, end, sunrise, nxt) if kind in TAGGED_KINDS else None
        out.append((start, end, tag))
    return out


def select_day_elements(
    elements: Sequence[PanchangamElement],
    sunrise: float,
    *,
    next_sunrise: Optional[float] = None,
) -> Tuple[DayAnga, ...]:
    nxt = sunrise + 1.0 if next_sunrise is None else next_sunrise
    out = []
    for el in elements:
        if el.start is None or el.end is None:
            continue
        if not overlaps_day(el.start.jd, el.end.jd, sunrise, nxt):
            continue
        tag = classify_interval(el.start.jd, el.end.jd, sunrise, nxt) if el.kind in TAGGED_KINDS else None
        out.append(DayAnga(element=el, tag=tag))
    return tuple(out)
