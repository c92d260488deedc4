"""
panchangam.core.time
--------------------
Julian Day utility: Gregorian civil time <-> JD (UT), ΔT, and the explicit
fixed-offset civil time helpers used at the engine boundary.

Inside the engine a JD is always Universal Time. Local time only appears when
converting to and from civil values, and the offset is always an argument.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from .types import CivilTime
from ..reference.deltat import DeltaTModel, EspenakMeeusDeltaT

_JD_UNIX_EPOCH = 2440587.5  # JD at 1970-01-01 00:00:00 UTC


# ============================================================
# Gregorian civil date <-> JD (Meeus ch. 7)
# ============================================================

def civil_to_julian_day(month: int, day_fraction: float, year: int) -> float:
    """
    Gregorian (month, day with fraction, year) -> JD.

    `day_fraction` may carry the time of day, e.g. 15.25 for 06:00 on the 15th.
    """
    y = year
    m = month
    if m <= 2:
        y -= 1
        m += 12
    a = y // 100
    b = 2 - a + a // 4
    return math.floor(365.25 * (y + 4716)) + math.floor(30.6001 * (m + 1)) + day_fraction + b - 1524.5


def julian_day_to_civil(jd: float) -> CivilTime:
    """JD -> Gregorian civil time (UTC when jd is UT), rounded to the nearest millisecond."""
    # round first so 23:59:59.9999 carries into the next day instead of second=60
    jd_ms = round((jd + 0.5) * 86400000.0)
    z, ms_of_day = divmod(jd_ms, 86400000)

    alpha = (z - 1867216.25) // 36524.25
    a = z + 1 + alpha - alpha // 4
    b = a + 1524
    c = (b - 122.1) // 365.25
    d = math.floor(365.25 * c)
    e = (b - d) // 30.6001

    day = int(b - d - math.floor(30.6001 * e))
    month = int(e - 1 if e < 14 else e - 13)
    year = int(c - 4716 if month > 2 else c - 4715)

    hour, rem = divmod(int(ms_of_day), 3600000)
    minute, rem = divmod(rem, 60000)
    return CivilTime(year, month, day, hour, minute, rem / 1000.0)


def date_to_jd(d: date) -> float:
    """JD of 0h UT on a civil date."""
    return civil_to_julian_day(d.month, float(d.day), d.year)


def local_midnight_jd(d: date, tz_offset_hours: float) -> float:
    """JD (UT) of local 00:00 on `d` for a fixed offset east of UTC."""
    return date_to_jd(d) - tz_offset_hours / 24.0


def local_date(jd: float, tz_offset_hours: float) -> date:
    c = julian_day_to_civil(jd + tz_offset_hours / 24.0)
    return date(c.year, c.month, c.day)


def weekday_index(jd: float, tz_offset_hours: float) -> int:
    """Vara of the local civil day holding `jd`: 0 = Sunday .. 6 = Saturday."""
    return (local_date(jd, tz_offset_hours).isoweekday()) % 7


# ============================================================
# ΔT
# ============================================================

def delta_t(jd_ut: float, model: Optional[DeltaTModel] = None) -> float:
    """ΔT = TT − UT in hours, so that jd_tt = jd_ut + delta_t(jd_ut) / 24."""
    m = model if model is not None else EspenakMeeusDeltaT()
    return m.seconds(jd_ut) / 3600.0


# ============================================================
# datetime <-> JD
# ============================================================

def datetime_to_jd(dt: datetime) -> float:
    """Aware datetime -> JD (UT)."""
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    return _JD_UNIX_EPOCH + dt.astimezone(timezone.utc).timestamp() / 86400.0


def jd_to_datetime(jd: float, tz_offset_hours: float = 0.0) -> datetime:
    """JD (UT) -> aware datetime carrying a fixed offset, to the millisecond."""
    tz = timezone(timedelta(hours=tz_offset_hours))
    c = julian_day_to_civil(jd + tz_offset_hours / 24.0)
    sec = int(c.second)
    micro = int(round((c.second - sec) * 1e6))
    return datetime(c.year, c.month, c.day, c.hour, c.minute, sec, micro, tzinfo=tz)
