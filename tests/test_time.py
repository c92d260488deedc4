# tests/test_time.py

import pytest
import random
from datetime import date, datetime, timedelta, timezone

from panchangam.core import time as pt
from panchangam.reference.deltat import ConstantDeltaT


def test_j2000_and_meeus_example_7a():
    assert pt.civil_to_julian_day(1, 1.5, 2000) == 2451545.0
    # Meeus Example 7.a: 1957 October 4.81 (Sputnik 1)
    assert pt.civil_to_julian_day(10, 4.81, 1957) == pytest.approx(2436116.31, abs=1e-9)


def test_civil_roundtrip_1900_2100():
    random.seed(42)
    lo = pt.civil_to_julian_day(1, 1.0, 1900)
    hi = pt.civil_to_julian_day(12, 31.0, 2100)
    for _ in range(5000):
        jd_in = random.uniform(lo, hi)
        c = pt.julian_day_to_civil(jd_in)
        jd_out = pt.civil_to_julian_day(c.month, c.day_fraction(), c.year)
        # one second is ~1.16e-5 days
        assert jd_out == pytest.approx(jd_in, abs=1.0 / 86400.0)


def test_civil_rounding_carries_into_next_day():
    jd = pt.civil_to_julian_day(12, 31.0, 2023) + (86400.0 - 0.0001) / 86400.0
    c = pt.julian_day_to_civil(jd)
    assert (c.year, c.month, c.day, c.hour, c.minute, c.second) == (2024, 1, 1, 0, 0, 0.0)


def test_datetime_roundtrip_and_epochs():
    unix = datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert pt.datetime_to_jd(unix) == 2440587.5

    random.seed(7)
    for _ in range(500):
        jd_in = random.uniform(2415020.5, 2488070.5)
        dt = pt.jd_to_datetime(jd_in, 5.5)
        assert dt.utcoffset() == timedelta(hours=5, minutes=30)
        assert pt.datetime_to_jd(dt) == pytest.approx(jd_in, abs=1e-8)


def test_naive_datetime_rejected():
    with pytest.raises(ValueError):
        pt.datetime_to_jd(datetime(2024, 1, 1))


def test_local_helpers():
    d = date(2024, 1, 15)
    assert pt.local_midnight_jd(d, 5.5) == pytest.approx(pt.date_to_jd(d) - 5.5 / 24.0)
    # 2024-01-14 20:00 UT is already the 15th in India
    assert pt.local_date(pt.date_to_jd(date(2024, 1, 14)) + 20.0 / 24.0, 5.5) == d


def test_weekday_index_sunday_is_zero():
    # 2000-01-01 was a Saturday, 2024-01-14 a Sunday
    assert pt.weekday_index(2451545.0, 0.0) == 6
    assert pt.weekday_index(pt.date_to_jd(date(2024, 1, 14)) + 0.5, 0.0) == 0


def test_delta_t_hours():
    # about 64 s at J2000
    assert pt.delta_t(2451545.0) == pytest.approx(64.0 / 3600.0, abs=2.0 / 3600.0)
    assert pt.delta_t(2451545.0, ConstantDeltaT(36.0)) == pytest.approx(0.01)
