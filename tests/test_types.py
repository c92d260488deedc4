# tests/test_types.py

import pytest
from datetime import date, datetime, timedelta, timezone

from panchangam.core.types import CalendarInstant, CivilTime, Location, Tithi, TithiBoundary


def test_location_validation():
    with pytest.raises(ValueError):
        Location(91.0, 0.0)
    with pytest.raises(ValueError):
        Location(0.0, -181.0)


def test_fixed_and_iana_offsets():
    assert Location(0.0, 0.0, 0.0, 5.5).utc_offset_hours() == 5.5
    kolkata = Location(17.385, 78.4867, 0.0, "Asia/Kolkata")
    assert kolkata.offset_on(date(2024, 7, 1)) == 5.5
    ny = Location(40.71, -74.0, 0.0, "America/New_York")
    assert ny.offset_on(date(2024, 1, 15)) == -5.0
    assert ny.offset_on(date(2024, 7, 15)) == -4.0


def test_calendar_instant_civil_and_datetime():
    inst = CalendarInstant(2451545.0, 5.5)
    assert inst.civil() == CivilTime(2000, 1, 1, 17, 30, 0.0)
    dt = inst.to_datetime()
    assert dt.utcoffset() == timedelta(hours=5, minutes=30)
    assert str(inst).startswith("2000-01-01T17:30:00")

    back = CalendarInstant.from_datetime(datetime(2000, 1, 1, 12, tzinfo=timezone.utc))
    assert back.jd == pytest.approx(2451545.0)
    assert CalendarInstant.from_civil(CivilTime(2000, 1, 1, 17, 30, 0.0), 5.5).jd == pytest.approx(2451545.0)


def test_element_contains_is_half_open():
    t = Tithi(3, "Shukla Chaturthi", "Shukla Chaturthi", CalendarInstant(10.0, 0.0), CalendarInstant(11.0, 0.0))
    assert t.contains(10.0)
    assert t.contains(10.999)
    assert not t.contains(11.0)
    assert not t.contains(9.999)
    assert t.ordinal == 4
    assert t.paksha_index == 0
    assert (t.start_jd, t.end_jd) == (10.0, 11.0)
    assert Tithi(20, "x", "x").contains(123.0)


def test_tithi_boundary_dict_keys():
    ist = timezone(timedelta(hours=5, minutes=30))
    b = TithiBoundary(0, datetime(2024, 4, 9, 0, 21, tzinfo=ist), datetime(2024, 4, 9, 20, 51, tzinfo=ist), 0, False)
    d = b.to_dict()
    assert d == {
        "tithiIno": 0,
        "startTime": "2024-04-09T00:21:00+05:30",
        "endTime": "2024-04-09T20:51:00+05:30",
        "masaIno": 0,
        "isLeapMonth": False,
    }
    assert TithiBoundary.from_dict(d) == b
    assert b.key == (0, 0, False)
