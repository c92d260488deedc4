# tests/test_calendar.py

import pytest
from datetime import date

from panchangam.core.config import DEFAULT_CONFIG
from panchangam.engines.angles import KINDS
from panchangam.engines.calendar import PanchangamCalendar

from conftest import EPOCH, LinearEphemeris

# new moon at 2024-01-01 00:00 UT; sunrise 06:00 UT at the stub location
JAN1 = date(2024, 1, 1)


def test_sunrise_snapshot_on_linear_stub(linear_provider, utc_location):
    snap = PanchangamCalendar(linear_provider).snapshot(JAN1, utc_location)

    assert snap.reference.jd == pytest.approx(EPOCH + 0.25)
    assert snap.tithi.index == 0
    assert snap.tithi.name == "Shukla Pratipada"
    assert snap.tithi.start.jd == pytest.approx(EPOCH, abs=1e-4)
    assert snap.tithi.end.jd == pytest.approx(EPOCH + 29.53 / 30.0, abs=1e-4)
    assert snap.paksha.index == 0
    assert snap.karana.index == 10
    assert snap.vara.index == 1  # Monday
    assert snap.masa.index == 10
    assert not snap.masa.is_leap_month
    assert snap.masa.start.jd == pytest.approx(EPOCH, abs=1e-4)
    assert snap.sun_rashi.index == 9
    assert snap.moonrise is None and snap.moonset is None
    assert [a.element.index for a in snap.day_angas] == [0, 1]
    assert all(a.tag is None for a in snap.day_angas)
    assert set(snap.attributes) == {"guna", "trinity", "gana"}


def test_skipped_tithi_is_reported_and_tagged(utc_location):
    # 27-day synodic month: tithis last 0.9 d, tithi 7 lies inside day 6
    prov = LinearEphemeris(synodic=27.0)
    d = date(2024, 1, 7)
    cal = PanchangamCalendar(prov)
    snap = cal.snapshot(d, utc_location)

    assert snap.tithi.index == 7
    assert snap.tithi.start.jd == pytest.approx(EPOCH + 6.3, abs=1e-4)
    assert snap.tithi.end.jd == pytest.approx(EPOCH + 7.2, abs=1e-4)
    assert [a.element.index for a in snap.day_angas] == [6, 7, 8]
    assert [a.tag for a in snap.day_angas] == [None, "kshaya", None]


def test_sunset_snapshot_reports_raw_elements(utc_location):
    prov = LinearEphemeris(synodic=27.0)
    snap = PanchangamCalendar(prov).snapshot(date(2024, 1, 7), utc_location, at="sunset")
    # 6.75 d after the new moon
    assert snap.reference.jd == pytest.approx(EPOCH + 6.75)
    assert snap.tithi.index == 7


def test_pradosha_instant(linear_provider, utc_location):
    cal = PanchangamCalendar(linear_provider)
    # sunset 18:00, next sunrise 06:00: a fifth of 12 h after sunset
    assert cal.pradosha(JAN1, utc_location) == pytest.approx(EPOCH + 0.75 + 0.1)


def test_unknown_reference_instant(linear_provider, utc_location):
    with pytest.raises(ValueError):
        PanchangamCalendar(linear_provider).reference_instant(JAN1, utc_location, "noon")


def test_polar_fallback_to_six_am(utc_location, caplog):
    class NoSun(LinearEphemeris):
        def sun_times(self, d, location):
            from panchangam.core.types import SunTimes
            return SunTimes(None, None)

    cal = PanchangamCalendar(NoSun())
    with caplog.at_level("WARNING"):
        assert cal.sunrise(JAN1, utc_location) == pytest.approx(EPOCH + 0.25)
    assert "no sunrise" in caplog.text


def test_element_interval(linear_provider):
    cal = PanchangamCalendar(linear_provider, DEFAULT_CONFIG)
    start, end = cal.element_interval(KINDS["tithi"], 3, EPOCH + 3.5)
    step = 29.53 / 30.0
    assert start == pytest.approx(EPOCH + 3 * step, abs=1e-4)
    assert end == pytest.approx(EPOCH + 4 * step, abs=1e-4)


def test_localized_names(linear_provider, utc_location):
    from panchangam import names
    names.register_locale("xx", "vara", [f"v{i}" for i in range(7)])
    try:
        snap = PanchangamCalendar(linear_provider, locale="xx").snapshot(JAN1, utc_location)
        assert snap.vara.name == "Somavara"
        assert snap.vara.name_localized == "v1"
    finally:
        names.unregister_locale("xx")


def test_snapshot_as_dict(linear_provider, utc_location):
    d = PanchangamCalendar(linear_provider).snapshot(JAN1, utc_location).as_dict()
    assert d["date"] == "2024-01-01"
    assert d["tithi"]["index"] == 0
    assert d["masa"]["isLeapMonth"] is False
    assert d["dayAngas"][0]["tag"] is None
