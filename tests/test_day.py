# tests/test_day.py

from panchangam.core.types import CalendarInstant, Nakshatra, Tithi
from panchangam.engines.day import classify_interval, select_day_elements, select_intervals

# sunrise 06:00 on day 1 and day 2
S1 = 2460000.25
S2 = S1 + 1.0
H = 1.0 / 24.0


def test_interval_inside_the_day_is_kshaya():
    # 12:00 day 1 -> 05:00 day 2 never touches a sunrise
    assert classify_interval(S1 + 6 * H, S2 - 1 * H, S1, S2) == "kshaya"


def test_interval_ending_after_next_sunrise_is_not_kshaya():
    # 12:00 day 1 -> 11:00 day 2 holds the day 2 sunrise
    assert classify_interval(S1 + 6 * H, S2 + 5 * H, S1, S2) is None


def test_interval_spanning_both_sunrises_is_vriddhi():
    # 05:00 day 1 -> 07:00 day 2
    assert classify_interval(S1 - 1 * H, S2 + 1 * H, S1, S2) == "vriddhi"


def test_boundary_equality_is_untagged():
    assert classify_interval(S1, S2 - H, S1, S2) is None
    assert classify_interval(S1 - H, S2, S1, S2) is None


def test_default_next_sunrise_is_24h_later():
    assert classify_interval(S1 + H, S1 + 20 * H, S1) == "kshaya"


def test_select_drops_intervals_outside_the_day():
    intervals = [
        (S1 - 20 * H, S1),          # ends exactly at sunrise
        (S1, S1 + 10 * H),
        (S1 + 10 * H, S2 - 2 * H),
        (S2 - 2 * H, S2 + 20 * H),
        (S2 + 20 * H, S2 + 40 * H),
    ]
    out = select_intervals(intervals, S1, kind="tithi", next_sunrise=S2)
    assert [(a, b) for a, b, _ in out] == intervals[1:4]
    assert [t for _, _, t in out] == [None, "kshaya", None]


def test_only_tithi_is_tagged():
    out = select_intervals([(S1 + H, S2 - H)], S1, kind="nakshatra", next_sunrise=S2)
    assert out == [(S1 + H, S2 - H, None)]


def _el(cls, idx, start, end):
    return cls(idx, f"{cls.kind}-{idx}", f"{cls.kind}-{idx}", CalendarInstant(start, 0.0), CalendarInstant(end, 0.0))


def test_select_day_elements():
    els = [
        _el(Tithi, 4, S1 - 10 * H, S1 + 2 * H),
        _el(Tithi, 5, S1 + 2 * H, S2 - 3 * H),
        _el(Tithi, 6, S2 - 3 * H, S2 + 19 * H),
        _el(Nakshatra, 9, S1 + 2 * H, S2 - 3 * H),
    ]
    out = select_day_elements(els, S1, next_sunrise=S2)
    assert [a.element.index for a in out] == [4, 5, 6, 9]
    assert [a.tag for a in out] == [None, "kshaya", None, None]
