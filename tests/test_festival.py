# tests/test_festival.py

import pytest
from datetime import date
from unittest.mock import patch

from panchangam import names
from panchangam.core.errors import AmbiguousMasaResolutionError
from panchangam.core.time import date_to_jd
from panchangam.core.types import MasaInfo
from panchangam.engines import festival as fest
from panchangam.engines.festival import NewMoonCandidate

from conftest import EPOCH, LinearEphemeris

# phase0=100: new moons at EPOCH + 21.33 + k * 29.53; the second one opens Adhika Phalguna
STUB = LinearEphemeris(phase0=100.0)
NM1 = EPOCH + 260.0 / 360.0 * 29.53


def cand(y, m, d, amanta, leap=False):
    month = amanta if leap else amanta + 1
    return NewMoonCandidate(date_to_jd(date(y, m, d)), MasaInfo(month, leap, amanta, amanta, 0, 0))


def test_target_year_leap_preference():
    cands = [cand(2023, 7, 17, 4, leap=True), cand(2023, 8, 16, 4)]
    assert fest.select_new_moon(cands, 4, 2023).month == 8
    assert fest.select_new_moon(cands, 4, 2023, prefer_leap=True).month == 7


def test_target_year_falls_back_to_leap_when_only_leap():
    cands = [cand(2023, 7, 17, 4, leap=True)]
    assert fest.select_new_moon(cands, 4, 2023).masa.is_leap_month


def test_early_next_year_before_later_ones():
    cands = [cand(2024, 2, 9, 10), cand(2025, 1, 29, 10), cand(2025, 2, 28, 11)]
    assert fest.select_new_moon(cands, 11, 2024).year == 2025
    assert fest.select_new_moon(cands, 10, 2024).year == 2024


def test_last_resort_first_regular():
    cands = [cand(2025, 4, 27, 1, leap=True), cand(2025, 5, 27, 1)]
    assert fest.select_new_moon(cands, 1, 2024).month == 5
    assert fest.select_new_moon(cands, 2, 2024) is None


def test_no_candidate_raises():
    with patch("panchangam.engines.festival.new_moon_candidates", return_value=[]):
        with pytest.raises(AmbiguousMasaResolutionError):
            fest.find_new_moon_for_masa(0, 2024, STUB)


def test_new_moon_candidates_on_stub():
    cands = fest.new_moon_candidates(2024, STUB)
    assert cands[0].jd == pytest.approx(NM1, abs=1e-4)
    for a, b in zip(cands, cands[1:]):
        assert b.jd - a.jd == pytest.approx(29.53, abs=1e-3)
    leaps = [c for c in cands if c.masa.is_leap_month]
    assert [c.masa.amanta_index for c in leaps] == [11]


def test_tithi_in_masa_regular_and_adhika(utc_location):
    nija = fest.tithi_in_masa(0, 11, 2024, utc_location, STUB)
    adhika = fest.tithi_in_masa(0, 11, 2024, utc_location, STUB, prefer_leap=True)
    assert nija.start_jd == pytest.approx(NM1, abs=1e-3)
    assert (nija.masa_ino, adhika.masa_ino) == (11, 11)
    assert not nija.is_leap_month
    assert adhika.start_jd == pytest.approx(NM1 + 29.53, abs=1e-3)
    assert adhika.is_leap_month
    assert nija.end_jd - nija.start_jd == pytest.approx(29.53 / 30.0, abs=1e-3)


def test_chaitra_has_no_leap_lunation_on_stub(utc_location):
    chaitra = fest.tithi_in_masa(0, 0, 2024, utc_location, STUB, prefer_leap=True)
    assert not chaitra.is_leap_month
    assert chaitra.start_jd == pytest.approx(NM1 + 2 * 29.53, abs=1e-3)


def test_pratipada_starts_at_the_new_moon_without_a_scan(utc_location):
    nm = NewMoonCandidate(NM1 + 2 * 29.53, MasaInfo(1, False, 0, 0, 12, 1))
    with patch("panchangam.engines.festival.find_new_moon_for_masa", return_value=nm), \
            patch("panchangam.engines.festival.find_phase_crossing", wraps=fest.find_phase_crossing) as scan:
        b = fest.tithi_in_masa(0, 0, 2024, utc_location, STUB)
    assert b.start_jd == pytest.approx(nm.jd, abs=1e-6)
    # only the end of the tithi is searched
    assert scan.call_count == 1
    assert scan.call_args.args[2] == pytest.approx(12.0)


def test_krishna_tithi_searched_after_full_moon(utc_location):
    b = fest.tithi_in_masa(15, 0, 2024, utc_location, STUB)
    assert b.tithi_ino == 15
    assert b.start_jd == pytest.approx(NM1 + 2 * 29.53 + 14.765, abs=1e-3)


def test_occurrences_in_year(utc_location):
    out = fest.tithi_occurrences_in_year(0, 2024, utc_location, STUB)
    assert len(out) == 12
    assert sum(b.is_leap_month for b in out) == 1


def test_ugadi_prefers_table(utc_location):
    from panchangam.engines.batch import TithiBoundaryTable
    b = fest.tithi_in_masa(0, 0, 2024, utc_location, STUB)
    table = TithiBoundaryTable([b])
    with patch("panchangam.engines.festival.tithi_in_masa") as mock:
        assert fest.ugadi(2024, utc_location, STUB, table=table) == b
    mock.assert_not_called()


def test_samvatsara_cycle():
    assert fest.cycle_index(1867) == 0
    assert names.name("samvatsara", fest.cycle_index(2024)) == "Krodhi"
    assert names.name("samvatsara", fest.cycle_index(2024, new_year_started=False)) == "Shobhakrit"
    assert fest.cycle_index(1927) == 0


def test_samvatsara_before_and_after_ugadi(utc_location):
    # stub Ugadi (Nija Chaitra) falls on 2024-03-21
    assert fest.samvatsara_name(date(2024, 3, 1), utc_location, STUB) == "Shobhakrit"
    assert fest.samvatsara_name(date(2024, 4, 1), utc_location, STUB) == "Krodhi"
