# tests/test_batch.py

import json
import pytest
from datetime import date, datetime, timezone
from unittest.mock import patch

from panchangam.engines.batch import BoundaryCache, TithiBoundaryTable, compute_all_tithi_boundaries

from conftest import EPOCH, HoleyEphemeris, LinearEphemeris

JSON_KEYS = {"tithiIno", "startTime", "endTime", "masaIno", "isLeapMonth"}


@pytest.fixture(scope="module")
def boundaries():
    from panchangam.core.types import Location
    return compute_all_tithi_boundaries(2024, Location(0.0, 0.0, 0.0, 0.0), LinearEphemeris(phase0=100.0))


def test_year_is_tiled(boundaries):
    assert 360 < len(boundaries) < 385
    for a, b in zip(boundaries, boundaries[1:]):
        assert a.start_time < b.start_time
        assert a.end_time == b.start_time
        assert b.tithi_ino == (a.tithi_ino + 1) % 30


def test_year_edges(boundaries):
    jan1 = datetime(2024, 1, 1, tzinfo=timezone.utc)
    next_jan1 = datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert boundaries[0].start_time < jan1 < boundaries[0].end_time
    assert boundaries[0].tithi_ino == 8
    assert boundaries[-1].start_time < next_jan1 <= boundaries[-1].end_time
    assert all(b.end_time > jan1 and b.start_time < next_jan1 for b in boundaries)


def test_masa_is_constant_within_a_lunation(boundaries):
    for a, b in zip(boundaries, boundaries[1:]):
        if b.tithi_ino != 0:
            assert (b.masa_ino, b.is_leap_month) == (a.masa_ino, a.is_leap_month)


def test_stub_year_has_adhika_phalguna(boundaries):
    # the Sun stays in Meena from the Feb 20 new moon to the Mar 21 one
    table = TithiBoundaryTable(boundaries)
    assert table.leap_masas() == [11]
    phalguna = table.first(0, 11, False)
    adhika = table.first(0, 11, True)
    chaitra = table.first(0, 0, False)
    assert table.first(0, 0, True) is None
    assert phalguna.start_jd == pytest.approx(EPOCH + 21.3272, abs=1e-3)
    assert adhika.start_jd == pytest.approx(EPOCH + 21.3272 + 29.53, abs=1e-3)
    assert chaitra.start_jd == pytest.approx(EPOCH + 21.3272 + 2 * 29.53, abs=1e-3)
    assert adhika.masa_ino == (12 - 1) % 12


def test_table_lookup(boundaries):
    table = TithiBoundaryTable(boundaries)
    assert len(table) == len(boundaries)
    for b in boundaries[:40]:
        assert b in table.occurrences(*b.key)
    assert table.occurrences(3, 7, True) == ()
    assert table.first(3, 7, True) is None

    day = table.for_date(date(2024, 6, 1))
    assert 1 <= len(day) <= 3
    assert table.gaps() == []


def test_json_keys_and_roundtrip(boundaries, tmp_path):
    table = TithiBoundaryTable(boundaries)
    records = json.loads(table.to_json())
    assert all(set(r) == JSON_KEYS for r in records)
    assert records[0]["tithiIno"] == boundaries[0].tithi_ino

    path = tmp_path / "year.json"
    table.dump(path)
    loaded = TithiBoundaryTable.load(path)
    assert list(loaded) == list(table)


def test_cache_computes_once(boundaries, tmp_path, utc_location):
    cache = BoundaryCache(tmp_path / "cache")
    with patch("panchangam.engines.batch.compute_all_tithi_boundaries", return_value=boundaries) as mock:
        first = cache.get_or_compute(2024, utc_location, LinearEphemeris())
        second = cache.get_or_compute(2024, utc_location, LinearEphemeris())
    assert mock.call_count == 1
    assert cache.path_for(2024, utc_location).is_file()
    assert list(first) == list(second)


def test_unreadable_cache_is_ignored(tmp_path, utc_location, caplog):
    cache = BoundaryCache(tmp_path)
    cache.path_for(2024, utc_location).write_text("not json", encoding="utf-8")
    with caplog.at_level("WARNING"):
        assert cache.get(2024, utc_location) is None
    assert "unreadable cache" in caplog.text


def test_cache_path_for_iana_zone(tmp_path, hyderabad):
    p = BoundaryCache(tmp_path).path_for(2024, hyderabad)
    assert "Asia_Kolkata" in p.name
    assert p.parent == tmp_path


def test_failed_boundaries_are_skipped(caplog):
    from panchangam.core.types import Location
    prov = HoleyEphemeris(phase0=100.0, hole_start=EPOCH + 180.0, hole_end=EPOCH + 180.3)
    with caplog.at_level("WARNING"):
        out = compute_all_tithi_boundaries(2024, Location(0.0, 0.0, 0.0, 0.0), prov)
    assert len(out) > 300
    assert TithiBoundaryTable(out).gaps()
    assert "unavailable" in caplog.text or "skipped" in caplog.text
