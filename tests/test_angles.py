# tests/test_angles.py

import pytest
import random

from panchangam.core.errors import EphemerisUnavailableError
from panchangam.engines import angles
from panchangam.engines.angles import KINDS, PhaseCalculator, ElementKind
from panchangam.engines.interfaces import Body

from conftest import EPOCH, LinearEphemeris


@pytest.mark.parametrize("deg, expected", [
    (-30.0, 330.0),
    (720.0, 0.0),
    (360.0, 0.0),
    (725.5, 5.5),
    (-360.0, 0.0),
])
def test_normalize_angle(deg, expected):
    assert angles.normalize_angle(deg) == pytest.approx(expected)


def test_normalize_angle_range():
    random.seed(3)
    for _ in range(10000):
        x = random.uniform(-1e6, 1e6)
        y = angles.normalize_angle(x)
        assert 0.0 <= y < 360.0
    # tiny negatives round to 360.0 in float and must fold to 0
    assert angles.normalize_angle(-1e-14) == 0.0


def test_indices_stay_inside_modulus():
    assert angles.tithi_index(359.9999999999) == 29
    assert angles.nakshatra_index(359.9999999999) == 26
    assert angles.rashi_index(359.9999999999) == 11
    assert angles.tithi_index(0.0) == 0
    assert angles.tithi_index(12.0) == 1
    assert angles.nakshatra_index(360.0 / 27.0 + 1e-9) == 1


def test_sidereal_longitude_subtracts_ayanamsa():
    assert angles.sidereal_longitude(10.0, 23.86) == pytest.approx(346.14)
    assert angles.sidereal_longitude(300.0, 24.0) == pytest.approx(276.0)


def test_yoga_sum():
    assert angles.yoga_angle(350.0, 20.0) == pytest.approx(10.0)
    assert angles.yoga_index(350.0, 20.0) == 0
    assert angles.yoga_index(180.0, 179.0) == 26


@pytest.mark.parametrize("nk, karana", [
    (0, 10),   # Kimstughna
    (1, 0),    # Bava
    (7, 6),    # Vishti
    (8, 0),
    (56, 6),
    (57, 7),   # Shakuni
    (58, 8),
    (59, 9),   # Naga
])
def test_karana_from_half_tithi(nk, karana):
    assert angles.karana_from_half_tithi(nk) == karana


def test_karana_index_from_phase():
    assert angles.karana_index(3.0) == 10
    assert angles.karana_index(6.0) == 0
    assert angles.karana_index(359.0) == 9


def test_phase_calculator_on_linear_stub():
    calc = PhaseCalculator(LinearEphemeris(phase0=90.0, ayanamsa_deg=24.0))
    assert calc.phase(EPOCH) == pytest.approx(90.0)
    assert calc.sidereal_sun(EPOCH) == pytest.approx(256.0)
    assert calc.sidereal_moon(EPOCH) == pytest.approx(346.0)
    assert calc.index_at(KINDS["tithi"], EPOCH) == 7
    assert calc.index_at(KINDS["karana"], EPOCH) == 15
    assert calc.index_at(KINDS["rashi"], EPOCH) == 8


def test_missing_mandatory_body_raises():
    class NoMoon(LinearEphemeris):
        def longitude(self, body, jd_ut):
            if body is Body.MOON:
                return None
            return super().longitude(body, jd_ut)

    calc = PhaseCalculator(NoMoon())
    with pytest.raises(EphemerisUnavailableError):
        calc.phase(EPOCH)


def test_unknown_kind():
    calc = PhaseCalculator(LinearEphemeris())
    with pytest.raises(KeyError):
        calc.angle_function(ElementKind("hora", 24, 15.0))
