# tests/test_skip.py

import pytest
import random

from panchangam.engines.skip import SKIP_MODULI, resolve_skipped_element


def test_skipped_tithi_is_inserted():
    assert resolve_skipped_element(5, 7, 30) == 6


def test_consecutive_tithi_unchanged():
    assert resolve_skipped_element(5, 6, 30) == 5
    assert resolve_skipped_element(5, 5, 30) == 5


def test_wraparound():
    assert resolve_skipped_element(29, 1, 30) == 0
    assert resolve_skipped_element(29, 0, 30) == 29
    assert resolve_skipped_element(26, 1, 27) == 0
    assert resolve_skipped_element(25, 0, 27) == 26


def test_results_within_bounds():
    random.seed(11)
    for kind, modulus in SKIP_MODULI.items():
        for _ in range(2000):
            today = random.randrange(modulus)
            tomorrow = random.randrange(modulus)
            out = resolve_skipped_element(today, tomorrow, modulus)
            assert 0 <= out < modulus
            assert out in (today, (today + 1) % modulus)


def test_bad_modulus():
    with pytest.raises(ValueError):
        resolve_skipped_element(1, 2, 0)
