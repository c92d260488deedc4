# tests/test_config.py

import pytest

from panchangam.core.config import DEFAULT_CONFIG, EngineConfig, config_from_env
from panchangam.core.errors import ConfigurationError


def test_defaults():
    cfg = EngineConfig()
    assert cfg.scan_step_days == 0.01
    assert cfg.precision_days == 1e-5
    assert cfg.batch_step_days == 0.25
    assert cfg.batch_padding_days == 15.0
    assert cfg.end_search_days == 2.0
    assert cfg.info()["ayanamsa"] == "lahiri"


def test_tweak_returns_copy():
    cfg = DEFAULT_CONFIG.tweak(scan_step_days=0.02)
    assert cfg.scan_step_days == 0.02
    assert DEFAULT_CONFIG.scan_step_days == 0.01


@pytest.mark.parametrize("kw", [
    {"scan_step_days": 0.0},
    {"precision_days": -1e-5},
    {"precision_days": 0.5},
    {"batch_padding_days": -1.0},
    {"ayanamsa": "raman"},
])
def test_invalid_values(kw):
    with pytest.raises(ConfigurationError):
        EngineConfig(**kw)


def test_env_overrides():
    cfg = config_from_env({"PANCHANGAM_SCAN_STEP": "0.005", "PANCHANGAM_BATCH_STEP": " "})
    assert cfg.scan_step_days == 0.005
    assert cfg.batch_step_days == 0.25
    assert config_from_env({}) is DEFAULT_CONFIG


def test_env_bad_value():
    with pytest.raises(ConfigurationError):
        config_from_env({"PANCHANGAM_PRECISION": "tiny"})
