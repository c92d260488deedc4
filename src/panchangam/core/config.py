"""
panchangam.core.config
----------------------
Numeric knobs shared by the search, batch and snapshot engines.

Engines never read globals: they receive an EngineConfig explicitly. The
environment hook mirrors the way deployment overrides are read elsewhere
(plain os.environ lookups, validated here).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigurationError


@dataclass(frozen=True)
class EngineConfig:
    # boundary search
    scan_step_days: float = 0.01
    precision_days: float = 1e-5
    element_window_days: float = 2.0

    # year batch
    batch_step_days: float = 0.25
    batch_padding_days: float = 15.0
    end_search_days: float = 2.0
    new_moon_lookback_days: float = 31.0

    # sankranti
    sankranti_step_days: float = 0.5

    ayanamsa: str = "lahiri"

    def __post_init__(self) -> None:
        for name in (
            "scan_step_days",
            "precision_days",
            "element_window_days",
            "batch_step_days",
            "end_search_days",
            "new_moon_lookback_days",
            "sankranti_step_days",
        ):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)!r}")
        if self.batch_padding_days < 0:
            raise ConfigurationError("batch_padding_days must be >= 0")
        if self.precision_days >= self.scan_step_days:
            raise ConfigurationError("precision_days must be smaller than scan_step_days")
        if self.ayanamsa != "lahiri":
            raise ConfigurationError(f"Unknown ayanamsa '{self.ayanamsa}'. Available: ['lahiri']")

    def tweak(self, **kw: Any) -> "EngineConfig":
        return replace(self, **kw)

    def info(self) -> Dict[str, Any]:
        return {
            "scan_step_days": self.scan_step_days,
            "precision_days": self.precision_days,
            "element_window_days": self.element_window_days,
            "batch_step_days": self.batch_step_days,
            "batch_padding_days": self.batch_padding_days,
            "end_search_days": self.end_search_days,
            "new_moon_lookback_days": self.new_moon_lookback_days,
            "sankranti_step_days": self.sankranti_step_days,
            "ayanamsa": self.ayanamsa,
        }


DEFAULT_CONFIG = EngineConfig()

_ENV_KEYS = {
    "PANCHANGAM_SCAN_STEP": "scan_step_days",
    "PANCHANGAM_PRECISION": "precision_days",
    "PANCHANGAM_BATCH_STEP": "batch_step_days",
}


def config_from_env(environ: Optional[Mapping[str, str]] = None, base: EngineConfig = DEFAULT_CONFIG) -> EngineConfig:
    """Apply PANCHANGAM_* overrides from the environment on top of `base`."""
    env = os.environ if environ is None else environ
    kw: Dict[str, float] = {}
    for key, field in _ENV_KEYS.items():
        raw = env.get(key)
        if raw is None or raw.strip() == "":
            continue
        try:
            kw[field] = float(raw)
        except ValueError as e:
            raise ConfigurationError(f"{key}={raw!r} is not a number") from e
    return base.tweak(**kw) if kw else base
