"""
Engine configuration.

Policy constants that every validator must agree on. The defaults are the
production values; a YAML document can override them for test networks:

    max_fee_bps: 1000
    min_reserve_profile:
      base: 3000000
      per_asset_cost: 344798
      per_byte_cost: 4310
      buffer_bps: 1000
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from .types import CARDANO_POOL_PROFILE, MinReserveProfile


MAX_FEE_BPS = 1_000  # 10%

_PROFILE_KEYS = ("base", "per_asset_cost", "per_byte_cost", "buffer_bps")
_CONFIG_KEYS = ("max_fee_bps", "min_reserve_profile")


@dataclass(frozen=True)
class EngineConfig:
    """Runtime config for the transition engine."""

    max_fee_bps: int = MAX_FEE_BPS
    # Profile suggested to callers assembling a TransitionContext. The engine
    # itself always uses the profile carried by the context.
    min_reserve_profile: MinReserveProfile = CARDANO_POOL_PROFILE

    def __post_init__(self) -> None:
        if not isinstance(self.max_fee_bps, int) or isinstance(self.max_fee_bps, bool):
            raise TypeError("max_fee_bps must be an int")
        if not (0 <= self.max_fee_bps < 10_000):
            raise ValueError(f"max_fee_bps must be in [0, 10000): {self.max_fee_bps}")


DEFAULT_CONFIG = EngineConfig()


def _require_mapping(obj: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(obj, Mapping):
        raise TypeError(f"{what} must be a mapping")
    return obj


def _reject_unknown(obj: Mapping[str, Any], allowed: tuple[str, ...], what: str) -> None:
    unknown = sorted(set(obj) - set(allowed))
    if unknown:
        raise ValueError(f"unknown {what} keys: {', '.join(unknown)}")


def profile_from_mapping(obj: Any) -> MinReserveProfile:
    """Build a MinReserveProfile; every field is required."""
    m = _require_mapping(obj, "min_reserve_profile")
    _reject_unknown(m, _PROFILE_KEYS, "min_reserve_profile")
    missing = [k for k in _PROFILE_KEYS if k not in m]
    if missing:
        raise ValueError(f"min_reserve_profile missing keys: {', '.join(missing)}")
    return MinReserveProfile(**{k: m[k] for k in _PROFILE_KEYS})


def config_from_mapping(obj: Optional[Any]) -> EngineConfig:
    """Build an EngineConfig from a decoded document; missing keys keep defaults."""
    if obj is None:
        return DEFAULT_CONFIG
    m = _require_mapping(obj, "engine config")
    _reject_unknown(m, _CONFIG_KEYS, "engine config")

    kwargs: dict[str, Any] = {}
    if "max_fee_bps" in m:
        kwargs["max_fee_bps"] = m["max_fee_bps"]
    if "min_reserve_profile" in m:
        kwargs["min_reserve_profile"] = profile_from_mapping(m["min_reserve_profile"])
    return EngineConfig(**kwargs)


def load_config(path: Union[str, Path]) -> EngineConfig:
    """Load an EngineConfig from a YAML file."""
    text = Path(path).read_text(encoding="utf-8")
    return config_from_mapping(yaml.safe_load(text))
