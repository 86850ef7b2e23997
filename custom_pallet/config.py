"""
custom_pallet.config — deployment configuration for the counter pallet.

The only knob that changes pallet semantics is the counter maximum; the integer
widths fix the range of checked arithmetic for the counter and for per-actor
interaction counts. Values are fixed once a Pallet is constructed.

Environment variables (all optional):
  CUSTOM_PALLET_COUNTER_MAX         -> counter upper bound (default: 10)
  CUSTOM_PALLET_COUNTER_BITS        -> counter width in bits (default: 32)
  CUSTOM_PALLET_INTERACTION_BITS    -> interaction-count width in bits (default: 32)

Programmatic usage:
    from custom_pallet.config import load_config
    cfg = load_config(overrides={"counter_max_value": 100})
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from functools import lru_cache
from typing import Dict, Mapping, Optional, Union

DEFAULT_COUNTER_MAX_VALUE = 10
DEFAULT_COUNTER_BITS = 32
DEFAULT_INTERACTION_BITS = 32

ALLOWED_BITS = (8, 16, 32, 64, 128)


def _int_value(raw: Union[str, int], *, name: str) -> int:
    if isinstance(raw, bool):
        raise ValueError(f"{name} must be an integer, not bool")
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip().replace("_", ""), 0)
    except ValueError:
        raise ValueError(f"invalid integer for {name}: {raw!r}") from None


@dataclass(frozen=True)
class PalletConfig:
    counter_max_value: int = DEFAULT_COUNTER_MAX_VALUE
    counter_bits: int = DEFAULT_COUNTER_BITS
    interaction_bits: int = DEFAULT_INTERACTION_BITS

    def __post_init__(self) -> None:
        _validate(self)

    @property
    def counter_limit(self) -> int:
        """Largest value representable in the counter width."""
        return (1 << self.counter_bits) - 1

    @property
    def interaction_limit(self) -> int:
        return (1 << self.interaction_bits) - 1

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def _validate(cfg: PalletConfig) -> None:
    if cfg.counter_bits not in ALLOWED_BITS:
        raise ValueError(f"counter_bits must be one of {ALLOWED_BITS}")
    if cfg.interaction_bits not in ALLOWED_BITS:
        raise ValueError(f"interaction_bits must be one of {ALLOWED_BITS}")
    if not isinstance(cfg.counter_max_value, int) or isinstance(cfg.counter_max_value, bool):
        raise ValueError("counter_max_value must be an integer")
    if cfg.counter_max_value < 0:
        raise ValueError("counter_max_value must be ≥ 0")
    if cfg.counter_max_value > (1 << cfg.counter_bits) - 1:
        raise ValueError("counter_max_value must fit in counter_bits")


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, Union[str, int]]] = None,
) -> PalletConfig:
    """
    Build a PalletConfig from environment and optional overrides.

    Precedence: overrides > env > defaults.

    Args:
        env: mapping to read variables from (default: os.environ)
        overrides: explicit field overrides; keys 'counter_max_value',
          'counter_bits', 'interaction_bits'
    """
    env = os.environ if env is None else env
    overrides = dict(overrides or {})

    unknown = set(overrides) - {"counter_max_value", "counter_bits", "interaction_bits"}
    if unknown:
        raise ValueError(f"unknown config overrides: {sorted(unknown)}")

    return PalletConfig(
        counter_max_value=_int_value(
            overrides.get(
                "counter_max_value",
                env.get("CUSTOM_PALLET_COUNTER_MAX", DEFAULT_COUNTER_MAX_VALUE),
            ),
            name="counter_max_value",
        ),
        counter_bits=_int_value(
            overrides.get(
                "counter_bits", env.get("CUSTOM_PALLET_COUNTER_BITS", DEFAULT_COUNTER_BITS)
            ),
            name="counter_bits",
        ),
        interaction_bits=_int_value(
            overrides.get(
                "interaction_bits",
                env.get("CUSTOM_PALLET_INTERACTION_BITS", DEFAULT_INTERACTION_BITS),
            ),
            name="interaction_bits",
        ),
    )


@lru_cache(maxsize=1)
def get_config() -> PalletConfig:
    """Cached global config built from the process environment."""
    return load_config()


def summary(cfg: Optional[PalletConfig] = None) -> str:
    """Return a one-line summary of the pallet configuration."""
    cfg = cfg or get_config()
    return (
        "pallet{"
        f"max={cfg.counter_max_value}, "
        f"counter=u{cfg.counter_bits}, interactions=u{cfg.interaction_bits}"
        "}"
    )


__all__ = [
    "DEFAULT_COUNTER_MAX_VALUE",
    "DEFAULT_COUNTER_BITS",
    "DEFAULT_INTERACTION_BITS",
    "PalletConfig",
    "load_config",
    "get_config",
    "summary",
]
