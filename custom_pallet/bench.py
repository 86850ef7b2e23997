"""
Call benchmarks for the counter pallet.

For each call a fresh pallet is prepared (Root sets the counter to 5), the call
is timed once per round from a whitelisted caller, and the post-state is
verified: 5 after set_counter_value, 6 after increment, 4 after decrement, and
one recorded interaction for the caller.

Usage:
  custom-pallet bench --rounds 1000
"""

from __future__ import annotations

import statistics
import time
from dataclasses import dataclass
from typing import Callable, Dict, List

from .config import PalletConfig
from .origin import Origin
from .pallet import Pallet

WHITELISTED_CALLER = b"\x00" * 32


@dataclass
class BenchResult:
    call: str
    rounds: int
    min_us: float
    median_us: float
    mean_us: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "call": self.call,
            "rounds": self.rounds,
            "min_us": round(self.min_us, 3),
            "median_us": round(self.median_us, 3),
            "mean_us": round(self.mean_us, 3),
        }


def _setup(config: PalletConfig) -> Pallet:
    pallet = Pallet(config, record_metrics=False)
    pallet.set_counter_value(Origin.root(), 5)
    return pallet


def _expect(what: str, got: object, want: object) -> None:
    if got != want:
        raise RuntimeError(f"benchmark post-state mismatch: {what}={got!r}, expected {want!r}")


def _verify_set(p: Pallet) -> None:
    _expect("counter", p.counter_value(), 5)


def _verify_inc(p: Pallet) -> None:
    _expect("counter", p.counter_value(), 6)
    _expect("interactions", p.user_interactions(WHITELISTED_CALLER), 1)


def _verify_dec(p: Pallet) -> None:
    _expect("counter", p.counter_value(), 4)
    _expect("interactions", p.user_interactions(WHITELISTED_CALLER), 1)


_CASES: Dict[str, tuple[Callable[[Pallet], object], Callable[[Pallet], None]]] = {
    "set_counter_value": (lambda p: p.set_counter_value(Origin.root(), 5), _verify_set),
    "increment": (lambda p: p.increment(Origin.signed(WHITELISTED_CALLER), 1), _verify_inc),
    "decrement": (lambda p: p.decrement(Origin.signed(WHITELISTED_CALLER), 1), _verify_dec),
}


def bench_call(call: str, *, rounds: int, config: PalletConfig) -> BenchResult:
    if rounds <= 0:
        raise ValueError("rounds must be > 0")
    run, verify = _CASES[call]
    samples: List[float] = []
    for _ in range(rounds):
        pallet = _setup(config)
        t0 = time.perf_counter()
        run(pallet)
        samples.append((time.perf_counter() - t0) * 1e6)
        verify(pallet)
    return BenchResult(
        call=call,
        rounds=rounds,
        min_us=min(samples),
        median_us=statistics.median(samples),
        mean_us=statistics.fmean(samples),
    )


def run_all(*, rounds: int = 100, config: PalletConfig | None = None) -> List[BenchResult]:
    """Benchmark every call. The counter maximum must allow a value of 6."""
    cfg = config or PalletConfig()
    if cfg.counter_max_value < 6:
        raise ValueError("benchmarks need counter_max_value ≥ 6")
    return [bench_call(name, rounds=rounds, config=cfg) for name in _CASES]


__all__ = ["BenchResult", "WHITELISTED_CALLER", "bench_call", "run_all"]
