from __future__ import annotations

import pytest

from custom_pallet.config import PalletConfig
from custom_pallet.errors import (
    BadOrigin,
    CounterOverflow,
    CounterValueBelowZero,
    CounterValueExceedsMax,
    InvalidArgument,
    UserInteractionOverflow,
)
from custom_pallet.events import (
    CounterDecremented,
    CounterIncremented,
    CounterValueSet,
    MemoryEventSink,
)
from custom_pallet.origin import Origin
from custom_pallet.pallet import Pallet
from custom_pallet.storage import MemoryBackend

U32_MAX = 2**32 - 1


def _state(pallet: Pallet, sink: MemoryEventSink, backend: MemoryBackend):
    return backend.snapshot(), sink.records()


# ---- set_counter_value ------------------------------------------------------


def test_root_sets_counter_value(pallet: Pallet, sink: MemoryEventSink) -> None:
    assert pallet.counter_value() is None
    ev = pallet.set_counter_value(Origin.root(), 7)
    assert ev == CounterValueSet(value=7)
    assert pallet.counter_value() == 7
    assert sink.last_event() == CounterValueSet(value=7)


def test_set_overwrites_rather_than_adds(pallet: Pallet) -> None:
    pallet.set_counter_value(Origin.root(), 4)
    pallet.set_counter_value(Origin.root(), 2)
    assert pallet.counter_value() == 2


def test_set_at_max_is_allowed(pallet: Pallet) -> None:
    pallet.set_counter_value(Origin.root(), 10)
    assert pallet.counter_value() == 10


def test_set_above_max_fails(pallet: Pallet, sink: MemoryEventSink) -> None:
    pallet.set_counter_value(Origin.root(), 3)
    with pytest.raises(CounterValueExceedsMax):
        pallet.set_counter_value(Origin.root(), 11)
    assert pallet.counter_value() == 3
    assert len(sink) == 1


@pytest.mark.parametrize("origin", [Origin.signed(1), Origin.none()])
def test_set_counter_value_fails_for_non_root(pallet: Pallet, origin: Origin) -> None:
    with pytest.raises(BadOrigin):
        pallet.set_counter_value(origin, 5)
    assert pallet.counter_value() is None


def test_set_checks_origin_before_value(pallet: Pallet) -> None:
    # An out-of-range value from a signed caller is still an origin failure.
    with pytest.raises(BadOrigin):
        pallet.set_counter_value(Origin.signed(1), 1_000)


def test_set_does_not_count_as_interaction(pallet: Pallet) -> None:
    pallet.set_counter_value(Origin.root(), 1)
    assert pallet.user_interactions(1) is None


# ---- increment --------------------------------------------------------------


def test_it_works_for_increment(pallet: Pallet, sink: MemoryEventSink) -> None:
    pallet.set_counter_value(Origin.root(), 0)
    pallet.increment(Origin.signed(1), 5)
    assert sink.last_event() == CounterIncremented(value=5, actor=1, delta=5)
    assert pallet.counter_value() == 5
    assert pallet.user_interactions(1) == 1


def test_increment_from_uninitialized_treats_counter_as_zero(pallet: Pallet) -> None:
    pallet.increment(Origin.signed("alice"), 3)
    assert pallet.counter_value() == 3
    assert pallet.user_interactions("alice") == 1


def test_increment_handles_overflow(pallet: Pallet, sink: MemoryEventSink) -> None:
    pallet.set_counter_value(Origin.root(), 1)
    with pytest.raises(CounterOverflow):
        pallet.increment(Origin.signed(1), U32_MAX)
    assert pallet.counter_value() == 1
    assert pallet.user_interactions(1) is None
    assert sink.events() == [CounterValueSet(value=1)]


def test_increment_to_max_value_then_beyond(pallet: Pallet) -> None:
    pallet.set_counter_value(Origin.root(), 8)
    pallet.increment(Origin.signed(1), 2)
    assert pallet.counter_value() == 10
    with pytest.raises(CounterValueExceedsMax):
        pallet.increment(Origin.signed(1), 1)
    assert pallet.counter_value() == 10
    assert pallet.user_interactions(1) == 1


def test_increment_max_uint_from_zero_exceeds_max_not_overflow(pallet: Pallet) -> None:
    with pytest.raises(CounterValueExceedsMax):
        pallet.increment(Origin.signed(1), U32_MAX)


@pytest.mark.parametrize("origin", [Origin.root(), Origin.none()])
def test_increment_requires_signed(pallet: Pallet, origin: Origin) -> None:
    with pytest.raises(BadOrigin):
        pallet.increment(origin, 1)
    assert pallet.counter_value() is None


def test_increment_zero_still_counts_interaction(pallet: Pallet, sink: MemoryEventSink) -> None:
    pallet.increment(Origin.signed(2), 0)
    assert pallet.counter_value() == 0
    assert pallet.user_interactions(2) == 1
    assert sink.last_event() == CounterIncremented(value=0, actor=2, delta=0)


# ---- decrement --------------------------------------------------------------


def test_it_works_for_decrement(pallet: Pallet, sink: MemoryEventSink) -> None:
    pallet.set_counter_value(Origin.root(), 8)
    pallet.decrement(Origin.signed(1), 3)
    assert pallet.counter_value() == 5
    assert sink.last_event() == CounterDecremented(value=5, actor=1, delta=3)
    assert pallet.user_interactions(1) == 1


def test_decrement_fails_on_underflow(pallet: Pallet) -> None:
    pallet.set_counter_value(Origin.root(), 2)
    with pytest.raises(CounterValueBelowZero):
        pallet.decrement(Origin.signed(1), 3)
    assert pallet.counter_value() == 2
    assert pallet.user_interactions(1) is None


def test_decrement_uninitialized_below_zero(pallet: Pallet) -> None:
    with pytest.raises(CounterValueBelowZero):
        pallet.decrement(Origin.signed(1), 1)
    assert pallet.counter_value() is None


def test_decrement_to_zero_keeps_key(pallet: Pallet) -> None:
    pallet.set_counter_value(Origin.root(), 3)
    pallet.decrement(Origin.signed(1), 3)
    assert pallet.counter_value() == 0


def test_decrement_requires_signed(pallet: Pallet) -> None:
    pallet.set_counter_value(Origin.root(), 3)
    with pytest.raises(BadOrigin):
        pallet.decrement(Origin.root(), 1)
    assert pallet.counter_value() == 3


# ---- scenarios --------------------------------------------------------------


def test_set_increment_decrement_scenario(pallet: Pallet, sink: MemoryEventSink) -> None:
    pallet.set_counter_value(Origin.root(), 0)
    assert pallet.counter_value() == 0

    pallet.increment(Origin.signed(1), 5)
    assert pallet.counter_value() == 5
    assert pallet.user_interactions(1) == 1
    assert sink.last_event() == CounterIncremented(value=5, actor=1, delta=5)

    pallet.decrement(Origin.signed(1), 2)
    assert pallet.counter_value() == 3
    assert pallet.user_interactions(1) == 2

    assert [r.block_number for r in sink.records()] == [1, 1, 1]
    assert [r.index for r in sink.records()] == [0, 1, 2]


def test_interactions_are_tracked_per_actor(pallet: Pallet) -> None:
    pallet.increment(Origin.signed(1), 1)
    pallet.increment(Origin.signed(2), 1)
    pallet.decrement(Origin.signed(1), 1)
    assert pallet.user_interactions(1) == 2
    assert pallet.user_interactions(2) == 1
    assert pallet.user_interactions(3) is None


def test_failed_calls_leave_state_untouched(
    pallet: Pallet, sink: MemoryEventSink, backend: MemoryBackend
) -> None:
    pallet.set_counter_value(Origin.root(), 5)
    pallet.increment(Origin.signed(1), 1)
    before = _state(pallet, sink, backend)

    failing = [
        lambda: pallet.set_counter_value(Origin.signed(1), 1),
        lambda: pallet.set_counter_value(Origin.root(), 11),
        lambda: pallet.increment(Origin.root(), 1),
        lambda: pallet.increment(Origin.signed(1), 5),
        lambda: pallet.increment(Origin.signed(1), U32_MAX),
        lambda: pallet.decrement(Origin.signed(1), 7),
        lambda: pallet.decrement(Origin.none(), 1),
        lambda: pallet.increment(Origin.signed(1), -1),
    ]
    for call in failing:
        with pytest.raises(Exception):
            call()
        assert _state(pallet, sink, backend) == before


# ---- argument validation ----------------------------------------------------


@pytest.mark.parametrize("bad", [-1, 1.5, "3", True, None, U32_MAX + 1])
def test_non_uint_arguments_are_rejected(pallet: Pallet, bad) -> None:
    with pytest.raises(InvalidArgument):
        pallet.increment(Origin.signed(1), bad)
    assert pallet.counter_value() is None


# ---- ledger overflow is atomic ----------------------------------------------


def test_user_interaction_overflow_commits_nothing() -> None:
    cfg = PalletConfig(counter_max_value=1_000, counter_bits=32, interaction_bits=8)
    sink = MemoryEventSink()
    p = Pallet(cfg, events=sink, record_metrics=False)
    for _ in range(255):
        p.increment(Origin.signed(9), 1)
    assert p.user_interactions(9) == 255
    assert p.counter_value() == 255

    with pytest.raises(UserInteractionOverflow):
        p.increment(Origin.signed(9), 1)
    with pytest.raises(UserInteractionOverflow):
        p.decrement(Origin.signed(9), 1)

    assert p.counter_value() == 255
    assert p.user_interactions(9) == 255
    assert len(sink) == 255


def test_wider_counter_width() -> None:
    cfg = PalletConfig(counter_max_value=2**40, counter_bits=64)
    p = Pallet(cfg, record_metrics=False)
    p.set_counter_value(Origin.root(), 2**40 - 1)
    p.increment(Origin.signed(b"\x01" * 32), 1)
    assert p.counter_value() == 2**40
    assert p.user_interactions(b"\x01" * 32) == 1
