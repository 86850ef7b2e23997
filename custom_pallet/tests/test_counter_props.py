# -*- coding: utf-8 -*-
"""
Property tests for the counter arithmetic.

- set_counter_value(Root, v) succeeds iff v <= max, else state is unchanged
- Signed callers can never set the counter
- increment/decrement follow checked arithmetic and count one interaction
- any failed call leaves storage and the event log unchanged
"""
from __future__ import annotations

import pytest
from hypothesis import given, settings, strategies as st

from custom_pallet.config import PalletConfig
from custom_pallet.errors import (
    BadOrigin,
    CounterOverflow,
    CounterValueBelowZero,
    CounterValueExceedsMax,
    PalletError,
)
from custom_pallet.events import CounterIncremented, CounterValueSet, MemoryEventSink
from custom_pallet.origin import Origin
from custom_pallet.pallet import Pallet
from custom_pallet.storage import MemoryBackend

U32_MAX = 2**32 - 1
MAX = st.integers(min_value=0, max_value=1_000)
U32 = st.integers(min_value=0, max_value=U32_MAX)
ACTOR = st.one_of(st.integers(min_value=0, max_value=2**64), st.text(min_size=1, max_size=8))


def _fresh(max_value: int):
    sink = MemoryEventSink()
    backend = MemoryBackend()
    p = Pallet(PalletConfig(counter_max_value=max_value), backend=backend, events=sink,
               record_metrics=False)
    return p, backend, sink


@settings(max_examples=200, deadline=None)
@given(max_value=MAX, v=U32)
def test_set_counter_value_bound(max_value: int, v: int) -> None:
    p, _, sink = _fresh(max_value)
    if v <= max_value:
        p.set_counter_value(Origin.root(), v)
        assert p.counter_value() == v
        assert sink.events() == [CounterValueSet(value=v)]
    else:
        with pytest.raises(CounterValueExceedsMax):
            p.set_counter_value(Origin.root(), v)
        assert p.counter_value() is None
        assert len(sink) == 0


@settings(max_examples=100, deadline=None)
@given(max_value=MAX, v=U32, actor=ACTOR, prior=st.one_of(st.none(), st.integers(0, 1_000)))
def test_signed_can_never_set(max_value: int, v: int, actor, prior) -> None:
    p, backend, sink = _fresh(max_value)
    if prior is not None and prior <= max_value:
        p.set_counter_value(Origin.root(), prior)
    before = (backend.snapshot(), sink.records())
    with pytest.raises(BadOrigin):
        p.set_counter_value(Origin.signed(actor), v)
    assert (backend.snapshot(), sink.records()) == before


@settings(max_examples=200, deadline=None)
@given(max_value=MAX, data=st.data(), actor=ACTOR)
def test_increment_within_bound(max_value: int, data, actor) -> None:
    current = data.draw(st.integers(0, max_value))
    amount = data.draw(st.integers(0, max_value - current))
    p, _, sink = _fresh(max_value)
    p.set_counter_value(Origin.root(), current)

    p.increment(Origin.signed(actor), amount)

    assert p.counter_value() == current + amount
    assert p.user_interactions(actor) == 1
    assert sink.last_event() == CounterIncremented(value=current + amount, actor=actor, delta=amount)


@settings(max_examples=200, deadline=None)
@given(max_value=MAX, data=st.data())
def test_increment_failures_keep_counter(max_value: int, data) -> None:
    current = data.draw(st.integers(0, max_value))
    amount = data.draw(st.integers(max_value - current + 1, U32_MAX))
    p, _, _ = _fresh(max_value)
    p.set_counter_value(Origin.root(), current)

    expected = CounterOverflow if current + amount > U32_MAX else CounterValueExceedsMax
    with pytest.raises(expected):
        p.increment(Origin.signed(1), amount)
    assert p.counter_value() == current
    assert p.user_interactions(1) is None


@settings(max_examples=200, deadline=None)
@given(max_value=MAX, data=st.data())
def test_decrement(max_value: int, data) -> None:
    current = data.draw(st.integers(0, max_value))
    amount = data.draw(U32)
    p, _, _ = _fresh(max_value)
    p.set_counter_value(Origin.root(), current)

    if amount <= current:
        p.decrement(Origin.signed(1), amount)
        assert p.counter_value() == current - amount
        assert p.user_interactions(1) == 1
    else:
        with pytest.raises(CounterValueBelowZero):
            p.decrement(Origin.signed(1), amount)
        assert p.counter_value() == current
        assert p.user_interactions(1) is None


_OPS = st.lists(
    st.tuples(
        st.sampled_from(["set", "inc", "dec"]),
        st.sampled_from([Origin.root(), Origin.signed(1), Origin.signed(2), Origin.none()]),
        st.one_of(st.integers(0, 12), st.just(U32_MAX)),
    ),
    max_size=30,
)


@settings(max_examples=150, deadline=None)
@given(ops=_OPS)
def test_random_sequences_preserve_invariants(ops) -> None:
    p, backend, sink = _fresh(10)
    expected_interactions = {1: 0, 2: 0}
    for name, origin, arg in ops:
        fn = {"set": p.set_counter_value, "inc": p.increment, "dec": p.decrement}[name]
        before = (backend.snapshot(), sink.records())
        try:
            fn(origin, arg)
        except PalletError:
            assert (backend.snapshot(), sink.records()) == before
            continue
        assert len(sink) == len(before[1]) + 1
        if name != "set":
            expected_interactions[origin.actor] += 1

        value = p.counter_value()
        assert value is not None and 0 <= value <= 10

    for actor, n in expected_interactions.items():
        assert p.user_interactions(actor) == (n or None)
