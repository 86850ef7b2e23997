"""
custom_pallet.pallet — the counter pallet state-transition logic.

State
-----
- CounterValue       : Optional[u<bits>], absent until first written; reads as 0.
- UserInteractions   : actor -> u<bits>, +1 per successful increment/decrement.
- counter_max_value  : deployment constant from PalletConfig.

Calls
-----
- set_counter_value(origin, new_value)   Root only
- increment(origin, amount)              Signed only
- decrement(origin, amount)              Signed only

Every call checks the origin first, then its arguments, then applies checked
arithmetic. Writes are staged in a StorageOverlay and committed together only
after every check has passed, so a failing call changes neither storage nor
the event log. On success exactly one event is deposited.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Hashable, Iterator, Optional

from . import metrics as _metrics
from .config import PalletConfig, get_config
from .errors import (
    CounterOverflow,
    CounterValueBelowZero,
    CounterValueExceedsMax,
    InvalidArgument,
    PalletError,
    UserInteractionOverflow,
)
from .events import (
    CounterDecremented,
    CounterIncremented,
    CounterValueSet,
    Event,
    EventSink,
    MemoryEventSink,
)
from .origin import Origin, ensure_root, ensure_signed
from .storage import (
    MemoryBackend,
    StorageBackend,
    StorageOverlay,
    counter_value_key,
    decode_uint,
    encode_uint,
    user_interactions_key,
)

log = logging.getLogger(__name__)


class Pallet:
    """
    Bounded counter with a per-actor interaction ledger.

    Parameters
    ----------
    config :
        PalletConfig; defaults to the cached environment config.
    backend :
        Storage backend implementing get/put; defaults to a fresh MemoryBackend.
    events :
        Event sink implementing deposit(); defaults to a fresh MemoryEventSink.
    record_metrics :
        Whether to report calls to custom_pallet.metrics.
    """

    def __init__(
        self,
        config: Optional[PalletConfig] = None,
        *,
        backend: Optional[StorageBackend] = None,
        events: Optional[EventSink] = None,
        record_metrics: bool = True,
    ) -> None:
        self.config = config or get_config()
        self.backend: StorageBackend = backend if backend is not None else MemoryBackend()
        self.events: EventSink = events if events is not None else MemoryEventSink()
        self._record_metrics = record_metrics

    @property
    def counter_max_value(self) -> int:
        return self.config.counter_max_value

    # ------------------------------ queries ------------------------------

    def counter_value(self) -> Optional[int]:
        """Current counter value, or None if it was never set."""
        raw = self.backend.get(counter_value_key())
        return None if raw is None else decode_uint(raw, self.config.counter_bits)

    def user_interactions(self, actor: Hashable) -> Optional[int]:
        """Interaction count of `actor`, or None if it never interacted."""
        raw = self.backend.get(user_interactions_key(actor))
        return None if raw is None else decode_uint(raw, self.config.interaction_bits)

    # ------------------------------- calls -------------------------------

    def set_counter_value(self, origin: Origin, new_value: int) -> CounterValueSet:
        """Overwrite the counter. Root only; `new_value` must not exceed the maximum."""
        with self._observed("set_counter_value", origin):
            ensure_root(origin)
            new_value = self._check_uint("new_value", new_value)
            if new_value > self.counter_max_value:
                raise CounterValueExceedsMax(value=new_value, max_value=self.counter_max_value)

            ov = StorageOverlay(self.backend)
            self._write_counter(ov, new_value)
            ov.commit()
            return self._deposit(CounterValueSet(value=new_value))

    def increment(self, origin: Origin, amount: int) -> CounterIncremented:
        """Add `amount` to the counter and count one interaction for the caller."""
        with self._observed("increment", origin):
            actor = ensure_signed(origin)
            amount = self._check_uint("amount", amount)

            ov = StorageOverlay(self.backend)
            current = self._read_counter(ov)
            new_value = current + amount
            if new_value > self.config.counter_limit:
                raise CounterOverflow(current=current, amount=amount)
            if new_value > self.counter_max_value:
                raise CounterValueExceedsMax(value=new_value, max_value=self.counter_max_value)

            self._write_counter(ov, new_value)
            self._bump_interactions(ov, actor)
            ov.commit()
            return self._deposit(CounterIncremented(value=new_value, actor=actor, delta=amount))

    def decrement(self, origin: Origin, amount: int) -> CounterDecremented:
        """Subtract `amount` from the counter and count one interaction for the caller."""
        with self._observed("decrement", origin):
            actor = ensure_signed(origin)
            amount = self._check_uint("amount", amount)

            ov = StorageOverlay(self.backend)
            current = self._read_counter(ov)
            if amount > current:
                raise CounterValueBelowZero(current=current, amount=amount)
            new_value = current - amount

            self._write_counter(ov, new_value)
            self._bump_interactions(ov, actor)
            ov.commit()
            return self._deposit(CounterDecremented(value=new_value, actor=actor, delta=amount))

    # ------------------------------ helpers ------------------------------

    def _check_uint(self, name: str, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidArgument(f"{name} must be an unsigned integer", name=name, value=value)
        if value < 0 or value > self.config.counter_limit:
            raise InvalidArgument(
                f"{name} out of range for u{self.config.counter_bits}", name=name, value=value
            )
        return value

    def _read_counter(self, ov: StorageOverlay) -> int:
        raw = ov.get(counter_value_key())
        return 0 if raw is None else decode_uint(raw, self.config.counter_bits)

    def _write_counter(self, ov: StorageOverlay, value: int) -> None:
        ov.put(counter_value_key(), encode_uint(value, self.config.counter_bits))

    def _bump_interactions(self, ov: StorageOverlay, actor: Hashable) -> None:
        key = user_interactions_key(actor)
        raw = ov.get(key)
        count = 0 if raw is None else decode_uint(raw, self.config.interaction_bits)
        if count >= self.config.interaction_limit:
            raise UserInteractionOverflow(actor=repr(actor))
        ov.put(key, encode_uint(count + 1, self.config.interaction_bits))

    def _deposit(self, event: Event) -> Any:
        self.events.deposit(event)
        if self._record_metrics:
            _metrics.set_counter_gauge(event.value)
        return event

    @contextmanager
    def _observed(self, call: str, origin: Any) -> Iterator[None]:
        if isinstance(origin, Origin):
            fields = {"call": call, "origin": origin.kind.value, "actor": origin.actor}
        else:
            fields = {"call": call, "origin": type(origin).__name__, "actor": None}
        try:
            yield
        except PalletError as err:
            log.info("call rejected", extra={**fields, "code": err.code})
            if self._record_metrics:
                _metrics.observe_call(call=call, result=err.code)
            raise
        log.debug("call accepted", extra=fields)
        if self._record_metrics:
            _metrics.observe_call(call=call, result="success")


__all__ = ["Pallet"]
