"""
custom_pallet.events — pallet events and pluggable event sinks.

Each successful call deposits exactly one event. The sink stamps it with the
current block number and a monotonically increasing index, producing an
append-only EventRecord trail. Failed calls deposit nothing.

Backends
--------
- MemoryEventSink: thread-safe, keeps all records in RAM (tests/devnets).
- Any object implementing `deposit(event) -> EventRecord` can be injected.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Optional, Protocol, Union, runtime_checkable


def _json_actor(actor: Hashable) -> Any:
    if isinstance(actor, (bytes, bytearray)):
        return "0x" + bytes(actor).hex()
    return actor


# =============================================================================
# Event payloads
# =============================================================================


@dataclass(frozen=True)
class CounterValueSet:
    value: int

    name = "CounterValueSet"

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.name, "value": self.value}


@dataclass(frozen=True)
class CounterIncremented:
    value: int
    actor: Hashable
    delta: int

    name = "CounterIncremented"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.name,
            "value": self.value,
            "actor": _json_actor(self.actor),
            "delta": self.delta,
        }


@dataclass(frozen=True)
class CounterDecremented:
    value: int
    actor: Hashable
    delta: int

    name = "CounterDecremented"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.name,
            "value": self.value,
            "actor": _json_actor(self.actor),
            "delta": self.delta,
        }


Event = Union[CounterValueSet, CounterIncremented, CounterDecremented]


@dataclass(frozen=True)
class EventRecord:
    """
    An event together with its deposit context.

    block_number : host block height at deposit time
    index        : 0-based position in the sink, strictly increasing
    """

    block_number: int
    index: int
    event: Event

    def to_dict(self) -> Dict[str, Any]:
        return {"block_number": self.block_number, "index": self.index, **self.event.to_dict()}


# =============================================================================
# Sink interface
# =============================================================================


@runtime_checkable
class EventSink(Protocol):
    def deposit(self, event: Event) -> EventRecord:
        """Append an event. Returns the stored record."""


class MemoryEventSink:
    """In-memory append-only sink."""

    def __init__(self, block_number: int = 0) -> None:
        self._lock = threading.RLock()
        self._records: List[EventRecord] = []
        self._block_number = block_number

    @property
    def block_number(self) -> int:
        return self._block_number

    def set_block_number(self, n: int) -> None:
        if n < 0:
            raise ValueError("block number must be ≥ 0")
        self._block_number = n

    def deposit(self, event: Event) -> EventRecord:
        with self._lock:
            rec = EventRecord(
                block_number=self._block_number,
                index=len(self._records),
                event=event,
            )
            self._records.append(rec)
        return rec

    def records(self) -> List[EventRecord]:
        with self._lock:
            return list(self._records)

    def events(self) -> List[Event]:
        with self._lock:
            return [r.event for r in self._records]

    def last_event(self) -> Optional[Event]:
        with self._lock:
            return self._records[-1].event if self._records else None

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


__all__ = [
    "CounterValueSet",
    "CounterIncremented",
    "CounterDecremented",
    "Event",
    "EventRecord",
    "EventSink",
    "MemoryEventSink",
]
