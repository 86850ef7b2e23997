"""
custom_pallet.storage — key/value storage the pallet runs against.

The pallet depends only on a narrow backend interface:

    get(key: bytes) -> Optional[bytes]
    put(key: bytes, value: bytes) -> None

Keys are derived per storage item (prefix + encoded map key), values are
fixed-width big-endian unsigned integers. On top of the backend a
`StorageOverlay` stages writes so an operation can commit all of its writes
together, or none of them.

Typical usage
-------------
    backend = MemoryBackend()
    ov = StorageOverlay(backend)
    ov.put(counter_value_key(), encode_uint(5, 32))
    ov.commit()
"""

from __future__ import annotations

import threading
from typing import Dict, Hashable, Iterator, Optional, Protocol, Tuple, runtime_checkable

PALLET_PREFIX = b"CustomPallet/"
COUNTER_VALUE_PREFIX = PALLET_PREFIX + b"CounterValue"
USER_INTERACTIONS_PREFIX = PALLET_PREFIX + b"UserInteractions/"


# ---------------------------- Backend API ---------------------------- #


@runtime_checkable
class StorageBackend(Protocol):
    """Minimal backend interface for pallet storage."""

    def get(self, key: bytes) -> Optional[bytes]: ...
    def put(self, key: bytes, value: bytes) -> None: ...


class MemoryBackend:
    """Thread-safe in-memory backend for local runs and tests."""

    def __init__(self) -> None:
        self._store: Dict[bytes, bytes] = {}
        self._lock = threading.RLock()

    def get(self, key: bytes) -> Optional[bytes]:
        with self._lock:
            return self._store.get(key)

    def put(self, key: bytes, value: bytes) -> None:
        with self._lock:
            self._store[bytes(key)] = bytes(value)

    def items(self) -> Iterator[Tuple[bytes, bytes]]:
        """Iterate (key, value) pairs in lexicographic key order."""
        with self._lock:
            snapshot = sorted(self._store.items())
        yield from snapshot

    def snapshot(self) -> Dict[bytes, bytes]:
        with self._lock:
            return dict(self._store)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


# ------------------------------ Codecs -------------------------------- #


def encode_uint(value: int, bits: int) -> bytes:
    """Encode `value` as a big-endian unsigned integer of exactly bits/8 bytes."""
    if value < 0 or value >= (1 << bits):
        raise ValueError(f"value {value} does not fit in u{bits}")
    return value.to_bytes(bits // 8, "big")


def decode_uint(raw: bytes, bits: int) -> int:
    if len(raw) != bits // 8:
        raise ValueError(f"expected {bits // 8} bytes for u{bits}, got {len(raw)}")
    return int.from_bytes(raw, "big")


def encode_actor(actor: Hashable) -> bytes:
    """
    Typed, injective encoding of an actor identity for use in storage keys.

    Tags keep distinct types apart: 1 and "1" and b"1" map to different keys.
    """
    if isinstance(actor, bool):
        raise TypeError("actor cannot be bool")
    if isinstance(actor, int):
        if actor < 0:
            return b"n" + (-actor).to_bytes(max(1, ((-actor).bit_length() + 7) // 8), "big")
        return b"i" + actor.to_bytes(max(1, (actor.bit_length() + 7) // 8), "big")
    if isinstance(actor, str):
        return b"s" + actor.encode("utf-8")
    if isinstance(actor, (bytes, bytearray, memoryview)):
        return b"b" + bytes(actor)
    raise TypeError(f"unsupported actor type: {type(actor).__name__}")


def counter_value_key() -> bytes:
    return COUNTER_VALUE_PREFIX


def user_interactions_key(actor: Hashable) -> bytes:
    return USER_INTERACTIONS_PREFIX + encode_actor(actor)


# ------------------------------ Overlay ------------------------------- #


class StorageOverlay:
    """
    A single staging layer over a backend.

    Reads consult staged writes first, then the backend. `commit()` applies the
    staged writes to the backend in staging order; `discard()` drops them.
    """

    def __init__(self, backend: StorageBackend) -> None:
        self._backend = backend
        self._staged: Dict[bytes, bytes] = {}

    def get(self, key: bytes) -> Optional[bytes]:
        if key in self._staged:
            return self._staged[key]
        return self._backend.get(key)

    def put(self, key: bytes, value: bytes) -> None:
        self._staged[bytes(key)] = bytes(value)

    @property
    def pending(self) -> Dict[bytes, bytes]:
        return dict(self._staged)

    def commit(self) -> int:
        """Apply staged writes to the backend. Returns the number of keys written."""
        n = 0
        for key, value in self._staged.items():
            self._backend.put(key, value)
            n += 1
        self._staged.clear()
        return n

    def discard(self) -> None:
        self._staged.clear()


__all__ = [
    "StorageBackend",
    "MemoryBackend",
    "StorageOverlay",
    "encode_uint",
    "decode_uint",
    "encode_actor",
    "counter_value_key",
    "user_interactions_key",
]
