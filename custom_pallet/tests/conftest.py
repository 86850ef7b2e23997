from __future__ import annotations

import pytest

from custom_pallet.config import PalletConfig
from custom_pallet.events import MemoryEventSink
from custom_pallet.pallet import Pallet
from custom_pallet.storage import MemoryBackend

# Matches the mock runtime the pallet was first tested against.
COUNTER_MAX_VALUE = 10


@pytest.fixture
def config() -> PalletConfig:
    return PalletConfig(counter_max_value=COUNTER_MAX_VALUE)


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def sink() -> MemoryEventSink:
    s = MemoryEventSink()
    s.set_block_number(1)
    return s


@pytest.fixture
def pallet(config: PalletConfig, backend: MemoryBackend, sink: MemoryEventSink) -> Pallet:
    return Pallet(config, backend=backend, events=sink)
