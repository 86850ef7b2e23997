"""
custom_pallet — bounded counter pallet with a per-actor interaction ledger.

The pallet is a plain class run against an injected key/value backend and an
event sink; origins are classified by the host before each call.

    from custom_pallet import Pallet, Origin
    p = Pallet()
    p.set_counter_value(Origin.root(), 0)
    p.increment(Origin.signed(1), 5)
"""

from .config import PalletConfig, load_config
from .errors import (
    BadOrigin,
    CounterOverflow,
    CounterValueBelowZero,
    CounterValueExceedsMax,
    InvalidArgument,
    PalletError,
    UserInteractionOverflow,
)
from .events import CounterDecremented, CounterIncremented, CounterValueSet, MemoryEventSink
from .origin import Origin
from .pallet import Pallet
from .storage import MemoryBackend
from .version import __version__

__all__ = [
    "__version__",
    "Pallet",
    "PalletConfig",
    "load_config",
    "Origin",
    "MemoryBackend",
    "MemoryEventSink",
    "CounterValueSet",
    "CounterIncremented",
    "CounterDecremented",
    "PalletError",
    "BadOrigin",
    "CounterValueExceedsMax",
    "CounterValueBelowZero",
    "CounterOverflow",
    "UserInteractionOverflow",
    "InvalidArgument",
]
