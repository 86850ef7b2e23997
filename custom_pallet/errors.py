"""
custom_pallet.errors — dispatch errors raised by the counter pallet.

The pallet communicates failures via *typed exceptions*. The dispatcher (or any
host) converts them into structured outcome payloads. Every error here is an
ordinary, expected outcome of a call: it is raised before any state is
committed and is never retried inside the pallet.

Hierarchy
---------
PalletError (base)
 ├─ BadOrigin                : caller origin is not allowed for this call
 ├─ CounterValueExceedsMax   : value would exceed the configured maximum
 ├─ CounterValueBelowZero    : decrement would take the counter below zero
 ├─ CounterOverflow          : checked addition overflowed the counter width
 ├─ UserInteractionOverflow  : the actor's interaction count overflowed
 ├─ InvalidArgument          : argument is not an unsigned integer of the width
 └─ DispatchError            : call could not be classified or routed
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class PalletError(Exception):
    """
    Base pallet error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g., 'BadOrigin').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "pallet error"
    code: str = "PalletError"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for outcomes/logs."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


class BadOrigin(PalletError):
    """Origin is not Root (for privileged calls) or not Signed (for actor calls)."""
    def __init__(self, message: str = "bad origin", *, required: Optional[str] = None,
                 got: Optional[str] = None):
        d: Dict[str, Any] = {}
        if required is not None:
            d["required"] = required
        if got is not None:
            d["got"] = got
        super().__init__(message=message, code="BadOrigin", data=d or None)


class CounterValueExceedsMax(PalletError):
    def __init__(self, message: str = "counter value exceeds maximum", *,
                 value: Optional[int] = None, max_value: Optional[int] = None):
        d: Dict[str, Any] = {}
        if value is not None:
            d["value"] = value
        if max_value is not None:
            d["max_value"] = max_value
        super().__init__(message=message, code="CounterValueExceedsMax", data=d or None)


class CounterValueBelowZero(PalletError):
    def __init__(self, message: str = "counter value below zero", *,
                 current: Optional[int] = None, amount: Optional[int] = None):
        d: Dict[str, Any] = {}
        if current is not None:
            d["current"] = current
        if amount is not None:
            d["amount"] = amount
        super().__init__(message=message, code="CounterValueBelowZero", data=d or None)


class CounterOverflow(PalletError):
    def __init__(self, message: str = "counter overflow", *,
                 current: Optional[int] = None, amount: Optional[int] = None):
        d: Dict[str, Any] = {}
        if current is not None:
            d["current"] = current
        if amount is not None:
            d["amount"] = amount
        super().__init__(message=message, code="CounterOverflow", data=d or None)


class UserInteractionOverflow(PalletError):
    def __init__(self, message: str = "user interaction count overflow", *,
                 actor: Optional[str] = None):
        super().__init__(
            message=message,
            code="UserInteractionOverflow",
            data={"actor": actor} if actor is not None else None,
        )


class InvalidArgument(PalletError):
    """Argument could not be decoded as an unsigned integer of the counter width."""
    def __init__(self, message: str = "invalid argument", *, name: Optional[str] = None,
                 value: Any = None):
        d: Dict[str, Any] = {}
        if name is not None:
            d["name"] = name
        if value is not None:
            d["value"] = repr(value)
        super().__init__(message=message, code="InvalidArgument", data=d or None)


class DispatchError(PalletError):
    """Raised when a call cannot be classified or routed."""
    def __init__(self, message: str = "unknown call", *, call: Optional[str] = None):
        super().__init__(
            message=message,
            code="DispatchError",
            data={"call": call} if call is not None else None,
        )


# -------- helper utilities ---------------------------------------------------


def error_to_result_fields(err: PalletError) -> Dict[str, Any]:
    """
    Map a PalletError to canonical outcome fields.

    Returns:
        {
          "status": "BAD_ORIGIN" | "FAILED" | "INVALID",
          "error":  {code, message, data?}
        }
    """
    if isinstance(err, BadOrigin):
        status = "BAD_ORIGIN"
    elif isinstance(err, (InvalidArgument, DispatchError)):
        status = "INVALID"
    else:
        status = "FAILED"
    return {"status": status, "error": err.to_dict()}


__all__ = [
    "PalletError",
    "BadOrigin",
    "CounterValueExceedsMax",
    "CounterValueBelowZero",
    "CounterOverflow",
    "UserInteractionOverflow",
    "InvalidArgument",
    "DispatchError",
    "error_to_result_fields",
]
