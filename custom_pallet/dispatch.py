"""
custom_pallet.dispatch — route a call description to the pallet.

A host describes a call as plain data (mapping or `Call`), e.g.

    {"origin": {"signed": 1}, "call": "increment", "args": {"amount": 5}}

`dispatch` resolves the call name (with a few aliases), invokes the matching
Pallet method and returns a DispatchOutcome. Pallet errors become structured
`error` payloads; host faults propagate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from .errors import DispatchError, InvalidArgument, PalletError, error_to_result_fields
from .events import Event
from .origin import Origin, ensure_root, ensure_signed, parse_origin
from .pallet import Pallet

_ALIAS_CALL = {
    "set_counter_value": "set_counter_value",
    "set": "set_counter_value",
    "increment": "increment",
    "inc": "increment",
    "decrement": "decrement",
    "dec": "decrement",
}

# call -> (argument name, positional alias)
_CALL_ARG = {
    "set_counter_value": ("new_value", "value"),
    "increment": ("amount", "value"),
    "decrement": ("amount", "value"),
}

# Origin check for each call, matching the one the pallet runs first.
_CALL_GUARD = {
    "set_counter_value": ensure_root,
    "increment": ensure_signed,
    "decrement": ensure_signed,
}


@dataclass
class Call:
    name: str
    args: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DispatchOutcome:
    call: str
    ok: bool
    event: Optional[Event] = None
    error: Optional[Dict[str, Any]] = None
    status: str = "SUCCESS"

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"call": self.call, "ok": self.ok, "status": self.status}
        if self.event is not None:
            out["event"] = self.event.to_dict()
        if self.error is not None:
            out["error"] = self.error
        return out


def resolve_call_name(name: Any) -> str:
    k = str(name).strip().lower()
    if k not in _ALIAS_CALL:
        raise DispatchError(f"unknown call: {name!r}", call=str(name))
    return _ALIAS_CALL[k]


def _call_from(raw: Union[Call, Mapping[str, Any]]) -> Call:
    if isinstance(raw, Call):
        return raw
    if not isinstance(raw, Mapping):
        raise DispatchError("call must be a mapping or Call")
    name = raw.get("call", raw.get("name"))
    if name is None:
        raise DispatchError("call name missing")
    args = raw.get("args") or {}
    if not isinstance(args, Mapping):
        raise DispatchError("call args must be a mapping", call=str(name))
    return Call(name=str(name), args=dict(args))


def _argument(call_name: str, origin: Origin, args: Mapping[str, Any]) -> Any:
    primary, alias = _CALL_ARG[call_name]
    if primary in args:
        return args[primary]
    if alias in args:
        return args[alias]
    # The pallet rejects a bad origin before a bad argument; keep that order.
    _CALL_GUARD[call_name](origin)
    raise InvalidArgument(f"missing argument {primary!r}", name=primary)


def dispatch(
    pallet: Pallet,
    origin: Union[Origin, str, Mapping[str, Any]],
    call: Union[Call, Mapping[str, Any]],
) -> DispatchOutcome:
    """
    Execute one call against `pallet`.

    Returns
    -------
    DispatchOutcome
        ok=True with the deposited event, or ok=False with the error payload.
    """
    c = _call_from(call)
    name = c.name
    try:
        name = resolve_call_name(c.name)
        try:
            parsed = parse_origin(origin)
        except ValueError as e:
            raise DispatchError(str(e), call=name) from e
        value = _argument(name, parsed, c.args)
        event = getattr(pallet, name)(parsed, value)
    except PalletError as err:
        fields = error_to_result_fields(err)
        return DispatchOutcome(call=name, ok=False, error=fields["error"], status=fields["status"])
    return DispatchOutcome(call=name, ok=True, event=event)


def dispatch_entry(pallet: Pallet, entry: Mapping[str, Any]) -> DispatchOutcome:
    """Dispatch a single `{"origin": ..., "call": ..., "args": ...}` entry."""
    if "origin" not in entry:
        raise DispatchError("entry has no origin", call=str(entry.get("call")))
    return dispatch(pallet, entry["origin"], entry)


__all__ = [
    "Call",
    "DispatchOutcome",
    "resolve_call_name",
    "dispatch",
    "dispatch_entry",
]
