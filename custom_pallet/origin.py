"""
custom_pallet.origin — call origins and the access guard.

An Origin is the host's classification of who issued a call:

  - Root            : privileged governance/administrative authority
  - Signed(actor)   : an ordinary authenticated actor
  - None            : unauthenticated (e.g. unsigned inherent-style calls)

`ensure_root` / `ensure_signed` are pure predicates with no side effects; every
pallet operation runs one of them before touching storage.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Hashable, Optional

from .errors import BadOrigin
from .storage import encode_actor


class OriginKind(str, Enum):
    ROOT = "root"
    SIGNED = "signed"
    NONE = "none"


@dataclass(frozen=True)
class Origin:
    kind: OriginKind
    actor: Optional[Hashable] = None

    def __post_init__(self) -> None:
        if self.kind is OriginKind.SIGNED and self.actor is None:
            raise ValueError("signed origin requires an actor")
        if self.kind is OriginKind.SIGNED:
            _check_actor(self.actor)
        if self.kind is not OriginKind.SIGNED and self.actor is not None:
            raise ValueError(f"{self.kind.value} origin cannot carry an actor")

    @classmethod
    def root(cls) -> "Origin":
        return cls(OriginKind.ROOT)

    @classmethod
    def signed(cls, actor: Hashable) -> "Origin":
        return cls(OriginKind.SIGNED, actor)

    @classmethod
    def none(cls) -> "Origin":
        return cls(OriginKind.NONE)

    @property
    def is_root(self) -> bool:
        return self.kind is OriginKind.ROOT

    @property
    def is_signed(self) -> bool:
        return self.kind is OriginKind.SIGNED

    def describe(self) -> str:
        if self.is_signed:
            return f"signed({self.actor!r})"
        return self.kind.value


def _check_actor(actor: Any) -> None:
    # Actors need a storage key: int (not bool), UTF-8 encodable str, or bytes.
    try:
        encode_actor(actor)
    except (TypeError, UnicodeEncodeError) as e:
        raise ValueError(f"invalid actor {actor!r}: {e}") from e


def _describe(origin: Any) -> str:
    if isinstance(origin, Origin):
        return origin.describe()
    return type(origin).__name__


def ensure_root(origin: Any) -> None:
    """Succeed only for a Root origin; otherwise raise BadOrigin."""
    if not (isinstance(origin, Origin) and origin.is_root):
        raise BadOrigin(required="root", got=_describe(origin))


def ensure_signed(origin: Any) -> Hashable:
    """Return the actor of a Signed origin; otherwise raise BadOrigin."""
    if not (isinstance(origin, Origin) and origin.is_signed):
        raise BadOrigin(required="signed", got=_describe(origin))
    return origin.actor


def parse_origin(raw: Any) -> Origin:
    """
    Parse a loose origin description into an Origin.

    Accepts an Origin, "root", "none", or a mapping {"signed": actor}. Used by
    the dispatcher and the CLI where calls are described as plain data.
    """
    if isinstance(raw, Origin):
        return raw
    if isinstance(raw, str):
        k = raw.strip().lower()
        if k == "root":
            return Origin.root()
        if k in ("none", "unsigned"):
            return Origin.none()
        raise ValueError(f"unknown origin: {raw!r}")
    if isinstance(raw, dict) and set(raw) == {"signed"}:
        return Origin.signed(raw["signed"])
    raise ValueError(f"unknown origin: {raw!r}")


__all__ = [
    "OriginKind",
    "Origin",
    "ensure_root",
    "ensure_signed",
    "parse_origin",
]
