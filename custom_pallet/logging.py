"""
custom_pallet.logging
---------------------

Structured logging for the pallet and its host tooling:
- JSON or concise colored text formats
- Context-local fields via `contextvars` (call, actor, block_number, ...)
- Safe coercion of values (bytes → hex, dataclasses → dict)

Usage
-----
    from custom_pallet import logging as plog

    plog.configure(json=False, level="DEBUG")
    log = plog.get_logger(__name__)

    with plog.call_scope(call="increment"):
        log.info("accepted", extra={"actor": 1})

stdlib only.
"""

from __future__ import annotations

import datetime as _dt
import io
import json
import logging
import os
import sys
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Optional

_LOG_CONTEXT: ContextVar[Dict[str, Any]] = ContextVar("_LOG_CONTEXT", default={})

DEFAULT_CONTEXT_KEYS = ("trace_id", "call", "actor", "block_number")

# LogRecord attributes that are not user-supplied extras.
_RECORD_FIELDS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime", "taskName"}


def context() -> Dict[str, Any]:
    """Return a *copy* of the active logging context."""
    return dict(_LOG_CONTEXT.get())


def bind(**fields: Any) -> None:
    cur = dict(_LOG_CONTEXT.get())
    cur.update({k: _coerce_value(v) for k, v in fields.items()})
    _LOG_CONTEXT.set(cur)


def unbind(*keys: str) -> None:
    cur = dict(_LOG_CONTEXT.get())
    for k in keys:
        cur.pop(k, None)
    _LOG_CONTEXT.set(cur)


def clear_context() -> None:
    _LOG_CONTEXT.set({})


@contextmanager
def call_scope(trace_id: Optional[str] = None, **fields: Any):
    """Bind a trace_id plus `fields` for the scope; restore prior context on exit."""
    prev = dict(_LOG_CONTEXT.get())
    try:
        bind(trace_id=trace_id or uuid.uuid4().hex[:12], **fields)
        yield
    finally:
        _LOG_CONTEXT.set(prev)


def _coerce_value(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return bytes(v).hex()
    if is_dataclass(v) and not isinstance(v, type):
        return asdict(v)
    return str(v)


def _utcnow_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat(timespec="milliseconds")


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        k: _coerce_value(v)
        for k, v in record.__dict__.items()
        if not k.startswith("_") and k not in _RECORD_FIELDS
    }


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": _utcnow_iso(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(context())
        for k, v in _extras(record).items():
            payload.setdefault(k, v)
        if record.exc_info:
            payload["err"] = "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return json.dumps(payload, default=str, separators=(",", ":"))


_COLORS = {
    logging.DEBUG: "\x1b[90m",
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[1m\x1b[35m",
}
_RESET = "\x1b[0m"


def _supports_color(stream: Any) -> bool:
    try:
        return stream.isatty() and os.environ.get("NO_COLOR") is None
    except (AttributeError, ValueError):
        return False


class TextFormatter(logging.Formatter):
    """
    One-liner:
      2026-01-05T12:34:56.789+00:00 | INFO  | custom_pallet.pallet | call=increment actor=1 | rejected
    """

    def __init__(self, stream: Any = None):
        super().__init__()
        self._color = _supports_color(stream) if stream is not None else False

    def format(self, record: logging.LogRecord) -> str:
        ctx = context()
        fields = {k: ctx[k] for k in DEFAULT_CONTEXT_KEYS if ctx.get(k) is not None}
        for k, v in _extras(record).items():
            fields.setdefault(k, v)
        fields_s = " ".join(f"{k}={v}" for k, v in fields.items())

        lvl = f"{record.levelname:<5}"
        if self._color:
            lvl = f"{_COLORS.get(record.levelno, '')}{lvl}{_RESET}"

        line = f"{_utcnow_iso()} | {lvl} | {record.name}"
        if fields_s:
            line += f" | {fields_s}"
        line += f" | {record.getMessage()}"
        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return line


def _decide_json(json_flag: Optional[bool], stream: Any) -> bool:
    if json_flag is not None:
        return json_flag
    env = os.environ.get("CUSTOM_PALLET_LOG_FORMAT", "").strip().lower()
    if env in ("json", "text"):
        return env == "json"
    return not _supports_color(stream)


def configure(
    *,
    json: Optional[bool] = None,
    level: str | int = "INFO",
    stream: io.TextIOBase = sys.stderr,
) -> None:
    """
    Configure the `custom_pallet` logger hierarchy.

    json=None picks the format from CUSTOM_PALLET_LOG_FORMAT, then TTY detection.
    """
    logger = logging.getLogger("custom_pallet")
    logger.setLevel(level if isinstance(level, int) else level.upper())
    for h in list(logger.handlers):
        logger.removeHandler(h)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter() if _decide_json(json, stream) else TextFormatter(stream))
    logger.addHandler(handler)
    logger.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "custom_pallet")


__all__ = [
    "context",
    "bind",
    "unbind",
    "clear_context",
    "call_scope",
    "JSONFormatter",
    "TextFormatter",
    "configure",
    "get_logger",
]
