"""
custom-pallet — developer CLI for the counter pallet.

Commands:
  custom-pallet run calls.json      Apply a JSON list of calls to a fresh state
  custom-pallet config              Print the resolved configuration
  custom-pallet bench               Time each call

A calls file is a JSON list of entries:

  [
    {"origin": "root", "call": "set_counter_value", "args": {"new_value": 0}},
    {"origin": {"signed": 1}, "call": "increment", "args": {"amount": 5}}
  ]

Global options:
  --max-value INTEGER   Override CUSTOM_PALLET_COUNTER_MAX
  --json                Output JSON instead of human-readable text
  --verbose / -v        Debug logging on stderr
  --version             Print the package version and exit
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from . import logging as plog
from .bench import run_all
from .config import PalletConfig, load_config, summary
from .dispatch import dispatch_entry
from .errors import PalletError
from .events import MemoryEventSink
from .origin import parse_origin
from .pallet import Pallet
from .version import __version__

app = typer.Typer(
    name="custom-pallet",
    help="Bounded counter pallet with a per-actor interaction ledger",
    no_args_is_help=True,
    add_completion=False,
)


class GlobalContext:
    def __init__(self) -> None:
        self.max_value: Optional[int] = None
        self.json_output: bool = False


_ctx = GlobalContext()


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(0)


@app.callback()
def main_callback(
    max_value: Optional[int] = typer.Option(
        None, "--max-value", help="Counter maximum (overrides CUSTOM_PALLET_COUNTER_MAX)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Print version and exit"
    ),
) -> None:
    """Run and inspect the counter pallet locally."""
    _ctx.max_value = max_value
    _ctx.json_output = json_output
    plog.configure(level="DEBUG" if verbose else "WARNING")


def _config() -> PalletConfig:
    overrides: Dict[str, Any] = {}
    if _ctx.max_value is not None:
        overrides["counter_max_value"] = _ctx.max_value
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)


def _load_entries(path: Path) -> List[Dict[str, Any]]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        typer.echo(f"Error: cannot read {path}: {e}", err=True)
        raise typer.Exit(2)
    if not isinstance(data, list) or not all(isinstance(x, dict) for x in data):
        typer.echo("Error: calls file must be a JSON list of objects", err=True)
        raise typer.Exit(2)
    return data


def _actors(entries: List[Dict[str, Any]]) -> List[Any]:
    seen: List[Any] = []
    for e in entries:
        try:
            origin = parse_origin(e.get("origin"))
        except ValueError:
            continue
        if origin.is_signed and origin.actor not in seen:
            seen.append(origin.actor)
    return seen


@app.command("run")
def run(
    calls_file: Path = typer.Argument(..., help="JSON list of calls"),
    block_number: int = typer.Option(1, "--block", help="Block number stamped on events"),
) -> None:
    """Apply calls to a fresh in-memory state and print outcomes and final state."""
    cfg = _config()
    entries = _load_entries(calls_file)
    sink = MemoryEventSink(block_number=block_number)
    pallet = Pallet(cfg, events=sink)

    outcomes = []
    for entry in entries:
        try:
            outcomes.append(dispatch_entry(pallet, entry).to_dict())
        except PalletError as err:
            outcomes.append({"call": entry.get("call"), "ok": False, "error": err.to_dict()})

    interactions = {str(a): pallet.user_interactions(a) for a in _actors(entries)}

    report = {
        "config": cfg.to_dict(),
        "outcomes": outcomes,
        "counter_value": pallet.counter_value(),
        "user_interactions": interactions,
        "events": [r.to_dict() for r in sink.records()],
    }

    if _ctx.json_output:
        typer.echo(json.dumps(report, indent=2, default=str))
        return

    for i, o in enumerate(outcomes):
        if o["ok"]:
            typer.echo(f"[{i}] {o['call']}: ok -> {o['event']['event']} value={o['event']['value']}")
        else:
            typer.echo(f"[{i}] {o['call']}: {o['error']['code']}")
    typer.echo(f"counter_value: {report['counter_value']}")
    for actor, n in interactions.items():
        typer.echo(f"user_interactions[{actor}]: {n}")


@app.command("config")
def show_config() -> None:
    """Print the resolved pallet configuration."""
    cfg = _config()
    if _ctx.json_output:
        typer.echo(json.dumps(cfg.to_dict()))
    else:
        typer.echo(summary(cfg))


@app.command("bench")
def bench(rounds: int = typer.Option(100, "--rounds", min=1, help="Rounds per call")) -> None:
    """Time set_counter_value, increment and decrement."""
    cfg = _config()
    try:
        results = run_all(rounds=rounds, config=cfg)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)
    if _ctx.json_output:
        typer.echo(json.dumps([r.to_dict() for r in results]))
        return
    for r in results:
        typer.echo(
            f"{r.call:<18} rounds={r.rounds} min={r.min_us:.1f}us "
            f"median={r.median_us:.1f}us mean={r.mean_us:.1f}us"
        )


def main() -> None:
    """Entry point for the custom-pallet CLI."""
    app()


if __name__ == "__main__":
    main()
