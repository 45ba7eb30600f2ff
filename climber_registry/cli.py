"""
Entry point for the climber roster shell.

Startup:
- Resolve the CSV file (argument, ``CLIMBERS_CSV``, prompt, default).
- Load it into a fresh store; a missing file means an empty roster.
- Read commands until ``exit`` or end of input.
"""

from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path
from typing import Sequence

from rich.console import Console

from climber_registry.core import ui
from climber_registry.core.commands import Interpreter
from climber_registry.core.config import ConfigError, Settings, load_settings, resolve_csv_path
from climber_registry.core.csv_store import load_climbers
from climber_registry.core.logging import get_logger, set_level
from climber_registry.core.prompts import Ask
from climber_registry.core.store import ClimberStore

logger = get_logger(__name__)

PROMPT = "> "


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Interactive climber roster backed by a CSV file",
        epilog="Type 'help' at the prompt for the list of commands.",
    )
    p.add_argument(
        "csv_path",
        nargs="?",
        help="CSV file to load and save (default: $CLIMBERS_CSV, then climbers.csv)",
    )
    return p


def run_session(interpreter: Interpreter, ask: Ask) -> None:
    """Read and execute commands until ``exit`` or end of input."""

    interpreter.say("climber roster. Type 'help' for the list of commands.")
    while True:
        try:
            line = ask(PROMPT)
        except EOFError:
            break
        if not line or not line.strip():
            continue
        try:
            if not interpreter.execute(line):
                break
        except EOFError:
            # Input ended in the middle of a prompted record.
            break


def open_session(
    csv_path: Path,
    *,
    cfg: Settings | None = None,
    ask: Ask | None = None,
    out: Console | None = None,
) -> Interpreter:
    cfg = cfg or load_settings()
    store = ClimberStore(id_min=cfg.id_min, id_max=cfg.id_max)
    out = out or ui.console
    try:
        report = load_climbers(csv_path, store)
    except OSError as exc:
        logger.warning("Could not load %s: %s", csv_path, exc)
        ui.say(out, f"[warn] could not load file: {exc}")
    else:
        if report.found:
            ui.say(out, f"loaded: {report.loaded} climbers from {csv_path}")
    return Interpreter(store, csv_path, ask=ask, out=out, started_at=datetime.now())


def main(argv: Sequence[str] | None = None, *, ask: Ask | None = None, out: Console | None = None) -> int:
    args = build_parser().parse_args(argv)
    ask = ask or ui.prompt_input
    try:
        cfg = load_settings()
    except ConfigError as exc:
        ui.say(out or ui.console, f"[error] {exc}")
        return 2
    set_level(cfg.log_level)
    csv_path = resolve_csv_path(args.csv_path, cfg, ask)
    interpreter = open_session(csv_path, cfg=cfg, ask=ask, out=out)
    run_session(interpreter, ask)
    return 0
