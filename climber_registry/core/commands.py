"""Command parsing and dispatch for the roster shell."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, NamedTuple

from rich.console import Console

from . import ui
from .csv_store import save_climbers
from .logging import get_logger
from .models import Role
from .prompts import Ask, read_climber
from .store import ClimberStore

logger = get_logger(__name__)

EMPTY = "(empty)"
NO_SUCH_ID = "no such id"


class Command(str, Enum):
    HELP = "help"
    INFO = "info"
    SHOW = "show"
    INSERT = "insert"
    UPDATE = "update"
    REMOVE_KEY = "remove_key"
    CLEAR = "clear"
    SAVE = "save"
    EXECUTE_SCRIPT = "execute_script"
    EXIT = "exit"
    FILTER_ROLE = "filter_role"
    GROUP_BY_ROLE = "group_by_role"
    COUNT = "count"


HELP_ROWS: list[tuple[str, str]] = [
    ("help", "show this list"),
    ("info", "collection type, start time and size"),
    ("show", "print every climber ordered by id"),
    ("insert", "add a climber (interactive)"),
    ("update id", "replace the climber with this id (interactive)"),
    ("remove_key id", "delete the climber with this id"),
    ("clear", "remove every climber"),
    ("save", "write the collection to the CSV file"),
    ("execute_script file", "run commands from a file"),
    ("exit", "leave"),
    ("filter_role " + "|".join(Role.names()), "climbers with the given role"),
    ("group_by_role", "climbers grouped by role"),
    ("count", "number of climbers"),
]


class ParsedCommand(NamedTuple):
    name: str  # lower-cased first token, kept for unknown commands
    command: Command | None
    argument: str  # untouched remainder of the line, stripped


def parse_command_line(text: str) -> ParsedCommand | None:
    """
    Split a line into its command word and the rest:
        'update 1234'            -> UPDATE, '1234'
        'EXECUTE_SCRIPT a b.txt' -> EXECUTE_SCRIPT, 'a b.txt'
        'filter_roles Medic'     -> unknown 'filter_roles'
    Returns None for blank lines.
    """
    parts = (text or "").strip().split(None, 1)
    if not parts:
        return None
    name = parts[0].lower()
    argument = parts[1].strip() if len(parts) > 1 else ""
    try:
        command = Command(name)
    except ValueError:
        command = None
    return ParsedCommand(name=name, command=command, argument=argument)


class Interpreter:
    """Execute roster commands against one store.

    ``execute`` returns False once ``exit`` is requested. Prompted fields are
    always read from ``ask``, also while a script is running.
    """

    def __init__(
        self,
        store: ClimberStore,
        csv_path: Path | str,
        *,
        ask: Ask | None = None,
        out: Console | None = None,
        started_at: datetime | None = None,
    ) -> None:
        self.store = store
        self.csv_path = Path(csv_path)
        self.ask = ask or ui.prompt_input
        self.out = out or ui.console
        self.started_at = started_at or datetime.now()
        self._scripts: list[Path] = []
        self._handlers: dict[Command, Callable[[str], bool | None]] = {
            Command.HELP: self._help,
            Command.INFO: self._info,
            Command.SHOW: self._show,
            Command.INSERT: self._insert,
            Command.UPDATE: self._update,
            Command.REMOVE_KEY: self._remove_key,
            Command.CLEAR: self._clear,
            Command.SAVE: self._save,
            Command.EXECUTE_SCRIPT: self._execute_script,
            Command.FILTER_ROLE: self._filter_role,
            Command.GROUP_BY_ROLE: self._group_by_role,
            Command.COUNT: self._count,
        }

    def say(self, text: object = "") -> None:
        ui.say(self.out, text)

    # --- public API ----------------------------------------------------
    def execute(self, line: str) -> bool:
        parsed = parse_command_line(line)
        if parsed is None:
            return True
        if parsed.command is None:
            self.say("unknown command. Type 'help'.")
            return True
        if parsed.command is Command.EXIT:
            return False
        try:
            return self._handlers[parsed.command](parsed.argument) is not False
        except EOFError:
            raise
        except Exception as exc:
            logger.debug("command %r failed", line, exc_info=True)
            self.say(f"[error] {exc}")
            return True

    def run_script(self, path: Path | str) -> bool:
        """Run every command of ``path``; False when it stopped on ``exit``."""

        path = Path(path).expanduser()
        if not path.is_file():
            self.say("file not found")
            return True
        resolved = path.resolve()
        if resolved in self._scripts:
            self.say(f"script {path} is already running, skipped")
            return True

        lines = path.read_text(encoding="utf-8").splitlines()
        logger.info("Running script %s (%d lines)", path, len(lines))
        self.say(f"[exec] running {path}, lines: {len(lines)}")
        self._scripts.append(resolved)
        try:
            for raw in lines:
                line = raw.strip()
                if not line or line.startswith("#"):
                    continue
                self.say(f"> {line}")
                if not self.execute(line):
                    return False
        finally:
            self._scripts.pop()
        return True

    # --- handlers ------------------------------------------------------
    def _help(self, _arg: str) -> None:
        self.out.print(ui.render_help(HELP_ROWS))

    def _info(self, _arg: str) -> None:
        self.say(f"collection type: {self.store.type_label}")
        self.say(f"initialized at: {self.started_at:%Y-%m-%d %H:%M:%S}")
        self.say(f"elements: {self.store.count()}")

    def _show(self, _arg: str) -> None:
        climbers = self.store.all()
        if not climbers:
            self.say(EMPTY)
            return
        for climber in climbers:
            self.say(climber.describe())

    def _insert(self, _arg: str) -> None:
        climber_id = self.store.next_id()
        climber = read_climber(self.ask, self.out, climber_id)
        self.store.insert(climber)
        self.say(f"added: {climber.describe()}")

    def _update(self, arg: str) -> None:
        if not arg:
            self.say("usage: update id")
            return
        climber_id = _parse_id(arg)
        current = self.store.get(climber_id) if climber_id is not None else None
        if current is None:
            self.say(NO_SUCH_ID)
            return
        climber = read_climber(self.ask, self.out, current.id, created_at=current.created_at)
        climber = self.store.update(current.id, climber)
        self.say(f"updated: {climber.describe()}")

    def _remove_key(self, arg: str) -> None:
        if not arg:
            self.say("usage: remove_key id")
            return
        climber_id = _parse_id(arg)
        if climber_id is not None and self.store.remove(climber_id):
            self.say(f"removed: {climber_id}")
        else:
            self.say(NO_SUCH_ID)

    def _clear(self, _arg: str) -> None:
        self.store.clear()
        self.say("collection cleared.")

    def _save(self, _arg: str) -> None:
        path = save_climbers(self.csv_path, self.store)
        self.say(f"saved to {path}")

    def _execute_script(self, arg: str) -> bool:
        if not arg:
            self.say("usage: execute_script file_name")
            return True
        finished = self.run_script(arg)
        # ``exit`` inside a nested script also stops the scripts around it,
        # but never the interactive session.
        return finished or not self._scripts

    def _filter_role(self, arg: str) -> None:
        if not arg:
            self.say(f"usage: filter_role {{{'|'.join(Role.names())}}}")
            return
        try:
            role = Role.parse(arg)
        except ValueError:
            self.say("unknown role")
            return
        matches = self.store.filter_by_role(role)
        if not matches:
            self.say(EMPTY)
        for climber in matches:
            self.say(climber.describe())

    def _group_by_role(self, _arg: str) -> None:
        groups = self.store.group_by_role()
        if not groups:
            self.say(EMPTY)
            return
        for role, climbers in groups.items():
            self.say()
            self.say(f"{role}: {len(climbers)} pcs.")
            for climber in climbers:
                self.say(f"  {climber.describe()}")

    def _count(self, _arg: str) -> None:
        self.say(self.store.count())


def _parse_id(text: str) -> int | None:
    try:
        return int(text.strip())
    except ValueError:
        return None
