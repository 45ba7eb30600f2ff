"""Loop-until-valid field readers used by ``insert`` and ``update``.

Every reader keeps asking until it gets an acceptable answer; a bad entry
only repeats that one field. ``EOFError`` from ``ask`` is left to the caller.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, TypeVar

from rich.console import Console

from .models import Climber, Coordinates, Equipment, Role, WeatherCondition, format_number
from .ui import say

Ask = Callable[[str], str]
E = TypeVar("E", Role, WeatherCondition)


def read_required_text(ask: Ask, out: Console, label: str) -> str:
    while True:
        value = (ask(f"{label}: ") or "").strip()
        if value:
            return value
        say(out, "field cannot be empty")


def read_optional_text(ask: Ask, label: str) -> str:
    return (ask(f"{label} (empty to skip): ") or "").strip()


def read_choice(ask: Ask, out: Console, label: str, enum_cls: type[E]) -> E:
    names = ", ".join(enum_cls.names())
    while True:
        try:
            return enum_cls.parse(ask(f"{label} [{names}]: "))
        except ValueError:
            say(out, "invalid value")


def read_float(ask: Ask, out: Console, label: str, lo: float, hi: float) -> float:
    while True:
        raw = (ask(f"{label} ({format_number(lo)}..{format_number(hi)}): ") or "").strip()
        try:
            value = float(raw)
        except ValueError:
            value = None
        if value is not None and lo <= value <= hi:
            return value
        say(out, f"must be a number in [{format_number(lo)}; {format_number(hi)}]")


def read_int(ask: Ask, out: Console, label: str, lo: int, hi: int) -> int:
    while True:
        raw = (ask(f"{label} ({lo}..{hi}): ") or "").strip()
        try:
            value = int(raw)
        except ValueError:
            value = None
        if value is not None and lo <= value <= hi:
            return value
        say(out, f"must be an integer in [{lo}; {hi}]")


def read_equipment(ask: Ask, out: Console) -> Equipment | None:
    name = (ask("equipment name (empty for none): ") or "").strip()
    if not name:
        return None
    weight = read_float(ask, out, "weight, kg", 0.0, 50.0)
    durability = read_int(ask, out, "durability", 0, 100)
    return Equipment(name=name, weight_kg=weight, durability=durability)


def read_climber(
    ask: Ask,
    out: Console,
    climber_id: int,
    created_at: datetime | None = None,
) -> Climber:
    """Prompt for every field in order and return the finished record."""

    name = read_required_text(ask, out, "name")
    status = read_optional_text(ask, "status")
    role = read_choice(ask, out, "role", Role)
    weather = read_choice(ask, out, "weather", WeatherCondition)
    energy = read_float(ask, out, "energy", 0.0, 100.0)
    altitude = read_int(ask, out, "altitude", 0, 8848)
    experience = read_float(ask, out, "experience", 0.0, 10.0)
    position = Coordinates(
        x=read_float(ask, out, "coord X", -1000.0, 1000.0),
        y=read_float(ask, out, "coord Y", -1000.0, 1000.0),
        z=read_float(ask, out, "coord Z", 0.0, 8848.0),
    )
    equipment = read_equipment(ask, out)

    fields = dict(
        id=climber_id,
        name=name,
        status=status,
        role=role,
        last_known_weather=weather,
        energy=energy,
        altitude=altitude,
        experience=experience,
        position=position,
        personal_equipment=equipment,
    )
    if created_at is not None:
        fields["created_at"] = created_at
    return Climber(**fields)
