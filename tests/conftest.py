from __future__ import annotations

import io
from datetime import datetime

import pytest
from rich.console import Console

from climber_registry.core.models import Climber, Coordinates, Equipment, Role, WeatherCondition


class Feed:
    """Scripted line source; raises EOFError once the answers run out."""

    def __init__(self, *answers: str) -> None:
        self._answers = list(answers)
        self.prompts: list[str] = []

    def __call__(self, prompt: str = "") -> str:
        self.prompts.append(prompt)
        if not self._answers:
            raise EOFError
        return self._answers.pop(0)

    @property
    def remaining(self) -> int:
        return len(self._answers)


@pytest.fixture
def out() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


def output(console: Console) -> str:
    return console.file.getvalue()


def make_climber(climber_id: int, role: Role = Role.CLIMBER, **kw) -> Climber:
    fields = dict(
        id=climber_id,
        created_at=datetime(2024, 5, 1, 8, 30, 15, 125000),
        name=f"climber {climber_id}",
        status="",
        role=role,
        last_known_weather=WeatherCondition.SUNNY,
        energy=75.5,
        altitude=4200,
        experience=6.25,
        position=Coordinates(x=-12.5, y=300, z=4200),
        personal_equipment=Equipment(name="ice axe", weight_kg=1.2, durability=90),
    )
    fields.update(kw)
    return Climber(**fields)


# answers for one full interactive record, in prompt order
RECORD_ANSWERS = [
    "Anna",  # name
    "resting",  # status
    "Medic",  # role
    "Windy",  # weather
    "80",  # energy
    "5300",  # altitude
    "7.5",  # experience
    "10",  # x
    "-20",  # y
    "5300",  # z
    "rope",  # equipment name
    "3.5",  # weight
    "60",  # durability
]
