"""Core Pydantic models for the climber roster."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

EMPTY_STATUS = "-"
NO_EQUIPMENT = "(none)"


class _NamedEnum(str, Enum):
    """Enum whose members are written and read by their symbolic name."""

    @classmethod
    def parse(cls, text: str, *, strict: bool = False):
        """Return the member named ``text``.

        Matching ignores case unless ``strict`` is set. Raises ``ValueError``
        for unknown names.
        """
        name = (text or "").strip()
        for member in cls:
            if member.value == name or (not strict and member.value.lower() == name.lower()):
                return member
        raise ValueError(f"unknown {cls.__name__} {name!r}")

    @classmethod
    def names(cls) -> list[str]:
        return [member.value for member in cls]

    def __str__(self) -> str:
        return self.value


class Role(_NamedEnum):
    LEADER = "Leader"
    MEDIC = "Medic"
    CLIMBER = "Climber"
    SUPPORT = "Support"


class WeatherCondition(_NamedEnum):
    SUNNY = "Sunny"
    WINDY = "Windy"
    SNOWY = "Snowy"
    STORM = "Storm"


def format_number(value: float | int) -> str:
    """Locale-independent shortest form: ``12.5``, ``100``, ``-3.25``."""

    if isinstance(value, int):
        return str(value)
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = Field(default=0.0, ge=-1000, le=1000)
    y: float = Field(default=0.0, ge=-1000, le=1000)
    z: float = Field(default=0.0, ge=0, le=8848)

    def __str__(self) -> str:
        return f"({format_number(self.x)}; {format_number(self.y)}; {format_number(self.z)})"


class Equipment(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    weight_kg: float = Field(default=0.0, ge=0, le=50)
    durability: int = Field(default=0, ge=0, le=100)

    def __str__(self) -> str:
        return f"{self.name} ({format_number(self.weight_kg)} kg, durability {self.durability})"


class Climber(BaseModel):
    """One roster record. ``id`` is assigned by the store on insert."""

    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    id: int
    created_at: datetime = Field(default_factory=datetime.now)
    name: str = Field(min_length=1)
    status: str = ""
    role: Role
    last_known_weather: WeatherCondition
    energy: float = Field(ge=0, le=100)
    altitude: int = Field(ge=0, le=8848)
    experience: float = Field(ge=0, le=10)
    position: Coordinates = Field(default_factory=Coordinates)
    personal_equipment: Equipment | None = None

    def describe(self) -> str:
        """Canonical one-line rendering used by every listing command."""

        status = self.status if self.status.strip() else EMPTY_STATUS
        equipment = str(self.personal_equipment) if self.personal_equipment else NO_EQUIPMENT
        return (
            f"{self.id}: {self.name}, {self.role}, status: {status}, "
            f"altitude {self.altitude} m, energy {format_number(self.energy)}, "
            f"experience {format_number(self.experience)}, "
            f"weather {self.last_known_weather}, position {self.position}, "
            f"equipment: {equipment}"
        )

    def __str__(self) -> str:
        return self.describe()
