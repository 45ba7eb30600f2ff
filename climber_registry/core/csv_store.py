"""CSV persistence for the climber roster."""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import pandas as pd
from pydantic import ValidationError

from .logging import get_logger
from .models import Climber, Coordinates, Equipment, Role, WeatherCondition, format_number
from .store import ClimberStore

logger = get_logger(__name__)

HEADER = [
    "Id",
    "Name",
    "Status",
    "Role",
    "Weather",
    "Energy",
    "Altitude",
    "Experience",
    "EquipName",
    "EquipWeight",
    "EquipDurability",
    "CoordX",
    "CoordY",
    "CoordZ",
    "CreatedAt",
]

# Older files carry the invariant-culture timestamp instead of ISO-8601.
_LEGACY_TIMESTAMP = "%m/%d/%Y %H:%M:%S"


class CsvFormatError(ValueError):
    """Raised when a single data line cannot be decoded."""


@dataclass
class LoadReport:
    path: Path
    found: bool = True
    loaded: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.warnings)


def load_climbers(path: Path | str, store: ClimberStore) -> LoadReport:
    """Load every valid line of ``path`` into ``store``.

    A missing file leaves the store untouched. Each bad line is skipped with
    a warning; nothing short of an unreadable file aborts the load.
    """

    path = Path(path)
    report = LoadReport(path=path)
    if not path.exists():
        report.found = False
        logger.info("File '%s' not found, starting with an empty collection", path)
        return report

    # Undecodable bytes become U+FFFD so one damaged row cannot hide the rest.
    with path.open("r", encoding="utf-8-sig", errors="replace", newline="") as fh:
        reader = csv.reader(fh, skipinitialspace=True)
        header_seen = False
        while True:
            line_no = reader.line_num + 1
            try:
                row = next(reader)
            except StopIteration:
                break
            except csv.Error as exc:
                _warn(report, line_no, str(exc))
                header_seen = True
                continue
            if not header_seen:
                header_seen = True
                continue
            cols = [c.strip() for c in row]
            if not any(cols):
                continue
            try:
                climber = decode_row(cols)
                if climber.id in store:
                    raise CsvFormatError(f"duplicate id {climber.id} skipped")
            except (CsvFormatError, ValidationError) as exc:
                _warn(report, line_no, _reason(exc))
                continue
            store.insert(climber)
            report.loaded += 1

    logger.info("Loaded %d climbers from %s", report.loaded, path)
    return report


def save_climbers(path: Path | str, store: ClimberStore) -> Path:
    """Overwrite ``path`` with every record of ``store``, ascending by id."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = [encode_row(climber) for climber in store.all()]
    df = pd.DataFrame(rows, columns=HEADER, dtype=object)
    df.to_csv(path, index=False, quoting=csv.QUOTE_MINIMAL, lineterminator="\n", encoding="utf-8")
    logger.info("Saved %d climbers to %s", len(rows), path)
    return path


def encode_row(climber: Climber) -> list[str]:
    equipment = climber.personal_equipment
    return [
        str(climber.id),
        climber.name,
        climber.status,
        climber.role.value,
        climber.last_known_weather.value,
        format_number(climber.energy),
        str(climber.altitude),
        format_number(climber.experience),
        equipment.name if equipment else "",
        format_number(equipment.weight_kg) if equipment else "",
        str(equipment.durability) if equipment else "",
        format_number(climber.position.x),
        format_number(climber.position.y),
        format_number(climber.position.z),
        climber.created_at.isoformat(),
    ]


def decode_row(cols: list[str]) -> Climber:
    if len(cols) != len(HEADER):
        raise CsvFormatError(f"expected {len(HEADER)} columns, got {len(cols)}")

    equipment = None
    if cols[8]:
        equipment = Equipment(
            name=cols[8],
            weight_kg=_parse_float(cols[9], "EquipWeight") if cols[9] else 0.0,
            durability=_parse_int(cols[10], "EquipDurability") if cols[10] else 0,
        )

    return Climber(
        id=_parse_int(cols[0], "Id"),
        name=cols[1],
        status=cols[2],
        role=_parse_enum(Role, cols[3]),
        last_known_weather=_parse_enum(WeatherCondition, cols[4]),
        energy=_parse_float(cols[5], "Energy"),
        altitude=_parse_int(cols[6], "Altitude"),
        experience=_parse_float(cols[7], "Experience"),
        position=Coordinates(
            x=_parse_float(cols[11], "CoordX"),
            y=_parse_float(cols[12], "CoordY"),
            z=_parse_float(cols[13], "CoordZ"),
        ),
        personal_equipment=equipment,
        created_at=_parse_timestamp(cols[14]),
    )


def _warn(report: LoadReport, line_no: int, reason: str) -> None:
    message = f"line {line_no}: {reason}"
    report.warnings.append(message)
    logger.warning(message)


def _parse_int(text: str, column: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise CsvFormatError(f"{column}: invalid integer {text!r}") from None


def _parse_float(text: str, column: str) -> float:
    try:
        return float(text)
    except ValueError:
        raise CsvFormatError(f"{column}: invalid number {text!r}") from None


def _parse_enum(enum_cls, text: str):
    try:
        return enum_cls.parse(text, strict=True)
    except ValueError as exc:
        raise CsvFormatError(str(exc)) from None


def _parse_timestamp(text: str) -> datetime:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.strptime(text, _LEGACY_TIMESTAMP)
    except ValueError:
        raise CsvFormatError(f"CreatedAt: invalid timestamp {text!r}") from None


def _reason(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        first = exc.errors()[0]
        where = ".".join(str(part) for part in first.get("loc", ()))
        return f"{where}: {first.get('msg')}" if where else str(first.get("msg"))
    return str(exc)
