from __future__ import annotations

from pathlib import Path
from typing import Callable

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CSV_PATH = "climbers.csv"


class Settings(BaseSettings):
    # ``CLIMBERS_CSV`` may also come from a local .env file; blank means unset
    # so the startup prompt still gets a chance to ask.
    csv_path: str | None = Field(default=None, validation_alias="CLIMBERS_CSV")
    id_min: int = Field(default=1000, validation_alias="CLIMBERS_ID_MIN")
    id_max: int = Field(default=9999, validation_alias="CLIMBERS_ID_MAX")
    log_level: str = Field(default="INFO", validation_alias="CLIMBERS_LOG_LEVEL")
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("csv_path")
    @classmethod
    def _blank_is_unset(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @model_validator(mode="after")
    def _id_range_not_empty(self) -> "Settings":
        if self.id_min >= self.id_max:
            raise ValueError(
                f"CLIMBERS_ID_MIN ({self.id_min}) must be below CLIMBERS_ID_MAX ({self.id_max})"
            )
        return self


class ConfigError(ValueError):
    """Raised when the environment or .env holds unusable settings."""


def load_settings() -> Settings:
    """Build :class:`Settings`, folding validation errors into one message."""

    try:
        return Settings()
    except ValidationError as exc:
        problems = []
        for err in exc.errors():
            where = ".".join(str(part) for part in err.get("loc", ()))
            problems.append(f"{where}: {err['msg']}" if where else err["msg"])
        raise ConfigError("invalid configuration: " + "; ".join(problems)) from None


def resolve_csv_path(
    arg: str | None,
    cfg: Settings | None = None,
    ask: Callable[[str], str] | None = None,
) -> Path:
    """Return the effective persistence file.

    Preference order:
    1. Explicit argument ``arg``.
    2. ``CLIMBERS_CSV`` environment variable (via :class:`Settings`).
    3. Answer to an interactive prompt, when ``ask`` is given.
    4. ``climbers.csv`` in the working directory.
    """

    cfg = cfg or load_settings()
    if arg and arg.strip():
        return Path(arg.strip()).expanduser()
    if cfg.csv_path:
        return Path(cfg.csv_path).expanduser()
    if ask is not None:
        try:
            answer = ask(f"path to CSV file (empty for {DEFAULT_CSV_PATH}): ")
        except EOFError:
            answer = ""
        if answer and answer.strip():
            return Path(answer.strip()).expanduser()
    return Path(DEFAULT_CSV_PATH)
