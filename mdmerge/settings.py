"""Configuration helpers bound to python-decouple."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from decouple import Config as DecoupleConfig, Csv, RepositoryEmpty, RepositoryEnv
from pydantic import BaseModel, Field, field_validator

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def load_config(env_path: str | Path = ".env") -> DecoupleConfig:
    """Return a decouple config object anchored to the working directory .env file.

    Environment variables always win; when the file is absent only the
    environment is consulted.
    """

    path = Path(env_path)
    if path.exists():
        return DecoupleConfig(RepositoryEnv(str(path)))
    return DecoupleConfig(RepositoryEmpty())


class MergeDefaults(BaseModel):
    """Defaults the CLI flags can only switch off."""

    source_comments: bool = Field(default=True, description="Insert <!-- source: ... --> comments")
    sort_zip: bool = Field(default=True, description="Sort zip entries case-insensitively")


class LoggingSettings(BaseModel):
    """Diagnostic logging knobs."""

    level: str = Field(default="WARNING", description="Root log level for mdmerge loggers")
    log_file: Path | None = Field(default=None, description="Optional file that mirrors diagnostic logs")

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            msg = f"Unsupported log level {value!r}; expected one of {sorted(_LOG_LEVELS)}"
            raise ValueError(msg)
        return level


class ConsoleSettings(BaseModel):
    """Interactive console behaviour."""

    progress: bool = Field(default=True, description="Show the live progress spinner on terminals")
    pause_parents: tuple[str, ...] = Field(
        default=("explorer.exe",),
        description="Parent process names treated as a drag-and-drop launch",
    )


class Settings(BaseModel):
    merge: MergeDefaults = Field(default_factory=MergeDefaults)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    console: ConsoleSettings = Field(default_factory=ConsoleSettings)


def build_settings(config: DecoupleConfig | None = None) -> Settings:
    """Materialize a :class:`Settings` instance from decouple values."""

    cfg = config or load_config()
    log_file = cfg("MDMERGE_LOG_FILE", default="")
    return Settings(
        merge=MergeDefaults(
            source_comments=cfg("MDMERGE_SOURCE_COMMENTS", default=True, cast=bool),
            sort_zip=cfg("MDMERGE_SORT_ZIP", default=True, cast=bool),
        ),
        logging=LoggingSettings(
            level=cfg("MDMERGE_LOG_LEVEL", default="WARNING"),
            log_file=Path(log_file) if log_file else None,
        ),
        console=ConsoleSettings(
            progress=cfg("MDMERGE_PROGRESS", default=True, cast=bool),
            pause_parents=tuple(cfg("MDMERGE_PAUSE_PARENTS", default="explorer.exe", cast=Csv())),
        ),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return build_settings()
