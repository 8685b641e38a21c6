"""Config – Settings base class and PlaneCrazySettings.

All persistent data lives under one base directory::

    <base>/Config   user configuration
    <base>/Data     auxiliary data files
    <base>/Events   the event log (one JSON file per event)

The base defaults to ``~/Documents/PlaneCrazy``, or ``~/PlaneCrazy`` when the
user has no Documents folder, and is overridden with ``PLANECRAZY_BASE_PATH``.
"""
from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import ClassVar

from planecrazy.config.errors import InvalidSettingValueError

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def default_base_path(home: Path | None = None) -> Path:
    home = home if home is not None else Path.home()
    documents = home / "Documents"
    return (documents if documents.is_dir() else home) / "PlaneCrazy"


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings."""

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""


@dataclasses.dataclass
class PlaneCrazySettings(Settings):
    _prefix: ClassVar[str] = "PLANECRAZY"

    base_path: Path = dataclasses.field(default_factory=default_base_path)
    log_level: str = "INFO"
    log_json: bool = True

    def _validate(self) -> None:
        self.base_path = Path(self.base_path).expanduser()
        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise InvalidSettingValueError(
                "log_level", self.log_level, f"expected one of {', '.join(_LOG_LEVELS)}"
            )

    @property
    def config_path(self) -> Path:
        return self.base_path / "Config"

    @property
    def data_path(self) -> Path:
        return self.base_path / "Data"

    @property
    def events_path(self) -> Path:
        return self.base_path / "Events"

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)

    def ensure_directories(self) -> None:
        """Create the base directory and its subdirectories if missing."""
        for path in (self.base_path, self.config_path, self.data_path, self.events_path):
            path.mkdir(parents=True, exist_ok=True)


__all__ = ["PlaneCrazySettings", "Settings", "default_base_path"]
