"""Config – EnvSettingsLoader, DotenvSettingsLoader."""
from __future__ import annotations

import abc
import dataclasses
import os
import typing
from pathlib import Path
from typing import Any, TypeVar

from dotenv import load_dotenv

from planecrazy.config.errors import ConfigError, InvalidSettingValueError, MissingRequiredSettingError
from planecrazy.config.settings import Settings

T = TypeVar("T", bound=Settings)

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


class SettingsLoader(abc.ABC):
    """Port: load settings from an external source."""

    @abc.abstractmethod
    def load(self, settings_class: type[T]) -> T: ...


class EnvSettingsLoader(SettingsLoader):
    """Load settings from OS environment variables named ``<PREFIX>_<FIELD>``."""

    def __init__(self, environ: typing.Mapping[str, str] | None = None) -> None:
        self._environ = environ

    def load(self, settings_class: type[T]) -> T:
        environ = self._environ if self._environ is not None else os.environ
        prefix = getattr(settings_class, "_prefix", "").upper()
        hints = typing.get_type_hints(settings_class)
        kwargs: dict[str, Any] = {}

        for field in dataclasses.fields(settings_class):
            env_key = f"{prefix}_{field.name}".upper().lstrip("_")
            raw = environ.get(env_key)

            if raw is None:
                if (
                    field.default is dataclasses.MISSING
                    and field.default_factory is dataclasses.MISSING
                ):
                    raise MissingRequiredSettingError(env_key)
                continue

            kwargs[field.name] = self._coerce(env_key, raw, hints.get(field.name, str))

        try:
            return settings_class(**kwargs)
        except ConfigError:
            raise
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Failed to load settings: {exc}", cause=exc) from exc

    def _coerce(self, key: str, value: str, type_hint: Any) -> Any:  # noqa: PLR0911
        if type_hint is bool:
            lowered = value.strip().lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            raise InvalidSettingValueError(key, value, "expected a boolean")
        try:
            if type_hint is int:
                return int(value)
            if type_hint is float:
                return float(value)
        except ValueError as exc:
            raise InvalidSettingValueError(key, value, str(exc)) from exc
        if type_hint is Path:
            return Path(value).expanduser()
        if typing.get_origin(type_hint) is list:
            return [v.strip() for v in value.split(",") if v.strip()]
        return value


class DotenvSettingsLoader(SettingsLoader):
    """Load settings from a ``.env`` file then fall back to ``EnvSettingsLoader``."""

    def __init__(self, env_file: str | os.PathLike[str] = ".env", override: bool = False) -> None:
        self._env_file = env_file
        self._override = override

    def load(self, settings_class: type[T]) -> T:
        load_dotenv(self._env_file, override=self._override)
        return EnvSettingsLoader().load(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader"]
