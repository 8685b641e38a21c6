"""Config – environment-driven settings and data paths."""
from planecrazy.config.errors import ConfigError, InvalidSettingValueError, MissingRequiredSettingError
from planecrazy.config.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from planecrazy.config.settings import PlaneCrazySettings, Settings, default_base_path

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "PlaneCrazySettings",
    "Settings",
    "SettingsLoader",
    "default_base_path",
]
