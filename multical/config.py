"""
Configuration parser for multical.

Handles TOML file parsing into a small tree of dataclasses. Every section is
optional; missing keys fall back to the dataclass defaults.
"""

import tomllib
import os
from pathlib import Path
from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Optional

from .timezone_utils import is_valid_timezone
from . import debug


def _debug_print(msg: str) -> None:
    debug.emit("CONFIG", msg)


def _parse_time(value, key: str) -> time:
    """Parse an 'HH:MM' string from the config file."""
    if isinstance(value, time):
        return value
    try:
        return datetime.strptime(str(value), "%H:%M").time()
    except ValueError:
        raise ValueError(f"Invalid time for '{key}': {value!r} (expected HH:MM)")


@dataclass
class GeneralConfig:
    """General engine settings."""
    default_timezone: str = "UTC"  # Used when a calendar is created without a zone
    debug: bool = False


@dataclass
class AllDayConfig:
    """Window used to materialize all-day events."""
    start: time = time(8, 0)
    end: time = time(17, 0)


@dataclass
class SeriesConfig:
    """Series identifier formats."""
    id_prefix: str = "series-"
    copy_prefix: str = "copied-"  # Prefix for series ids remapped by range copies


@dataclass
class Config:
    """Main configuration container for multical."""

    general: GeneralConfig = field(default_factory=GeneralConfig)
    all_day: AllDayConfig = field(default_factory=AllDayConfig)
    series: SeriesConfig = field(default_factory=SeriesConfig)

    def __post_init__(self):
        if not is_valid_timezone(self.general.default_timezone):
            raise ValueError(f"Unknown default timezone: {self.general.default_timezone!r}")
        if self.all_day.end <= self.all_day.start:
            raise ValueError("All-day end must be after all-day start")

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        xdg_config = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(xdg_config) / 'multical' / 'multical.toml'

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """Load configuration from TOML file."""
        if config_path is None:
            config_path = cls.get_default_config_path()
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'rb') as f:
            data = tomllib.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        """Build a Config from already-parsed TOML data."""
        _debug_print(f"TOML data keys: {list(data.keys())}")

        # Parse General section
        general_data = data.get('General', {})
        general = GeneralConfig(
            default_timezone=general_data.get('default_timezone', GeneralConfig.default_timezone),
            debug=bool(general_data.get('debug', GeneralConfig.debug)),
        )

        # Parse AllDay section
        all_day_data = data.get('AllDay', {})
        all_day = AllDayConfig(
            start=_parse_time(all_day_data.get('start', AllDayConfig.start), 'AllDay.start'),
            end=_parse_time(all_day_data.get('end', AllDayConfig.end), 'AllDay.end'),
        )

        # Parse Series section
        series_data = data.get('Series', {})
        series = SeriesConfig(
            id_prefix=series_data.get('id_prefix', SeriesConfig.id_prefix),
            copy_prefix=series_data.get('copy_prefix', SeriesConfig.copy_prefix),
        )

        return cls(general=general, all_day=all_day, series=series)
