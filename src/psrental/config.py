"""Runtime configuration for psrental."""

from __future__ import annotations

import dataclasses
import math
import os
from datetime import UTC, tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from psrental._constants import (
    DEFAULT_CLOCK_FORMAT,
    DEFAULT_REFRESH_INTERVAL,
    DEFAULT_ROOM_COUNT,
    DEFAULT_UNITS_PER_ROOM,
)
from psrental.exceptions import RentalConfigError


def _env_int(env_key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise RentalConfigError(f"{env_key} must be an integer, got {value!r}") from exc


def _env_float(env_key: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise RentalConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class RentalConfig:
    """Library and CLI configuration.

    Parameters
    ----------
    data_dir : str
        Directory holding the persisted ``psRooms`` and ``rentalHistory``
        documents.  ``~`` is expanded.
    room_count : int
        Number of rooms in a freshly initialised layout.
    units_per_room : int
        Number of units in each room of a freshly initialised layout.
    time_zone : str or None
        IANA time zone used when rendering clock times.  ``None`` renders
        in the system's local time zone.
    clock_format : str
        ``strftime`` format for clock times on screen.
    refresh_interval : float
        Seconds between re-renders of the active-rentals view.
    """

    data_dir: str = "~/.psrental"
    room_count: int = DEFAULT_ROOM_COUNT
    units_per_room: int = DEFAULT_UNITS_PER_ROOM
    time_zone: str | None = None
    clock_format: str = DEFAULT_CLOCK_FORMAT
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL

    def __post_init__(self) -> None:
        if self.room_count < 0:
            raise RentalConfigError(f"room_count must be >= 0, got {self.room_count}")
        if self.units_per_room < 0:
            raise RentalConfigError(f"units_per_room must be >= 0, got {self.units_per_room}")
        if not math.isfinite(self.refresh_interval) or self.refresh_interval <= 0:
            raise RentalConfigError(f"refresh_interval must be a positive number, got {self.refresh_interval}")
        if not self.clock_format:
            raise RentalConfigError("clock_format must be non-empty")
        # Fail early on unknown zones rather than at first render.
        self.tz()

    @property
    def data_path(self) -> Path:
        """Expanded :attr:`data_dir`."""
        return Path(self.data_dir).expanduser()

    def tz(self) -> tzinfo | None:
        """Resolve :attr:`time_zone`; ``None`` means local time."""
        if self.time_zone is None:
            return None
        # UTC resolves without a tz database.
        if self.time_zone.upper() == "UTC":
            return UTC
        try:
            return ZoneInfo(self.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise RentalConfigError(f"unknown time zone {self.time_zone!r}") from exc

    @classmethod
    def from_env(cls, **overrides: Any) -> RentalConfig:
        """Create configuration from ``PSRENTAL_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "PSRENTAL_DATA_DIR": "data_dir",
            "PSRENTAL_TIME_ZONE": "time_zone",
            "PSRENTAL_CLOCK_FORMAT": "clock_format",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = val

        _ENV_INT_MAP = {
            "PSRENTAL_ROOM_COUNT": "room_count",
            "PSRENTAL_UNITS_PER_ROOM": "units_per_room",
        }
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_int(env_key, val)

        interval_env = env.get("PSRENTAL_REFRESH_INTERVAL")
        if interval_env is not None and "refresh_interval" not in overrides:
            config_kwargs["refresh_interval"] = _env_float("PSRENTAL_REFRESH_INTERVAL", interval_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
