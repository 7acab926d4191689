"""Run configuration."""

from __future__ import annotations

from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .targets import Target

DEFAULT_PREFIX = "import-stats"


@dataclass(frozen=True)
class StatsConfig:
    """Everything one fetch cycle needs besides the database."""
    targets: tuple[Target, ...]
    prefix: str = DEFAULT_PREFIX
    include_count: bool = False
    column_tz: str = "UTC"

    def __post_init__(self):
        try:
            ZoneInfo(self.column_tz)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {self.column_tz!r}") from e

    @property
    def key_prefix(self) -> str:
        return self.prefix or DEFAULT_PREFIX
