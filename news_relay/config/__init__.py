"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import (
    DedupConfig,
    ListingConfig,
    ListingSelectors,
    RelayConfig,
    ScheduleConfig,
    ScheduleType,
    TelegramConfig,
)

__all__ = [
    "ConfigLocator",
    "ConfigRepository",
    "DedupConfig",
    "ListingConfig",
    "ListingSelectors",
    "RelayConfig",
    "ScheduleConfig",
    "ScheduleType",
    "TelegramConfig",
]
