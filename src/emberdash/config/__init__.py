"""Configuration for EMBERDASH."""

from .settings import (
    ClusterSettings,
    Settings,
    SpacingSettings,
    SpawnSettings,
    SpeedSettings,
    get_settings,
)

__all__ = [
    "Settings",
    "SpeedSettings",
    "SpacingSettings",
    "SpawnSettings",
    "ClusterSettings",
    "get_settings",
]
