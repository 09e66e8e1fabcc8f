"""
Director settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Nested groups can be overridden with a double underscore, e.g.
``EMBERDASH_SPEED__INITIAL_SPEED=6.5``.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SpeedSettings(BaseSettings):
    """Scroll speed progression."""

    initial_speed: float = Field(default=5.75, gt=0.0)
    speed_multiplier: float = Field(default=1.05, gt=0.0)
    speed_increase_interval_ms: float = Field(default=30000.0, gt=0.0)


class SpacingSettings(BaseSettings):
    """Gap calculation between obstacles (in character widths)."""

    max_gap_units: float = 6.0
    min_jump_units: float = 1.5  # Smallest physically jumpable gap
    char_width_in_percent: float = 6.0  # 60px is roughly 6% of viewport width

    # Progression of the spacing multiplier
    spacing_increase_interval_ms: float = Field(default=60000.0, gt=0.0)
    spacing_increase_amount: float = Field(default=0.1, ge=0.0)
    spacing_multiplier_max: float = Field(default=2.0, ge=1.0)

    # Anti-repetition
    identical_gap_tolerance: float = Field(default=0.5, ge=0.0)
    identical_gap_limit: int = Field(default=2, ge=1)
    variation_min: float = 0.85
    variation_max: float = 1.15

    # Relief after a near miss
    missed_jump_relief: float = Field(default=0.9, gt=0.0, le=1.0)

    # Smooth noise cursor step, multiplied by the golden-ratio conjugate
    noise_step_scale: float = Field(default=1.0, gt=0.0)


class SpawnSettings(BaseSettings):
    """Spawn cooldown tuning."""

    initial_spawn_cooldown_ms: float = Field(default=2000.0, ge=0.0)
    spawn_cooldown_base_ms: float = Field(default=2000.0, ge=0.0)
    spawn_cooldown_floor_ms: float = Field(default=500.0, ge=0.0)
    reference_speed: float = Field(default=5.0, gt=0.0)
    bundle_cooldown_ms: float = Field(default=3000.0, ge=0.0)


class ClusterSettings(BaseSettings):
    """Clusters of small fires."""

    unlock_after_ms: float = 45000.0  # Measured from the last speed increase
    min_obstacles_between: int = Field(default=5, ge=0)
    spawn_chance: float = Field(default=0.3, ge=0.0, le=1.0)
    min_interval_ms: float = 5000.0
    penalty_ms: float = Field(default=10000.0, ge=0.0)
    min_members: int = Field(default=2, ge=1)
    max_members: int = Field(default=3, ge=1)
    member_spacing: float = 15.0  # Presentation units between members


class Settings(BaseSettings):
    """Main director settings."""

    model_config = SettingsConfigDict(
        env_prefix="EMBERDASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False

    # Spacing randomness: continuous smooth noise or independent uniform draws
    randomness: Literal["smooth", "uniform"] = "smooth"

    # Points per obstacle passed
    score_per_obstacle: int = 10

    # Nested settings
    speed: SpeedSettings = Field(default_factory=SpeedSettings)
    spacing: SpacingSettings = Field(default_factory=SpacingSettings)
    spawn: SpawnSettings = Field(default_factory=SpawnSettings)
    cluster: ClusterSettings = Field(default_factory=ClusterSettings)

    @property
    def uses_smooth_noise(self) -> bool:
        """Check if spacing is driven by smooth noise."""
        return self.randomness == "smooth"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
