"""Per-session state of the director.

One ``SessionState`` is created per play session and threaded through every
director component. Nothing in the director keeps state of its own outside it,
so a fresh state and the same seed replay a session exactly.
"""

from dataclasses import dataclass
from enum import Enum

from emberdash.director.categories import Category

# Phase thresholds
INITIAL_SMALL_COUNT = 10     # Small fires before anything bigger appears
RAMP_UP_MEDIUM_CLEARED = 5   # Medium fires cleared before the full mix
EXTRA_LARGE_LARGE_CLEARED = 5  # Large fires cleared before bundles appear


class Phase(Enum):
    """Session-lifetime difficulty stage."""
    INITIAL = "initial"
    RAMP_UP = "ramp_up"
    FULL_CHALLENGE = "full_challenge"


def derive_phase(small_count: int, medium_cleared: int) -> Phase:
    """Phase as a pure function of the progression counters."""
    if small_count < INITIAL_SMALL_COUNT:
        return Phase.INITIAL
    if medium_cleared < RAMP_UP_MEDIUM_CLEARED:
        return Phase.RAMP_UP
    return Phase.FULL_CHALLENGE


@dataclass
class SessionState:
    """Everything the director knows about the running session."""

    seed: int
    session_start_ms: float = 0.0
    playing: bool = True

    # Clock
    elapsed_play_ms: float = 0.0
    last_tick_ms: float | None = None

    # Speed and spacing progression
    speed: float = 5.75
    last_speed_increase_ms: float = 0.0
    spacing_multiplier: float = 1.0
    last_spacing_increase_ms: float = 0.0

    # Spawn timing
    spawn_cooldown_ms: float = 2000.0
    last_spawn_ms: float = 0.0

    # Spacing history
    last_obstacle_category: Category | None = None
    last_gap_units: float | None = None
    consecutive_identical_gap_count: int = 0
    missed_last_jump: bool = False

    # Phase counters
    small_count: int = 0
    medium_cleared: int = 0
    large_cleared: int = 0
    small_since_non_small: int = 0

    # Clusters
    cluster_unlocked: bool = False
    obstacles_since_last_cluster: int = 0
    last_cluster_ms: float = float("-inf")
    cluster_penalty_until_ms: float = float("-inf")

    # Smooth noise cursor
    noise_index: float = 0.0

    # HUD counters
    spawn_count: int = 0
    obstacles_passed: int = 0
    near_misses: int = 0
    score: int = 0

    @property
    def phase(self) -> Phase:
        return derive_phase(self.small_count, self.medium_cleared)
