"""Difficulty & Obstacle Director for EMBERDASH."""

from emberdash.director.categories import (
    BUNDLE_MEMBERS,
    CATEGORY_PROFILES,
    Category,
    CategoryProfile,
    SpawnDecision,
    SpawnKind,
)
from emberdash.director.session import Phase, SessionState, derive_phase
from emberdash.director.noise import (
    RandomnessSource,
    SmoothNoise,
    SmoothNoiseSource,
    UniformSource,
    create_source,
    normalize_seed,
)
from emberdash.director.spacing import GapResult, SpacingCalculator
from emberdash.director.progression import ProgressionTracker
from emberdash.director.selector import SizeSelector
from emberdash.director.scheduler import SpawnScheduler
from emberdash.director.director import Director, HudSnapshot

__all__ = [
    # Data model
    "Category",
    "CategoryProfile",
    "CATEGORY_PROFILES",
    "BUNDLE_MEMBERS",
    "SpawnKind",
    "SpawnDecision",
    "Phase",
    "SessionState",
    "derive_phase",
    # Randomness
    "RandomnessSource",
    "SmoothNoise",
    "SmoothNoiseSource",
    "UniformSource",
    "create_source",
    "normalize_seed",
    # Components
    "SpacingCalculator",
    "GapResult",
    "ProgressionTracker",
    "SizeSelector",
    "SpawnScheduler",
    # Facade
    "Director",
    "HudSnapshot",
]
