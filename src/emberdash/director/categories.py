"""Obstacle categories and the spawn decisions handed to the presentation layer."""

from dataclasses import dataclass
from enum import Enum


class Category(Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRA_LARGE = "extra_large"


class SpawnKind(Enum):
    SINGLE = "single"
    CLUSTER = "cluster"
    BUNDLE = "bundle"


@dataclass(frozen=True)
class CategoryProfile:
    """Nominal visual size of a fire, in pixels."""
    width: int
    height: int
    font_size: int
    giant: bool = False  # Giant fires get sparks instead of a glow


CATEGORY_PROFILES: dict[Category, CategoryProfile] = {
    Category.SMALL: CategoryProfile(width=30, height=60, font_size=48),
    Category.MEDIUM: CategoryProfile(width=40, height=80, font_size=64),
    Category.LARGE: CategoryProfile(width=60, height=120, font_size=96, giant=True),
    Category.EXTRA_LARGE: CategoryProfile(width=90, height=150, font_size=120, giant=True),
}

# Sub-fires of a bundle, left to right. They share one collision envelope.
BUNDLE_MEMBERS: tuple[Category, ...] = (Category.SMALL, Category.LARGE, Category.MEDIUM)


@dataclass(frozen=True)
class SpawnDecision:
    """
    One spawn event, consumed once by the presentation layer.

    Attributes:
        kind: Single obstacle, cluster of small fires, or bundle
        category: Size category (SMALL for cluster members, EXTRA_LARGE for bundles)
        gap_before_next: Gap reserved before this obstacle, in presentation units
        gap_units: The same gap in character widths
        members: Categories of the fires making up this spawn
        member_spacing: Distance between members, in presentation units
        telegraph: True when the presentation layer should show a warning first
        spawned_at_ms: Session clock at the decision
    """
    kind: SpawnKind
    category: Category
    gap_before_next: float
    gap_units: float
    members: tuple[Category, ...] = ()
    member_spacing: float = 0.0
    telegraph: bool = False
    spawned_at_ms: float = 0.0

    @property
    def member_count(self) -> int:
        return len(self.members) if self.members else 1

    @property
    def profile(self) -> CategoryProfile:
        return CATEGORY_PROFILES[self.category]
