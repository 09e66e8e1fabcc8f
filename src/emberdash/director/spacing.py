"""Gap calculation between consecutive obstacles.

Gaps are computed in character widths ("width units"), then converted to the
presentation layer's percent-of-viewport coordinates.
"""

from dataclasses import dataclass
import logging

from emberdash.config.settings import SpacingSettings
from emberdash.director.categories import Category
from emberdash.director.noise import RandomnessSource
from emberdash.director.session import SessionState

logger = logging.getLogger(__name__)

# Base spacing ranges by fire size, in character widths
BASE_RANGES: dict[Category, tuple[float, float]] = {
    Category.SMALL: (2.0, 3.0),
    Category.MEDIUM: (3.0, 4.0),
    Category.LARGE: (4.0, 5.0),
}
DEFAULT_RANGE = (3.0, 4.0)


@dataclass(frozen=True)
class GapResult:
    """Breakdown of one gap calculation."""
    drawn: float           # Raw noise draw, width units
    variation: float       # Anti-repetition factor (1.0 if none applied)
    relieved: bool         # Near-miss relief applied
    width_units: float     # Final gap after floor clamp
    value: float           # Final gap in presentation units


class SpacingCalculator:
    """Computes the gap reserved before the next obstacle."""

    def __init__(self, settings: SpacingSettings, source: RandomnessSource):
        self.settings = settings
        self.source = source

    def base_range(self, category: Category, spacing_multiplier: float) -> tuple[float, float]:
        """Spacing bounds for a category after progression scaling."""
        min_base, max_base = BASE_RANGES.get(category, DEFAULT_RANGE)
        min_base *= spacing_multiplier
        max_base = min(max_base * spacing_multiplier, self.settings.max_gap_units)
        return min(min_base, max_base), max_base

    def measure_gap(self, category: Category, state: SessionState) -> GapResult:
        """Compute a gap and report how it was shaped.

        Consumes one noise sample, and resets the identical-gap counter and
        the missed-jump flag when they fire.
        """
        s = self.settings
        low, high = self.base_range(category, state.spacing_multiplier)
        drawn = self.source.sample_range(low, high, state)
        gap = drawn

        # Break up monotonous rhythms
        variation = 1.0
        if state.consecutive_identical_gap_count >= s.identical_gap_limit:
            variation = self.source.uniform(s.variation_min, s.variation_max)
            gap *= variation
            state.consecutive_identical_gap_count = 0
            logger.debug(f"Gap variation applied: x{variation:.3f}")

        # One-shot relief after a visible mistake, on the already-varied gap
        relieved = False
        if state.missed_last_jump:
            gap *= s.missed_jump_relief
            state.missed_last_jump = False
            relieved = True

        gap = max(gap, s.min_jump_units)

        return GapResult(
            drawn=drawn,
            variation=variation,
            relieved=relieved,
            width_units=gap,
            value=gap * s.char_width_in_percent,
        )

    def calculate_gap(self, category: Category, state: SessionState) -> float:
        """Gap before the next obstacle, in presentation units."""
        return self.measure_gap(category, state).value

    def to_units(self, value: float) -> float:
        """Convert presentation units back to character widths."""
        return value / self.settings.char_width_in_percent
