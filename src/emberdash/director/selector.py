"""Size selection for the next obstacle."""

import logging

from emberdash.director.categories import Category
from emberdash.director.progression import ProgressionTracker
from emberdash.director.session import SessionState

logger = logging.getLogger(__name__)

# Small fires required between two bigger ones
MIN_SMALL_SEPARATION = 2


class SizeSelector:
    """Chooses the category of the next obstacle.

    ``choose_category`` is not idempotent: each call is an independent draw
    and advances the progression counters. Call it exactly once per spawn.
    """

    def __init__(self, progression: ProgressionTracker):
        self.progression = progression

    def choose_category(self, state: SessionState, now_ms: float = 0.0) -> Category:
        if state.small_since_non_small < MIN_SMALL_SEPARATION:
            category = Category.SMALL
        else:
            category = self.progression.draw_category(state)

        self.progression.record_choice(state, category, now_ms)

        # Bundles do not count as the previous single obstacle
        if category != Category.EXTRA_LARGE:
            state.last_obstacle_category = category

        logger.debug(f"Chose {category.value} in {state.phase.name}")
        return category
