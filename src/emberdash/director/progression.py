"""Progression tracking: phase rules, counters, and time-based escalation.

Phases only ever move forward:

    INITIAL        first 10 fires, all small
    RAMP_UP        small/medium mix until 5 medium fires are cleared
    FULL_CHALLENGE full mix; bundles once 5 large fires are cleared

Counters of cleared fires only move when the presentation layer reports a
pass, never on spawn.
"""

import logging

from emberdash.config.settings import SpacingSettings, SpeedSettings
from emberdash.core.events import Event, EventBus, EventType
from emberdash.director.categories import Category
from emberdash.director.noise import RandomnessSource
from emberdash.director.session import EXTRA_LARGE_LARGE_CLEARED, Phase, SessionState

logger = logging.getLogger(__name__)

RAMP_UP_WEIGHTS: tuple[tuple[Category, float], ...] = (
    (Category.SMALL, 0.75),
    (Category.MEDIUM, 0.25),
)

FULL_CHALLENGE_WEIGHTS: tuple[tuple[Category, float], ...] = (
    (Category.SMALL, 0.40),
    (Category.MEDIUM, 0.25),
    (Category.LARGE, 0.20),
    (Category.EXTRA_LARGE, 0.15),
)


class ProgressionTracker:
    """Applies phase rules and escalates speed and spacing over time."""

    def __init__(
        self,
        speed: SpeedSettings,
        spacing: SpacingSettings,
        source: RandomnessSource,
        event_bus: EventBus | None = None,
    ):
        self.speed = speed
        self.spacing = spacing
        self.source = source
        self.event_bus = event_bus

    def _weighted_draw(self, weights: tuple[tuple[Category, float], ...]) -> Category:
        roll = self.source.random() * sum(w for _, w in weights)
        cumulative = 0.0
        for category, weight in weights:
            cumulative += weight
            if roll < cumulative:
                return category
        return weights[-1][0]

    def draw_category(self, state: SessionState) -> Category:
        """Category allowed by the current phase, before the separation gate."""
        phase = state.phase
        if phase == Phase.INITIAL:
            return Category.SMALL

        if phase == Phase.RAMP_UP:
            return self._weighted_draw(RAMP_UP_WEIGHTS)

        category = self._weighted_draw(FULL_CHALLENGE_WEIGHTS)
        if category == Category.EXTRA_LARGE and state.large_cleared < EXTRA_LARGE_LARGE_CLEARED:
            category = Category.LARGE
        return category

    def record_choice(self, state: SessionState, category: Category, now_ms: float) -> None:
        """Advance counters for a chosen category."""
        before = state.phase

        if category == Category.SMALL:
            state.small_count += 1
            state.small_since_non_small += 1
        else:
            state.small_since_non_small = 0

        self._check_phase(state, before, now_ms)

    def record_passed(self, state: SessionState, category: Category, points: int, now_ms: float) -> None:
        """Count a fire the player got past."""
        before = state.phase

        state.obstacles_passed += 1
        state.score += points
        if category == Category.MEDIUM:
            state.medium_cleared += 1
        elif category == Category.LARGE:
            state.large_cleared += 1

        self._check_phase(state, before, now_ms)

    def _check_phase(self, state: SessionState, before: Phase, now_ms: float) -> None:
        after = state.phase
        if after == before:
            return
        logger.info(
            f"Phase {before.name} -> {after.name} "
            f"(small={state.small_count}, medium_cleared={state.medium_cleared})"
        )
        self._emit(EventType.PHASE_CHANGED, now_ms, old=before, new=after)

    def advance(self, state: SessionState, now_ms: float) -> None:
        """Apply speed and spacing escalation due by ``now_ms``."""
        if now_ms - state.last_speed_increase_ms >= self.speed.speed_increase_interval_ms:
            state.speed *= self.speed.speed_multiplier
            state.last_speed_increase_ms = now_ms
            logger.info(f"Speed increased to {state.speed:.2f}")
            self._emit(EventType.SPEED_INCREASED, now_ms, speed=state.speed)

        if now_ms - state.last_spacing_increase_ms >= self.spacing.spacing_increase_interval_ms:
            state.last_spacing_increase_ms = now_ms
            if state.spacing_multiplier < self.spacing.spacing_multiplier_max:
                state.spacing_multiplier = min(
                    state.spacing_multiplier + self.spacing.spacing_increase_amount,
                    self.spacing.spacing_multiplier_max,
                )
                logger.info(f"Spacing multiplier increased to {state.spacing_multiplier:.2f}")
                self._emit(EventType.SPACING_INCREASED, now_ms, multiplier=state.spacing_multiplier)

    def _emit(self, event_type: EventType, now_ms: float, **data) -> None:
        if self.event_bus:
            self.event_bus.emit(Event(event_type, data=data, source="progression", timestamp=now_ms))
