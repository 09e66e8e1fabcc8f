"""Spawn scheduling: decides once per tick whether anything spawns.

Per tick the scheduler is either cooling down (no-op) or ready. When ready it
emits exactly one of:

    CLUSTER  2-3 small fires in a quick run, when all cluster gates pass
    BUNDLE   small+large+medium under one envelope, when the selector rolls
             EXTRA_LARGE; followed by a longer cooldown
    SINGLE   one fire of the selected category
"""

import logging

from emberdash.config.settings import ClusterSettings, SpacingSettings, SpawnSettings
from emberdash.core.events import Event, EventBus, EventType
from emberdash.director.categories import BUNDLE_MEMBERS, Category, SpawnDecision, SpawnKind
from emberdash.director.noise import RandomnessSource
from emberdash.director.selector import SizeSelector
from emberdash.director.session import SessionState
from emberdash.director.spacing import SpacingCalculator

logger = logging.getLogger(__name__)

_SPAWN_EVENTS = {
    SpawnKind.SINGLE: EventType.OBSTACLE_SPAWNED,
    SpawnKind.CLUSTER: EventType.CLUSTER_SPAWNED,
    SpawnKind.BUNDLE: EventType.BUNDLE_SPAWNED,
}


class SpawnScheduler:
    """Top-level spawn orchestrator."""

    def __init__(
        self,
        spawn: SpawnSettings,
        cluster: ClusterSettings,
        spacing: SpacingSettings,
        selector: SizeSelector,
        calculator: SpacingCalculator,
        source: RandomnessSource,
        event_bus: EventBus | None = None,
    ):
        self.spawn = spawn
        self.cluster = cluster
        self.spacing = spacing
        self.selector = selector
        self.calculator = calculator
        self.source = source
        self.event_bus = event_bus

    def cooldown_for(self, speed: float) -> float:
        """Spawn cooldown at a given speed. Faster game, shorter cooldown."""
        floor = self.spawn.spawn_cooldown_floor_ms
        if speed <= 0:
            return floor
        return max(floor, self.spawn.spawn_cooldown_base_ms / (speed / self.spawn.reference_speed))

    def is_ready(self, now_ms: float, state: SessionState) -> bool:
        return now_ms - state.last_spawn_ms >= state.spawn_cooldown_ms

    def on_tick(self, now_ms: float, state: SessionState) -> SpawnDecision | None:
        """Run one scheduling step. Returns the spawn, if any."""
        if not self.is_ready(now_ms, state):
            return None

        self._check_cluster_unlock(now_ms, state)

        if self._cluster_eligible(now_ms, state):
            decision = self._spawn_cluster(now_ms, state)
        else:
            category = self.selector.choose_category(state, now_ms)
            if category == Category.EXTRA_LARGE:
                decision = self._spawn_bundle(now_ms, state)
            else:
                decision = self._spawn_single(category, now_ms, state)

        state.last_spawn_ms = now_ms
        state.spawn_count += 1
        state.spawn_cooldown_ms = self.cooldown_for(state.speed)
        if decision.kind == SpawnKind.BUNDLE:
            state.spawn_cooldown_ms = max(state.spawn_cooldown_ms, self.spawn.bundle_cooldown_ms)

        logger.debug(
            f"Spawn #{state.spawn_count}: {decision.kind.value} {decision.category.value} "
            f"gap={decision.gap_units:.2f}u cooldown={state.spawn_cooldown_ms:.0f}ms"
        )
        self._emit(_SPAWN_EVENTS[decision.kind], now_ms, decision=decision)
        return decision

    def _check_cluster_unlock(self, now_ms: float, state: SessionState) -> None:
        if state.cluster_unlocked:
            return
        if now_ms - state.last_speed_increase_ms >= self.cluster.unlock_after_ms:
            state.cluster_unlocked = True
            logger.info("Clusters unlocked")
            self._emit(EventType.CLUSTERS_UNLOCKED, now_ms)

    def _cluster_eligible(self, now_ms: float, state: SessionState) -> bool:
        c = self.cluster
        return (
            state.cluster_unlocked
            and state.obstacles_since_last_cluster >= c.min_obstacles_between
            and self.source.random() < c.spawn_chance
            and now_ms - state.last_cluster_ms > c.min_interval_ms
            and state.last_obstacle_category != Category.LARGE  # No clusters right after large fires
            and now_ms > state.cluster_penalty_until_ms
        )

    def _spawn_cluster(self, now_ms: float, state: SessionState) -> SpawnDecision:
        c = self.cluster
        count = self.source.integers(c.min_members, max(c.min_members, c.max_members))
        member_spacing = c.member_spacing * self.source.uniform(0.9, 1.1)
        gap = self.calculator.measure_gap(Category.SMALL, state)

        state.obstacles_since_last_cluster = 0
        state.last_cluster_ms = now_ms

        return SpawnDecision(
            kind=SpawnKind.CLUSTER,
            category=Category.SMALL,
            gap_before_next=gap.value,
            gap_units=gap.width_units,
            members=(Category.SMALL,) * count,
            member_spacing=member_spacing,
            spawned_at_ms=now_ms,
        )

    def _spawn_bundle(self, now_ms: float, state: SessionState) -> SpawnDecision:
        gap = self.calculator.measure_gap(Category.EXTRA_LARGE, state)
        logger.info(f"Bundle spawned at {now_ms:.0f}ms")

        return SpawnDecision(
            kind=SpawnKind.BUNDLE,
            category=Category.EXTRA_LARGE,
            gap_before_next=gap.value,
            gap_units=gap.width_units,
            members=BUNDLE_MEMBERS,
            telegraph=True,
            spawned_at_ms=now_ms,
        )

    def _spawn_single(self, category: Category, now_ms: float, state: SessionState) -> SpawnDecision:
        gap = self.calculator.measure_gap(category, state)

        # Track repeated gaps so the next calculation can break the rhythm
        if (
            state.last_gap_units is not None
            and abs(state.last_gap_units - gap.width_units) < self.spacing.identical_gap_tolerance
        ):
            state.consecutive_identical_gap_count += 1
        else:
            state.consecutive_identical_gap_count = 0
        state.last_gap_units = gap.width_units
        state.obstacles_since_last_cluster += 1

        return SpawnDecision(
            kind=SpawnKind.SINGLE,
            category=category,
            gap_before_next=gap.value,
            gap_units=gap.width_units,
            spawned_at_ms=now_ms,
        )

    def _emit(self, event_type: EventType, now_ms: float, **data) -> None:
        if self.event_bus:
            self.event_bus.emit(Event(event_type, data=data, source="scheduler", timestamp=now_ms))
