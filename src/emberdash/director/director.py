"""Difficulty & Obstacle Director.

The presentation layer drives the director from its frame callback:

    director.start_session()
    ...
    # each frame, after reporting passes and near misses
    decision = director.tick(now_ms)
    if decision:
        spawn_visuals(decision)

The director owns one ``SessionState`` per session and never holds handles
to rendered entities.
"""

from dataclasses import dataclass
import logging
import time

from emberdash.config.settings import Settings, get_settings
from emberdash.core.events import Event, EventBus, EventType
from emberdash.core.state import GameState, StateMachine
from emberdash.director.categories import Category, SpawnDecision
from emberdash.director.noise import SEED_MASK, RandomnessSource, create_source, normalize_seed
from emberdash.director.progression import ProgressionTracker
from emberdash.director.scheduler import SpawnScheduler
from emberdash.director.selector import SizeSelector
from emberdash.director.session import Phase, SessionState
from emberdash.director.spacing import SpacingCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HudSnapshot:
    """Read-only view of the session for HUD display."""
    phase: Phase
    speed: float
    score: int
    obstacles_passed: int
    spawn_count: int
    elapsed_play_ms: float
    spacing_multiplier: float
    cluster_unlocked: bool
    playing: bool


class Director:
    """Facade tying progression, selection, spacing and scheduling together."""

    def __init__(
        self,
        settings: Settings | None = None,
        event_bus: EventBus | None = None,
        state_machine: StateMachine | None = None,
    ):
        self.settings = settings or get_settings()
        self.event_bus = event_bus
        self.state_machine = state_machine or StateMachine()

        self._state: SessionState | None = None
        self._source: RandomnessSource | None = None
        self._progression: ProgressionTracker | None = None
        self._selector: SizeSelector | None = None
        self._calculator: SpacingCalculator | None = None
        self._scheduler: SpawnScheduler | None = None

    # Lifecycle

    def start_session(self, seed: int | None = None, now_ms: float = 0.0) -> SessionState:
        """Discard any running session and start a fresh one."""
        if seed is None:
            # Derived from the wall clock at session start
            seed = int(time.time() * 1000) & SEED_MASK
        else:
            seed = normalize_seed(seed)

        s = self.settings
        self._source = create_source(s.randomness, seed, s.spacing.noise_step_scale)
        self._progression = ProgressionTracker(s.speed, s.spacing, self._source, self.event_bus)
        self._selector = SizeSelector(self._progression)
        self._calculator = SpacingCalculator(s.spacing, self._source)
        self._scheduler = SpawnScheduler(
            s.spawn, s.cluster, s.spacing,
            self._selector, self._calculator, self._source, self.event_bus,
        )

        self._state = SessionState(
            seed=seed,
            session_start_ms=now_ms,
            last_tick_ms=now_ms,
            speed=s.speed.initial_speed,
            last_speed_increase_ms=now_ms,
            last_spacing_increase_ms=now_ms,
            spawn_cooldown_ms=s.spawn.initial_spawn_cooldown_ms,
            last_spawn_ms=now_ms,
        )

        self.state_machine.start_session(seed)
        logger.info(f"Session started (seed={seed}, randomness={self._source.name})")
        self._emit(EventType.SESSION_STARTED, now_ms, seed=seed)
        return self._state

    def end_session(self, now_ms: float | None = None) -> None:
        """Stop the running session. Its state stays readable until the next start."""
        state = self._state
        if state is None or not state.playing:
            return

        if now_ms is not None and now_ms >= state.session_start_ms:
            state.elapsed_play_ms = now_ms - state.session_start_ms
        state.playing = False

        self.state_machine.end_session(state.score)
        logger.info(
            f"Session ended: score={state.score} passed={state.obstacles_passed} "
            f"spawned={state.spawn_count} elapsed={state.elapsed_play_ms / 1000:.1f}s"
        )
        self._emit(EventType.SESSION_ENDED, state.last_tick_ms or 0.0, score=state.score)

    def return_to_menu(self) -> bool:
        """Leave the game-over screen. The finished session stays readable."""
        if self.is_playing:
            self.end_session()
        return self.state_machine.transition(GameState.MENU)

    def reset(self) -> None:
        """Drop the session entirely and go back to the start menu."""
        if self.is_playing:
            self.end_session()
        self._state = None
        self._source = None
        self._progression = None
        self._selector = None
        self._calculator = None
        self._scheduler = None
        self.state_machine.reset()
        logger.info("Director reset")

    # Per-frame entry point

    def tick(self, now_ms: float) -> SpawnDecision | None:
        """Advance the session clock and poll the spawn scheduler.

        Args:
            now_ms: Session clock; must never go backwards

        Returns:
            The spawn decided for this tick, if any
        """
        state = self._state
        if state is None or not state.playing:
            return None

        if state.last_tick_ms is not None and now_ms < state.last_tick_ms:
            raise ValueError(f"Non-monotonic tick: {now_ms} after {state.last_tick_ms}")

        state.last_tick_ms = now_ms
        state.elapsed_play_ms = now_ms - state.session_start_ms

        self._progression.advance(state, now_ms)
        return self._scheduler.on_tick(now_ms, state)

    # Feedback from the presentation layer

    def report_obstacle_passed(self, category: Category | str) -> None:
        """The player got past a previously spawned fire."""
        category = Category(category)
        state = self._state
        if state is None or not state.playing:
            logger.debug(f"Ignoring pass of {category.value} outside a session")
            return

        now_ms = state.last_tick_ms or 0.0
        self._progression.record_passed(state, category, self.settings.score_per_obstacle, now_ms)
        self._emit(EventType.OBSTACLE_PASSED, now_ms, category=category, score=state.score)

    def report_near_miss(self) -> None:
        """The player barely made a jump. Eases the next gap and holds off clusters."""
        state = self._state
        if state is None or not state.playing:
            return

        now_ms = state.last_tick_ms or 0.0
        state.missed_last_jump = True
        state.near_misses += 1
        state.cluster_penalty_until_ms = now_ms + self.settings.cluster.penalty_ms
        logger.debug(f"Near miss #{state.near_misses}")
        self._emit(EventType.NEAR_MISS, now_ms)

    # Read-only views

    @property
    def state(self) -> SessionState | None:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is not None and self._state.playing

    @property
    def phase(self) -> Phase:
        return self._state.phase if self._state else Phase.INITIAL

    @property
    def speed(self) -> float:
        return self._state.speed if self._state else self.settings.speed.initial_speed

    @property
    def score(self) -> int:
        return self._state.score if self._state else 0

    def snapshot(self) -> HudSnapshot:
        """Current HUD values."""
        state = self._state or SessionState(seed=0, playing=False, speed=self.settings.speed.initial_speed)
        return HudSnapshot(
            phase=state.phase,
            speed=state.speed,
            score=state.score,
            obstacles_passed=state.obstacles_passed,
            spawn_count=state.spawn_count,
            elapsed_play_ms=state.elapsed_play_ms,
            spacing_multiplier=state.spacing_multiplier,
            cluster_unlocked=state.cluster_unlocked,
            playing=state.playing,
        )

    def _emit(self, event_type: EventType, now_ms: float, **data) -> None:
        if self.event_bus:
            self.event_bus.emit(Event(event_type, data=data, source="director", timestamp=now_ms))
