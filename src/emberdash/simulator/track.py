"""Headless track: a stand-in presentation layer for the director.

Moves spawned fires across a percent-of-viewport track, lets a scripted
jumper decide each jump, and feeds passes, near misses and collisions back
to the director the way a rendered game would.
"""

from dataclasses import dataclass, field
from enum import Enum
import logging

import numpy as np

from emberdash.director import CATEGORY_PROFILES, Category, Director, SpawnDecision, SpawnKind

logger = logging.getLogger(__name__)


class JumpOutcome(Enum):
    CLEARED = "cleared"
    NEAR_MISS = "near_miss"
    HIT = "hit"


# How much harder each size is to clear, relative to a small fire
SIZE_DIFFICULTY: dict[Category, float] = {
    Category.SMALL: 1.0,
    Category.MEDIUM: 1.5,
    Category.LARGE: 2.5,
    Category.EXTRA_LARGE: 3.5,
}


@dataclass
class TrackObstacle:
    x: float
    category: Category
    kind: SpawnKind
    width: float = 0.0  # Collision envelope, percent of viewport
    passed: bool = False
    jumped: bool = False


@dataclass
class TrackResult:
    """Summary of one simulated run."""
    seed: int
    duration_ms: float
    score: int
    spawned: int
    passed: int
    near_misses: int
    collided: bool
    final_speed: float
    final_phase: str
    decisions: list[SpawnDecision] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "duration_ms": round(self.duration_ms, 1),
            "score": self.score,
            "spawned": self.spawned,
            "passed": self.passed,
            "near_misses": self.near_misses,
            "collided": self.collided,
            "final_speed": round(self.final_speed, 3),
            "final_phase": self.final_phase,
            "decisions": [
                {
                    "t_ms": round(d.spawned_at_ms, 1),
                    "kind": d.kind.value,
                    "category": d.category.value,
                    "gap_units": round(d.gap_units, 3),
                    "members": [m.value for m in d.members],
                }
                for d in self.decisions
            ],
        }


class ScriptedJumper:
    """Stand-in player with a fixed skill level.

    Args:
        skill: Chance of a clean jump over a small fire (0..1)
        near_miss_share: Share of successful jumps that are near misses
        seed: Seed for the jumper's own generator
    """

    def __init__(self, skill: float = 0.97, near_miss_share: float = 0.1, seed: int | None = None):
        self.skill = skill
        self.near_miss_share = near_miss_share
        self._rng = np.random.default_rng(seed)

    def attempt(self, category: Category) -> JumpOutcome:
        hit_chance = min(1.0, (1.0 - self.skill) * SIZE_DIFFICULTY[category])
        if self._rng.random() < hit_chance:
            return JumpOutcome.HIT
        if self._rng.random() < self.near_miss_share:
            return JumpOutcome.NEAR_MISS
        return JumpOutcome.CLEARED


class HeadlessTrack:
    """Fixed-step frame loop around a director."""

    SPAWN_X = 105.0    # Fires enter just past the right edge
    JUMP_X = 25.0      # Jump resolves when a fire reaches the player
    PASS_X = 15.0      # Pass line
    DESPAWN_X = -10.0
    VIEWPORT_PX = 1000.0  # Reference width the pixel profiles are drawn for

    def __init__(self, director: Director, jumper: ScriptedJumper, frame_ms: float = 1000.0 / 60.0):
        self.director = director
        self.jumper = jumper
        self.frame_ms = frame_ms
        self.obstacles: list[TrackObstacle] = []
        self.decisions: list[SpawnDecision] = []
        self.collided = False

    def envelope(self, category: Category) -> float:
        """Width of a fire on the track, from its nominal pixel size."""
        return CATEGORY_PROFILES[category].width / self.VIEWPORT_PX * 100.0

    def place(self, decision: SpawnDecision) -> None:
        """Instantiate the fires for one spawn decision."""
        x = self.SPAWN_X + decision.gap_before_next
        if decision.kind == SpawnKind.CLUSTER:
            for i, member in enumerate(decision.members):
                self.obstacles.append(TrackObstacle(
                    x=x + i * decision.member_spacing,
                    category=member,
                    kind=decision.kind,
                    width=self.envelope(member),
                ))
        else:
            # Bundles share one collision envelope, so they are one obstacle
            self.obstacles.append(TrackObstacle(
                x=x,
                category=decision.category,
                kind=decision.kind,
                width=self.envelope(decision.category),
            ))

    def step(self, now_ms: float) -> bool:
        """Advance one frame. Returns False once the player has crashed."""
        speed = self.director.speed

        for obs in self.obstacles:
            obs.x -= speed / 10

            if not obs.jumped and obs.x <= self.JUMP_X:
                obs.jumped = True
                outcome = self.jumper.attempt(obs.category)
                if outcome == JumpOutcome.HIT:
                    logger.info(f"Hit a {obs.category.value} fire at {now_ms / 1000:.1f}s")
                    self.collided = True
                    self.director.end_session(now_ms)
                    return False
                if outcome == JumpOutcome.NEAR_MISS:
                    self.director.report_near_miss()

            if not obs.passed and obs.x + obs.width < self.PASS_X:
                obs.passed = True
                self.director.report_obstacle_passed(obs.category)

        self.obstacles = [o for o in self.obstacles if o.x >= self.DESPAWN_X]

        # Feedback is in; now poll for the next spawn
        decision = self.director.tick(now_ms)
        if decision:
            self.decisions.append(decision)
            self.place(decision)
        return True

    def run(self, duration_ms: float, seed: int | None = None) -> TrackResult:
        """Play one session until the player crashes or time runs out."""
        state = self.director.start_session(seed=seed, now_ms=0.0)
        self.obstacles.clear()
        self.decisions.clear()
        self.collided = False

        now_ms = 0.0
        while now_ms < duration_ms:
            now_ms += self.frame_ms
            if not self.step(now_ms):
                break
        else:
            self.director.end_session(now_ms)

        return TrackResult(
            seed=state.seed,
            duration_ms=state.elapsed_play_ms,
            score=state.score,
            spawned=state.spawn_count,
            passed=state.obstacles_passed,
            near_misses=state.near_misses,
            collided=self.collided,
            final_speed=state.speed,
            final_phase=state.phase.value,
            decisions=list(self.decisions),
        )
