"""Randomness sources for spacing and spawn draws.

Two interchangeable strategies sit behind ``RandomnessSource``:

- ``SmoothNoiseSource`` samples 1D lattice noise blended with a quintic fade,
  so consecutive gaps drift instead of jumping around.
- ``UniformSource`` draws each gap independently. Simpler, but consecutive
  gaps have no continuity.

Both own a seeded numpy generator for coin flips and weighted draws, so a
session seed reproduces every decision.
"""

from abc import ABC, abstractmethod
import math
import logging

import numpy as np

from emberdash.director.session import SessionState

logger = logging.getLogger(__name__)

# Cursor step. Irrational so the cursor never lands on a short cycle of
# lattice offsets.
GOLDEN_RATIO_CONJUGATE = (math.sqrt(5.0) - 1.0) / 2.0

# Seeds are folded into 32 bits so any integer, negative included, is usable
SEED_MASK = 0xFFFFFFFF


def normalize_seed(seed: int) -> int:
    """Fold an arbitrary integer seed into the non-negative range numpy accepts."""
    return int(seed) & SEED_MASK


class SmoothNoise:
    """Seeded 1D value noise with C2-continuous interpolation."""

    TABLE_SIZE = 256

    def __init__(self, seed: int | np.random.SeedSequence):
        rng = np.random.default_rng(seed)
        self._perm = rng.permutation(self.TABLE_SIZE)
        self._values = rng.uniform(-1.0, 1.0, self.TABLE_SIZE)

    @staticmethod
    def _fade(t: float) -> float:
        """Quintic smoothstep 6t^5 - 15t^4 + 10t^3."""
        return t * t * t * (t * (t * 6 - 15) + 10)

    def _lattice(self, i: int) -> float:
        """Pseudo-random value in [-1, 1] at an integer lattice point."""
        mask = self.TABLE_SIZE - 1
        h = self._perm[(self._perm[i & mask] + (i >> 8)) & mask]
        return float(self._values[h])

    def sample(self, index: float) -> float:
        """Noise value in [-1, 1] at a position on the line."""
        x0 = math.floor(index)
        t = index - x0
        a = self._lattice(x0)
        b = self._lattice(x0 + 1)
        return a + self._fade(t) * (b - a)


class RandomnessSource(ABC):
    """Capability for every random number the director needs."""

    name: str = "base"

    def __init__(self, seed: int, step: float = GOLDEN_RATIO_CONJUGATE):
        self.seed = seed
        self.step = step
        noise_seq, draw_seq = np.random.SeedSequence(seed).spawn(2)
        self._noise_seed = noise_seq
        self._rng = np.random.default_rng(draw_seq)

    @abstractmethod
    def sample_range(self, low: float, high: float, state: SessionState) -> float:
        """Value in [low, high] for spacing, advancing the session's cursor."""

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return float(self._rng.random())

    def uniform(self, low: float, high: float) -> float:
        """Uniform float in [low, high)."""
        return float(self._rng.uniform(low, high))

    def integers(self, low: int, high: int) -> int:
        """Uniform int in [low, high], inclusive."""
        return int(self._rng.integers(low, high, endpoint=True))


class SmoothNoiseSource(RandomnessSource):
    name = "smooth"

    def __init__(self, seed: int, step: float = GOLDEN_RATIO_CONJUGATE):
        super().__init__(seed, step)
        self.noise = SmoothNoise(self._noise_seed)

    def sample_range(self, low: float, high: float, state: SessionState) -> float:
        value = self.noise.sample(state.noise_index)
        state.noise_index += self.step
        return low + (value + 1.0) / 2.0 * (high - low)


class UniformSource(RandomnessSource):
    name = "uniform"

    def sample_range(self, low: float, high: float, state: SessionState) -> float:
        state.noise_index += self.step
        return low + self.random() * (high - low)


def create_source(kind: str, seed: int, step_scale: float = 1.0) -> RandomnessSource:
    """Build the configured randomness source for a session."""
    step = GOLDEN_RATIO_CONJUGATE * step_scale
    if kind == "smooth":
        return SmoothNoiseSource(seed, step)
    if kind == "uniform":
        return UniformSource(seed, step)
    raise ValueError(f"Unknown randomness source: {kind}")
