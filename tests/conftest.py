"""Shared fixtures for director tests."""

from dataclasses import dataclass

import pytest

from emberdash.config.settings import Settings
from emberdash.core.events import EventBus
from emberdash.director import (
    ProgressionTracker,
    SessionState,
    SizeSelector,
    SpacingCalculator,
    SpawnScheduler,
    create_source,
)


@dataclass
class Components:
    source: object
    progression: ProgressionTracker
    selector: SizeSelector
    calculator: SpacingCalculator
    scheduler: SpawnScheduler
    event_bus: EventBus


def build_settings(**groups) -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, **groups)


def build_components(settings: Settings, seed: int = 7) -> Components:
    event_bus = EventBus()
    source = create_source(settings.randomness, seed, settings.spacing.noise_step_scale)
    progression = ProgressionTracker(settings.speed, settings.spacing, source, event_bus)
    selector = SizeSelector(progression)
    calculator = SpacingCalculator(settings.spacing, source)
    scheduler = SpawnScheduler(
        settings.spawn, settings.cluster, settings.spacing,
        selector, calculator, source, event_bus,
    )
    return Components(source, progression, selector, calculator, scheduler, event_bus)


def full_challenge_state(**overrides) -> SessionState:
    """State past the ramp-up, with bundles allowed."""
    values = dict(seed=0, small_count=10, medium_cleared=5, large_cleared=5, small_since_non_small=2)
    values.update(overrides)
    return SessionState(**values)


@pytest.fixture
def settings() -> Settings:
    return build_settings()


@pytest.fixture
def components(settings) -> Components:
    return build_components(settings)


@pytest.fixture
def state() -> SessionState:
    return SessionState(seed=0)
