"""Tests for spawn scheduling."""

import pytest

from conftest import build_components, build_settings
from emberdash.config.settings import ClusterSettings, SpacingSettings, SpawnSettings
from emberdash.core.events import EventType
from emberdash.director import BUNDLE_MEMBERS, Category, SessionState, SpawnKind


def instant_spawns(**groups):
    """Settings where the cooldown never blocks a tick."""
    return build_settings(
        spawn=SpawnSettings(initial_spawn_cooldown_ms=0, spawn_cooldown_base_ms=0, spawn_cooldown_floor_ms=0),
        **groups,
    )


def cluster_ready_state(**overrides) -> SessionState:
    values = dict(
        seed=0,
        small_count=10,
        small_since_non_small=5,
        cluster_unlocked=True,
        obstacles_since_last_cluster=5,
        last_obstacle_category=Category.SMALL,
        spawn_cooldown_ms=0.0,
    )
    values.update(overrides)
    return SessionState(**values)


def test_no_spawn_during_cooldown(components):
    state = SessionState(seed=0, spawn_cooldown_ms=2000.0, last_spawn_ms=0.0)

    assert components.scheduler.on_tick(1999.0, state) is None
    assert state.spawn_count == 0

    decision = components.scheduler.on_tick(2000.0, state)
    assert decision is not None
    assert decision.kind == SpawnKind.SINGLE
    assert state.last_spawn_ms == 2000.0


def test_cooldown_recomputed_from_speed(components):
    state = SessionState(seed=0, speed=5.75, spawn_cooldown_ms=0.0)
    components.scheduler.on_tick(100.0, state)
    assert state.spawn_cooldown_ms == pytest.approx(2000 / (5.75 / 5))


@pytest.mark.parametrize("speed", [0.5, 1.0, 5.0, 10.0, 20.0, 50.0, 100.0])
def test_cooldown_floor(components, speed):
    assert components.scheduler.cooldown_for(speed) >= 500


@pytest.mark.parametrize("speed", [0.0, -3.0])
def test_cooldown_degenerate_speed(components, speed):
    assert components.scheduler.cooldown_for(speed) == 500


def test_single_decision_fields(components):
    state = SessionState(seed=0, spawn_cooldown_ms=0.0)
    decision = components.scheduler.on_tick(10.0, state)

    assert decision.category == Category.SMALL
    assert decision.member_count == 1
    assert decision.gap_before_next == pytest.approx(decision.gap_units * 6.0)
    assert decision.spawned_at_ms == 10.0
    assert state.obstacles_since_last_cluster == 1
    assert state.last_gap_units == decision.gap_units


def test_bundle(components, monkeypatch):
    monkeypatch.setattr(components.selector, "choose_category", lambda state, now_ms=0.0: Category.EXTRA_LARGE)
    state = SessionState(seed=0, speed=20.0, spawn_cooldown_ms=0.0, obstacles_since_last_cluster=3)

    decision = components.scheduler.on_tick(10.0, state)

    assert decision.kind == SpawnKind.BUNDLE
    assert decision.members == BUNDLE_MEMBERS == (Category.SMALL, Category.LARGE, Category.MEDIUM)
    assert decision.telegraph
    assert state.spawn_cooldown_ms == 3000.0
    assert state.obstacles_since_last_cluster == 3
    assert state.last_gap_units is None


def test_cluster_spawns_when_all_gates_pass():
    c = build_components(build_settings(cluster=ClusterSettings(spawn_chance=1.0)))
    state = cluster_ready_state()

    decision = c.scheduler.on_tick(60000.0, state)

    assert decision.kind == SpawnKind.CLUSTER
    assert 2 <= decision.member_count <= 3
    assert set(decision.members) == {Category.SMALL}
    assert 13.5 <= decision.member_spacing <= 16.5
    assert state.obstacles_since_last_cluster == 0
    assert state.last_cluster_ms == 60000.0


def test_cluster_respects_minimum_interval():
    c = build_components(build_settings(cluster=ClusterSettings(spawn_chance=1.0)))
    state = cluster_ready_state(last_cluster_ms=56000.0)

    assert c.scheduler.on_tick(61000.0, state).kind == SpawnKind.SINGLE

    state.obstacles_since_last_cluster = 5
    state.spawn_cooldown_ms = 0.0
    assert c.scheduler.on_tick(61001.0, state).kind == SpawnKind.CLUSTER


@pytest.mark.parametrize(
    "overrides",
    [
        {"last_obstacle_category": Category.LARGE},
        {"cluster_penalty_until_ms": 60000.0},
        {"obstacles_since_last_cluster": 4},
        {"cluster_unlocked": False, "last_speed_increase_ms": 30000.0},
    ],
)
def test_cluster_blocked(overrides):
    c = build_components(build_settings(cluster=ClusterSettings(spawn_chance=1.0)))
    state = cluster_ready_state(**overrides)

    assert c.scheduler.on_tick(60000.0, state).kind != SpawnKind.CLUSTER


def test_cluster_coin_can_refuse():
    c = build_components(build_settings(cluster=ClusterSettings(spawn_chance=0.0)))
    assert c.scheduler.on_tick(60000.0, cluster_ready_state()).kind != SpawnKind.CLUSTER


def test_cluster_unlock_is_a_latch(components):
    unlocked = []
    components.event_bus.subscribe(EventType.CLUSTERS_UNLOCKED, unlocked.append)
    state = SessionState(seed=0, spawn_cooldown_ms=0.0)

    components.scheduler.on_tick(44999.0, state)
    assert not state.cluster_unlocked

    state.spawn_cooldown_ms = 0.0
    components.scheduler.on_tick(45000.0, state)
    assert state.cluster_unlocked

    state.last_speed_increase_ms = 45000.0
    state.spawn_cooldown_ms = 0.0
    components.scheduler.on_tick(46000.0, state)
    assert state.cluster_unlocked
    assert len(unlocked) == 1


def test_identical_gaps_are_broken_up():
    settings = instant_spawns(spacing=SpacingSettings(identical_gap_tolerance=100.0))
    c = build_components(settings)
    state = SessionState(seed=0, spawn_cooldown_ms=0.0)

    counts = []
    for i in range(9):
        c.scheduler.on_tick(i * 16.0, state)
        counts.append(state.consecutive_identical_gap_count)

    assert counts == [0, 1, 2, 1, 2, 1, 2, 1, 2]


def test_distinct_gaps_reset_the_counter():
    settings = instant_spawns(spacing=SpacingSettings(identical_gap_tolerance=0.0))
    c = build_components(settings)
    state = SessionState(seed=0, spawn_cooldown_ms=0.0, consecutive_identical_gap_count=1)

    c.scheduler.on_tick(0.0, state)
    c.scheduler.on_tick(16.0, state)
    assert state.consecutive_identical_gap_count == 0


def test_spawn_events_are_published(components):
    spawned = []
    components.event_bus.subscribe(EventType.OBSTACLE_SPAWNED, spawned.append)
    state = SessionState(seed=0, spawn_cooldown_ms=0.0)

    decision = components.scheduler.on_tick(5.0, state)

    assert [e.data["decision"] for e in spawned] == [decision]
