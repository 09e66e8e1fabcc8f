"""Tests for the headless track and simulator entry point."""

import json

import pytest

from conftest import build_settings
from emberdash.director import CATEGORY_PROFILES, Category, Director, SpawnDecision, SpawnKind
from emberdash.simulator.main import parse_args, run
from emberdash.simulator.track import HeadlessTrack, JumpOutcome, ScriptedJumper


def make_track(skill: float, seed: int = 1) -> HeadlessTrack:
    director = Director(settings=build_settings())
    return HeadlessTrack(director, ScriptedJumper(skill=skill, seed=seed))


def test_perfect_jumper_survives():
    track = make_track(skill=1.0)
    result = track.run(60000.0, seed=21)

    assert not result.collided
    assert result.passed > 0
    assert result.score == result.passed * 10
    assert result.spawned == len(result.decisions)
    assert not track.director.is_playing


def test_hopeless_jumper_crashes_on_first_fire():
    track = make_track(skill=0.0)
    result = track.run(60000.0, seed=21)

    assert result.collided
    assert result.passed == 0
    assert result.duration_ms < 60000.0
    assert not track.director.is_playing


def test_cluster_members_are_placed_apart():
    track = make_track(skill=1.0)
    track.place(SpawnDecision(
        kind=SpawnKind.CLUSTER,
        category=Category.SMALL,
        gap_before_next=12.0,
        gap_units=2.0,
        members=(Category.SMALL,) * 3,
        member_spacing=15.0,
    ))

    assert [o.x for o in track.obstacles] == [117.0, 132.0, 147.0]
    assert [o.width for o in track.obstacles] == pytest.approx([3.0, 3.0, 3.0])


def test_bundle_is_one_obstacle():
    track = make_track(skill=1.0)
    track.place(SpawnDecision(
        kind=SpawnKind.BUNDLE,
        category=Category.EXTRA_LARGE,
        gap_before_next=20.0,
        gap_units=3.3,
        members=(Category.SMALL, Category.LARGE, Category.MEDIUM),
        telegraph=True,
    ))

    assert len(track.obstacles) == 1
    assert track.obstacles[0].category == Category.EXTRA_LARGE
    assert track.obstacles[0].width == pytest.approx(9.0)


def test_jumper_outcomes():
    assert ScriptedJumper(skill=0.0).attempt(Category.SMALL) == JumpOutcome.HIT
    assert ScriptedJumper(skill=1.0, near_miss_share=0.0).attempt(Category.LARGE) == JumpOutcome.CLEARED
    assert ScriptedJumper(skill=1.0, near_miss_share=1.0).attempt(Category.LARGE) == JumpOutcome.NEAR_MISS


def test_result_serializes():
    result = make_track(skill=1.0).run(10000.0, seed=3)
    data = json.loads(json.dumps(result.to_dict()))

    assert data["seed"] == 3
    assert len(data["decisions"]) == result.spawned


def test_parse_args_defaults():
    args = parse_args([])
    assert args.seconds == 120.0
    assert args.randomness is None
    assert not args.debug


def test_category_profiles_grow_with_size():
    sizes = [(p.width, p.height, p.font_size) for p in (CATEGORY_PROFILES[c] for c in Category)]
    assert sizes == [(30, 60, 48), (40, 80, 64), (60, 120, 96), (90, 150, 120)]
    assert [CATEGORY_PROFILES[c].giant for c in Category] == [False, False, True, True]


def test_pass_waits_for_the_whole_fire():
    track = make_track(skill=1.0)
    track.director.start_session(seed=2)
    track.place(SpawnDecision(
        kind=SpawnKind.SINGLE,
        category=Category.LARGE,
        gap_before_next=0.0,
        gap_units=0.0,
    ))
    fire = track.obstacles[0]
    fire.x = track.PASS_X - 1.0
    fire.jumped = True

    track.step(16.0)
    assert not fire.passed

    fire.x = track.PASS_X - fire.width - 1.0
    track.step(32.0)
    assert fire.passed
    assert track.director.state.obstacles_passed == 1


def test_simulation_accepts_negative_seed():
    args = parse_args(["--seconds", "5", "--seed", "-1", "--skill", "1.0"])
    result = run(args)

    assert result.seed == 0xFFFFFFFF
    assert not result.collided
