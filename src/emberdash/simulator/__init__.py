"""Headless simulator for EMBERDASH."""

from emberdash.simulator.track import HeadlessTrack, JumpOutcome, ScriptedJumper, TrackResult

__all__ = ["HeadlessTrack", "JumpOutcome", "ScriptedJumper", "TrackResult"]
