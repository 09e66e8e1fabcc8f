"""Core framework components for EMBERDASH."""

from .state import GameState, SessionContext, StateMachine
from .events import EventBus, Event, EventType

__all__ = ["GameState", "SessionContext", "StateMachine", "EventBus", "Event", "EventType"]
