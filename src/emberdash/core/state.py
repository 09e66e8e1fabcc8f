"""
State machine for the game session lifecycle.

States:
    MENU: Start menu shown, no session running
    PLAYING: A session is running and the director is ticking
    GAME_OVER: Session ended, waiting for a retry
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Callable
import logging

logger = logging.getLogger(__name__)


class GameState(Enum):
    """Game lifecycle states."""
    MENU = auto()
    PLAYING = auto()
    GAME_OVER = auto()


@dataclass
class SessionContext:
    """Context data carried across lifecycle transitions."""
    session_number: int = 0
    seed: int | None = None
    final_score: int | None = None


Listener = Callable[[GameState, GameState, SessionContext], None]


class StateMachine:
    """
    Tracks the game lifecycle and notifies listeners of changes.

    A session can only start from MENU or GAME_OVER and only end while
    PLAYING, so a stray end or double start is rejected rather than
    corrupting the session.
    """

    VALID_TRANSITIONS: list[tuple[GameState, GameState]] = [
        (GameState.MENU, GameState.PLAYING),
        (GameState.PLAYING, GameState.GAME_OVER),
        (GameState.PLAYING, GameState.PLAYING),  # Restart mid-session
        (GameState.GAME_OVER, GameState.PLAYING),  # Retry
        (GameState.GAME_OVER, GameState.MENU),
    ]

    def __init__(self, initial_state: GameState = GameState.MENU) -> None:
        self._state = initial_state
        self._context = SessionContext()
        self._listeners: list[Listener] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)
        logger.debug(f"StateMachine initialized with state: {initial_state.name}")

    @property
    def state(self) -> GameState:
        """Get current state."""
        return self._state

    @property
    def context(self) -> SessionContext:
        """Get current context."""
        return self._context

    @property
    def is_playing(self) -> bool:
        return self._state == GameState.PLAYING

    def can_transition(self, to_state: GameState) -> bool:
        """Check if transition to given state is valid."""
        return (self._state, to_state) in self._valid_transitions

    def transition(self, to_state: GameState, **context_updates) -> bool:
        """
        Attempt to transition to a new state.

        Args:
            to_state: Target state
            **context_updates: Context fields to overwrite

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_state):
            logger.warning(
                f"Invalid transition: {self._state.name} -> {to_state.name}"
            )
            return False

        old_state = self._state
        self._state = to_state

        for key, value in context_updates.items():
            if hasattr(self._context, key):
                setattr(self._context, key, value)

        logger.debug(f"State transition: {old_state.name} -> {to_state.name}")

        for listener in self._listeners:
            try:
                listener(old_state, to_state, self._context)
            except Exception as e:
                logger.error(f"Error in state listener: {e}")

        return True

    def start_session(self, seed: int | None = None) -> bool:
        """Enter PLAYING, counting a new session."""
        return self.transition(
            GameState.PLAYING,
            session_number=self._context.session_number + 1,
            seed=seed,
            final_score=None,
        )

    def end_session(self, final_score: int) -> bool:
        """Enter GAME_OVER with the final score."""
        return self.transition(GameState.GAME_OVER, final_score=final_score)

    def add_listener(self, callback: Listener) -> None:
        """Add a state change listener."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Listener) -> None:
        """Remove a state change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def reset(self) -> None:
        """Reset state machine to the start menu."""
        old_state = self._state
        self._state = GameState.MENU
        self._context = SessionContext()

        for listener in self._listeners:
            try:
                listener(old_state, GameState.MENU, self._context)
            except Exception as e:
                logger.error(f"Error in state listener during reset: {e}")

        logger.info("StateMachine reset to MENU")
