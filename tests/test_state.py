"""Tests for the game lifecycle state machine."""

from emberdash.core.state import GameState, StateMachine


def test_session_lifecycle():
    sm = StateMachine()
    assert sm.state == GameState.MENU

    assert sm.start_session(seed=4)
    assert sm.is_playing
    assert sm.context.seed == 4
    assert sm.context.session_number == 1

    assert sm.end_session(final_score=120)
    assert sm.state == GameState.GAME_OVER
    assert sm.context.final_score == 120

    assert sm.start_session(seed=5)
    assert sm.context.session_number == 2
    assert sm.context.final_score is None


def test_invalid_transition_rejected():
    sm = StateMachine()
    assert not sm.end_session(final_score=0)
    assert sm.state == GameState.MENU


def test_listeners_notified_and_isolated():
    sm = StateMachine()
    seen = []

    def broken(old, new, context):
        raise RuntimeError("boom")

    sm.add_listener(broken)
    sm.add_listener(lambda old, new, context: seen.append((old, new)))

    assert sm.start_session()
    assert seen == [(GameState.MENU, GameState.PLAYING)]

    sm.remove_listener(broken)
    sm.end_session(final_score=0)
    assert seen[-1] == (GameState.PLAYING, GameState.GAME_OVER)


def test_reset_returns_to_menu():
    sm = StateMachine()
    sm.start_session()
    sm.reset()
    assert sm.state == GameState.MENU
    assert sm.context.session_number == 0
