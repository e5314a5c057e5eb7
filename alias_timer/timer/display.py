"""
Text helpers for rendering a TimerState.

Front ends get these values inside every snapshot so they never have to
duplicate the labelling rules.
"""

from typing import Dict, Any

from .state import TimerState, Phase, Mode

DANGER_SECONDS = 5
WARNING_SECONDS = 10


def format_time(seconds: int) -> str:
    """Format seconds as M:SS."""
    seconds = max(0, seconds)
    mins, secs = divmod(seconds, 60)
    return f"{mins}:{secs:02d}"


def urgency(seconds: int) -> str:
    if seconds <= DANGER_SECONDS:
        return 'danger'
    if seconds <= WARNING_SECONDS:
        return 'warning'
    return 'active'


def phase_label(state: TimerState) -> str:
    if state.mode is Mode.SPECIAL:
        return f"Word {state.current_word}"
    if state.phase is Phase.TURN:
        return "Explaining"
    return "Guessing"


def primary_action_label(state: TimerState) -> str:
    """Label of the start/pause button."""
    if state.is_running:
        return "Pause"
    if state.is_finished:
        return "New turn"
    if state.mode is Mode.SPECIAL:
        return "Special turn"
    if state.phase is Phase.TURN:
        return "Turn"
    return "Guessing"


def mode_toggle_label(state: TimerState) -> str:
    return "Special turn" if state.mode is Mode.REGULAR else "Regular turn"


def build_snapshot(state: TimerState) -> Dict[str, Any]:
    """Observable state plus the display fields."""
    snapshot = state.to_dict()
    snapshot.update({
        'display_time': format_time(state.current_time),
        'urgency': urgency(state.current_time),
        'phase_label': phase_label(state),
        'primary_action_label': primary_action_label(state),
        'mode_toggle_label': mode_toggle_label(state),
        'can_next_word': state.mode is Mode.SPECIAL,
    })
    return snapshot
