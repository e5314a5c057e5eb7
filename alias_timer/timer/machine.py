"""
Timer state machine.

Every handler is a pure function taking the current TimerState and
TimerSettings and returning the next state together with a TimerResponse.
The response lists the side effects (audio cues, notifications) that the
caller is expected to carry out. Nothing in this module touches audio,
threads or sockets.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Any, List, Optional, Tuple, Callable

from .state import TimerState, TimerSettings, Phase, Mode, WORDS_PER_CYCLE


# Countdown values (after decrement) that trigger the warning beep
WARNING_THRESHOLD = 5


class Cue(Enum):
    """Audio cue intents."""
    WARNING = "warning"
    BUZZER = "buzzer"


class NotificationKind(Enum):
    GUESS_PHASE_STARTING = "guess_phase_starting"
    TURN_ENDED_REGULAR = "turn_ended_regular"
    TURN_ENDED_SPECIAL = "turn_ended_special"


@dataclass
class Notification:
    """
    A phase/finish event for the presentation layer.

    Attributes:
        kind: What happened
        title: Short headline for a toast
        description: One line of instructions for the players
        data: Interpolated values (e.g. guess_time)
    """
    kind: NotificationKind
    title: str
    description: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            'kind': self.kind.value,
            'title': self.title,
            'description': self.description,
        }
        payload.update(self.data)
        return payload


@dataclass
class TimerResponse:
    """
    Side-effect intents produced by a transition.

    The TimerController carries them out after the new state is stored.

    Attributes:
        cues: Audio cues to play, in order
        notifications: Events to surface to the players
        error: Error payload for the sender (unknown command)
    """
    cues: List[Cue] = field(default_factory=list)
    notifications: List[Notification] = field(default_factory=list)
    error: Dict[str, Any] = field(default_factory=dict)


Transition = Tuple[TimerState, TimerResponse]


def guess_phase_starting(guess_time: int) -> Notification:
    return Notification(
        kind=NotificationKind.GUESS_PHASE_STARTING,
        title="Guessing time!",
        description=f"You have {guess_time} seconds to guess",
        data={'guess_time': guess_time},
    )


def turn_ended_regular() -> Notification:
    return Notification(
        kind=NotificationKind.TURN_ENDED_REGULAR,
        title="Turn over!",
        description="Press next turn to start again",
    )


def turn_ended_special() -> Notification:
    return Notification(
        kind=NotificationKind.TURN_ENDED_SPECIAL,
        title="Turn over!",
        description="Press reset for the next word",
    )


# =============================================================================
# TICK
# =============================================================================

def tick(state: TimerState, settings: TimerSettings) -> Transition:
    """
    Advance the countdown by one second.

    Ticks arriving while paused or at zero leave the state untouched.

    Args:
        state: Current timer state
        settings: Durations used when a phase rolls over

    Returns:
        (new_state, response) with any cue and notification intents
    """
    response = TimerResponse()
    if not state.is_running or state.current_time <= 0:
        return state, response

    new_time = state.current_time - 1

    if 1 <= new_time <= WARNING_THRESHOLD:
        response.cues.append(Cue.WARNING)

    if new_time > 0:
        return replace(state, current_time=new_time), response

    response.cues.append(Cue.BUZZER)

    # Mode is checked before phase: Special ignores phase entirely
    if state.mode is Mode.SPECIAL:
        response.notifications.append(turn_ended_special())
        return replace(
            state,
            current_time=settings.special_turn_time,
            is_running=False,
            is_finished=True,
        ), response

    if state.phase is Phase.TURN:
        # Guessing follows straight on, no restart needed
        response.notifications.append(guess_phase_starting(settings.guess_time))
        return replace(
            state,
            current_time=settings.guess_time,
            phase=Phase.GUESS,
        ), response

    response.notifications.append(turn_ended_regular())
    return replace(
        state,
        current_time=settings.turn_time,
        phase=Phase.TURN,
        is_running=False,
        is_finished=True,
    ), response


# =============================================================================
# COMMANDS
# =============================================================================

def start(state: TimerState, settings: TimerSettings) -> Transition:
    return replace(state, is_running=True, is_finished=False), TimerResponse()


def pause(state: TimerState, settings: TimerSettings) -> Transition:
    return replace(state, is_running=False), TimerResponse()


def reset(state: TimerState, settings: TimerSettings) -> Transition:
    """Back to the start of the current mode's turn. The word counter is kept."""
    return replace(
        state,
        is_running=False,
        is_finished=False,
        phase=Phase.TURN,
        current_time=settings.nominal_time(state.mode),
    ), TimerResponse()


def next_word(state: TimerState, settings: TimerSettings) -> Transition:
    """Move to the next Special-mode word (5 wraps to 1). No-op in Regular mode."""
    if state.mode is not Mode.SPECIAL:
        return state, TimerResponse()

    word = state.current_word + 1 if state.current_word < WORDS_PER_CYCLE else 1
    return replace(
        state,
        current_word=word,
        is_running=False,
        is_finished=False,
        phase=Phase.TURN,
        current_time=settings.special_turn_time,
    ), TimerResponse()


def toggle_mode(state: TimerState, settings: TimerSettings) -> Transition:
    mode = Mode.SPECIAL if state.mode is Mode.REGULAR else Mode.REGULAR
    return TimerState(
        is_running=False,
        current_time=settings.nominal_time(mode),
        phase=Phase.TURN,
        is_finished=False,
        mode=mode,
        current_word=1,
    ), TimerResponse()


def apply_settings(state: TimerState, settings: TimerSettings) -> Transition:
    """
    Re-sync the clock to freshly stored settings.

    `settings` must already be the new settings. Only current_time and
    is_running change.
    """
    return replace(
        state,
        current_time=settings.nominal_time(state.mode, state.phase),
        is_running=False,
    ), TimerResponse()


# Command name -> handler
COMMANDS: Dict[str, Callable[[TimerState, TimerSettings], Transition]] = {
    'start': start,
    'pause': pause,
    'reset': reset,
    'next_word': next_word,
    'toggle_mode': toggle_mode,
    'apply_settings': apply_settings,
}


def run_command(state: TimerState, settings: TimerSettings,
                command: str) -> Transition:
    """
    Route a player command to its handler.

    Only names in COMMANDS are accepted; 'tick' is not a command and is
    answered like any other unknown name.
    """
    handler: Optional[Callable] = COMMANDS.get(command)
    if handler is None:
        return state, TimerResponse(
            error={'code': 'UNKNOWN_COMMAND', 'message': f'Unknown command: {command}'}
        )
    return handler(state, settings)
