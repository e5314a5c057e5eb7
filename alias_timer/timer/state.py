"""
Timer data model: settings, phases, modes and the mutable timer state.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Any


class Phase(Enum):
    """Sub-state of Regular mode."""
    TURN = "turn"
    GUESS = "guess"


class Mode(Enum):
    """Top-level game variant."""
    REGULAR = "regular"
    SPECIAL = "special"


# Special mode cycles through this many words before wrapping to 1
WORDS_PER_CYCLE = 5


@dataclass(frozen=True)
class TimerSettings:
    """
    The three configurable durations, in seconds.

    Attributes:
        turn_time: Explaining phase length (Regular mode)
        guess_time: Guessing phase length (Regular mode)
        special_turn_time: Single-word countdown length (Special mode)
    """
    turn_time: int = 60
    guess_time: int = 30
    special_turn_time: int = 45

    # field name -> (min, max), inclusive
    BOUNDS = {
        'turn_time': (10, 300),
        'guess_time': (5, 120),
        'special_turn_time': (10, 300),
    }

    def nominal_time(self, mode: Mode, phase: Phase = Phase.TURN) -> int:
        """Duration that a fresh phase of the given mode/phase starts from."""
        if mode is Mode.SPECIAL:
            return self.special_turn_time
        if phase is Phase.GUESS:
            return self.guess_time
        return self.turn_time

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class TimerState:
    """
    Snapshot of the timer. Transitions build new instances instead of
    mutating this one.
    """
    is_running: bool = False
    current_time: int = 60
    phase: Phase = Phase.TURN
    is_finished: bool = False
    mode: Mode = Mode.REGULAR
    current_word: int = 1

    @classmethod
    def initial(cls, settings: TimerSettings) -> 'TimerState':
        """Regular mode, Turn phase, paused, full turn on the clock."""
        return cls(current_time=settings.turn_time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'is_running': self.is_running,
            'current_time': self.current_time,
            'phase': self.phase.value,
            'is_finished': self.is_finished,
            'mode': self.mode.value,
            'current_word': self.current_word,
        }
