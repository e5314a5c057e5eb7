"""Timer domain: data model, transition rules and display helpers."""

from .state import TimerState, TimerSettings, Phase, Mode, WORDS_PER_CYCLE
from .machine import (
    Cue, Notification, NotificationKind, TimerResponse, COMMANDS, run_command,
)
from .display import build_snapshot, format_time

__all__ = [
    'TimerState', 'TimerSettings', 'Phase', 'Mode', 'WORDS_PER_CYCLE',
    'Cue', 'Notification', 'NotificationKind', 'TimerResponse', 'COMMANDS', 'run_command',
    'build_snapshot', 'format_time',
]
