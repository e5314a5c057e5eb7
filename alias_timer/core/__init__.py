"""Core runtime components: clock, settings and the live timer controller."""

from .clock_driver import ClockDriver
from .settings_store import SettingsStore, parse_duration
from .timer_controller import TimerController

__all__ = ['ClockDriver', 'SettingsStore', 'parse_duration', 'TimerController']
