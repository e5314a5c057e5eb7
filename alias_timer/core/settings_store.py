"""
SettingsStore: holds the configurable durations for the session.

Input coming from the settings form is parsed here. Anything that is not a
whole number inside the allowed range is dropped and the previous value is
kept, so a bad edit can never break a running game.
"""

import logging
import threading
from dataclasses import replace
from typing import Any, Dict, Mapping, Optional

from ..timer.state import TimerSettings

logger = logging.getLogger(__name__)


def parse_duration(field_name: str, raw: Any, previous: int) -> int:
    """
    Parse one duration field.

    Args:
        field_name: One of TimerSettings.BOUNDS
        raw: Value as received (str, int, float, None...)
        previous: Last valid value, returned on bad input

    Returns:
        The parsed value, or `previous` if it is unusable
    """
    low, high = TimerSettings.BOUNDS[field_name]
    if isinstance(raw, bool):
        return previous
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        logger.info(f"Ignoring non-numeric {field_name}={raw!r}, keeping {previous}")
        return previous

    if not low <= value <= high:
        logger.info(f"Ignoring out-of-range {field_name}={value} (allowed {low}-{high}), keeping {previous}")
        return previous
    return value


class SettingsStore:
    """Thread-safe holder of the current TimerSettings."""

    def __init__(self, initial: Optional[TimerSettings] = None):
        self._lock = threading.Lock()
        self._settings = initial or TimerSettings()

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> 'SettingsStore':
        """Build a store from unvalidated values, falling back to defaults."""
        store = cls()
        store.update(raw)
        return store

    def get(self) -> TimerSettings:
        with self._lock:
            return self._settings

    def set(self, settings: TimerSettings) -> None:
        with self._lock:
            self._settings = settings

    def update(self, raw: Mapping[str, Any]) -> TimerSettings:
        """
        Merge raw form values into the stored settings.

        Unknown keys are ignored; missing keys keep their current value.

        Returns:
            The settings now in effect
        """
        with self._lock:
            current = self._settings
            if not isinstance(raw, Mapping):
                logger.info(f"Ignoring settings payload of type {type(raw).__name__}")
                return current
            changes: Dict[str, int] = {}
            for field_name in TimerSettings.BOUNDS:
                if field_name in raw:
                    changes[field_name] = parse_duration(
                        field_name, raw[field_name], getattr(current, field_name)
                    )
            self._settings = replace(current, **changes)
            return self._settings
