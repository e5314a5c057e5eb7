"""
TimerController: owns the live timer and carries out transition intents.

Commands from the players and ticks from the ClockDriver both end up here.
Each one runs the pure state machine under a single lock, stores the new
state, re-arms or disarms the clock, then plays cues and publishes
notifications and a fresh snapshot.
"""

import logging
import threading
from dataclasses import replace
from typing import Any, Callable, Dict, Optional

from ..timer import machine
from ..timer.machine import TimerResponse
from ..timer.state import TimerState, TimerSettings
from ..timer.display import build_snapshot
from .clock_driver import ClockDriver
from .settings_store import SettingsStore

logger = logging.getLogger(__name__)

Publisher = Callable[[str, Dict[str, Any]], None]


class TimerController:
    """
    Thin driver around the timer state machine.

    Attributes:
        settings_store: Durations used by every transition
        audio: Cue emitter (anything with play(cue), warm_up() and close())
    """

    def __init__(self, settings_store: SettingsStore, audio,
                 publish: Optional[Publisher] = None,
                 tick_interval: float = 1.0):
        """
        Args:
            settings_store: Holds the current TimerSettings
            audio: AudioCueEmitter or a stand-in
            publish: Called as publish(event_name, payload) for broadcasts
            tick_interval: Seconds between clock ticks
        """
        self.settings_store = settings_store
        self.audio = audio
        self._publish = publish
        # Re-entrant: on_clock_tick() holds it while calling tick()
        self._lock = threading.RLock()
        self._state = TimerState.initial(settings_store.get())
        self._clock = ClockDriver(self.on_clock_tick, interval=tick_interval)

    def init(self, publish: Publisher) -> None:
        """Attach the broadcast function once the transport exists."""
        self._publish = publish

    @property
    def state(self) -> TimerState:
        with self._lock:
            return self._state

    @property
    def clock(self) -> ClockDriver:
        return self._clock

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return build_snapshot(self._state)

    # =========================================================================
    # Commands
    # =========================================================================

    def handle_command(self, command: str, data=None) -> TimerResponse:
        """
        Apply a player command.

        Args:
            command: start, pause, reset, next_word, toggle_mode or apply_settings
            data: For apply_settings, a TimerSettings or raw form values

        Returns:
            The TimerResponse; its error is set for unknown commands
        """
        with self._lock:
            if command == 'apply_settings':
                if isinstance(data, TimerSettings):
                    self.settings_store.set(data)
                else:
                    self.settings_store.update(data or {})

            # Ticks only come from the clock, never from a command
            new_state, response = machine.run_command(self._state, self.settings_store.get(), command)
            if response.error:
                logger.warning(f"Rejected timer command: {command}")
                return response

            if command == 'start':
                self.audio.warm_up()

            logger.info(f"Timer command: {command}")
            self._commit(new_state, response)
            return response

    def start(self) -> TimerResponse:
        return self.handle_command('start')

    def pause(self) -> TimerResponse:
        return self.handle_command('pause')

    def reset(self) -> TimerResponse:
        return self.handle_command('reset')

    def next_word(self) -> TimerResponse:
        return self.handle_command('next_word')

    def toggle_mode(self) -> TimerResponse:
        return self.handle_command('toggle_mode')

    def apply_settings(self, settings) -> TimerResponse:
        """Store new durations (TimerSettings or raw form values) and re-sync the clock."""
        return self.handle_command('apply_settings', settings)

    # =========================================================================
    # Ticks
    # =========================================================================

    def on_clock_tick(self, generation: int) -> None:
        """ClockDriver callback. Ticks from an older arming are dropped."""
        with self._lock:
            if not self._clock.is_current(generation):
                logger.debug(f"Dropping stale tick (generation {generation})")
                return
            self.tick()

    def tick(self) -> TimerResponse:
        """Advance the countdown by one second."""
        with self._lock:
            new_state, response = machine.tick(self._state, self.settings_store.get())
            if new_state is self._state:
                return response
            logger.debug(f"Tick: {new_state.current_time}s left")
            self._commit(new_state, response)
            return response

    def shutdown(self) -> None:
        """Stop the clock and release the audio device."""
        with self._lock:
            self._clock.shutdown()
            if self._state.is_running:
                # Nothing can tick any more
                self._state = replace(self._state, is_running=False)
        self.audio.close()
        logger.info("Timer controller shut down")

    # =========================================================================
    # Internals
    # =========================================================================

    def _commit(self, new_state: TimerState, response: TimerResponse):
        """Store the new state and carry out its intents. Caller holds the lock."""
        old_state = self._state
        self._state = new_state
        self._log_transition(old_state, new_state)
        self._sync_clock()

        for cue in response.cues:
            self.audio.play(cue)

        for notification in response.notifications:
            self._emit('timer_notification', notification.to_dict())

        self._emit('timer_sync', build_snapshot(new_state))

    def _sync_clock(self):
        """Clock is armed exactly while the timer is running."""
        if self._state.is_running and not self._clock.armed:
            self._clock.arm()
        elif not self._state.is_running and self._clock.armed:
            self._clock.disarm()

    def _log_transition(self, old: TimerState, new: TimerState):
        if old.mode is not new.mode:
            logger.info(f"Mode changed: {old.mode.value} -> {new.mode.value}")
        elif old.phase is not new.phase:
            logger.info(f"Phase changed: {old.phase.value} -> {new.phase.value}")
        if new.is_finished and not old.is_finished:
            logger.info(f"Turn finished ({new.mode.value} mode)")
        if old.current_word != new.current_word:
            logger.info(f"Word {old.current_word} -> {new.current_word}")

    def _emit(self, event: str, payload: Dict[str, Any]):
        if self._publish:
            self._publish(event, payload)
