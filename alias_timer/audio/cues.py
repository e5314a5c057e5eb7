"""
Audio cues for the countdown.

Tones are synthesized with numpy and played with sounddevice without
blocking. Missing audio hardware (no PortAudio, no output device, a
playback error) is never fatal: it is logged once and every later cue is
skipped.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from ..timer.machine import Cue

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 44100

# Level the exponential envelope decays to by the end of the tone
DECAY_FLOOR = 0.01


@dataclass(frozen=True)
class CueTone:
    """
    Shape of one cue.

    Attributes:
        frequency: Hz
        waveform: 'sine' or 'sawtooth'
        amplitude: Peak level, 0..1
        duration: Seconds until the envelope reaches DECAY_FLOOR
    """
    frequency: float
    waveform: str
    amplitude: float
    duration: float


CUE_TONES: Dict[Cue, CueTone] = {
    # Short high beep for each of the last five seconds
    Cue.WARNING: CueTone(frequency=1000, waveform='sine', amplitude=0.3, duration=0.15),
    # Long low buzzer when a phase runs out
    Cue.BUZZER: CueTone(frequency=200, waveform='sawtooth', amplitude=0.5, duration=1.0),
}


def synthesize(tone: CueTone, sample_rate: int = DEFAULT_SAMPLE_RATE) -> np.ndarray:
    """
    Render a tone to a float32 buffer suitable for sounddevice.play().

    The envelope ramps exponentially from `amplitude` down to DECAY_FLOOR
    over the tone's duration.
    """
    n_samples = int(sample_rate * tone.duration)
    t = np.arange(n_samples, dtype=np.float64) / sample_rate
    cycles = tone.frequency * t

    if tone.waveform == 'sine':
        wave = np.sin(2.0 * np.pi * cycles)
    elif tone.waveform == 'sawtooth':
        wave = 2.0 * (cycles - np.floor(cycles + 0.5))
    else:
        raise ValueError(f"Unsupported waveform: {tone.waveform}")

    envelope = tone.amplitude * (DECAY_FLOOR / tone.amplitude) ** (t / tone.duration)
    return (wave * envelope).astype(np.float32)


class AudioOutput:
    """
    Process-wide handle on the sound device.

    Opened lazily on first use and released by close(). Once marked
    unavailable it stays silent for the rest of the session.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._sd = None
        self._opened = False
        self.available = True

    def open(self) -> bool:
        """Load sounddevice and check there is an output device."""
        with self._lock:
            if self._opened or not self.available:
                return self.available
            try:
                import sounddevice as sd
                sd.query_devices(kind='output')
            except Exception as e:
                self._mark_unavailable(e)
                return False
            self._sd = sd
            self._opened = True
            logger.info("Audio output opened")
            return True

    def play(self, buffer: np.ndarray, sample_rate: int) -> None:
        """Start playback and return immediately."""
        if not self.open():
            return
        with self._lock:
            sd = self._sd
        # Closed between open() and here
        if sd is None:
            return
        try:
            sd.play(buffer, samplerate=sample_rate, blocking=False)
        except Exception as e:
            with self._lock:
                self._mark_unavailable(e)

    def close(self) -> None:
        with self._lock:
            if not self._opened:
                return
            try:
                self._sd.stop()
            except Exception as e:
                logger.debug(f"Audio stop failed on close: {e}")
            self._sd = None
            self._opened = False
            logger.info("Audio output closed")

    def _mark_unavailable(self, error: Exception):
        """Caller holds the lock."""
        if self.available:
            logger.warning(f"Audio unavailable, cues will be skipped: {error}")
        self.available = False
        self._sd = None
        self._opened = False


_shared_output: Optional[AudioOutput] = None
_shared_lock = threading.Lock()


def get_audio_output() -> AudioOutput:
    """Return the process-wide AudioOutput, creating it on first call."""
    global _shared_output
    with _shared_lock:
        if _shared_output is None:
            _shared_output = AudioOutput()
        return _shared_output


class AudioCueEmitter:
    """Plays cue intents. Fire-and-forget: play() never blocks or raises."""

    def __init__(self, output=None, sample_rate: int = DEFAULT_SAMPLE_RATE,
                 enabled: bool = True):
        """
        Args:
            output: Object with play(buffer, sample_rate) and close();
                defaults to the shared AudioOutput
            sample_rate: Synthesis rate in Hz
            enabled: False mutes every cue
        """
        self.output = output if output is not None else get_audio_output()
        self.sample_rate = sample_rate
        self.enabled = enabled
        self._buffers = {
            cue: synthesize(tone, sample_rate) for cue, tone in CUE_TONES.items()
        }

    def warm_up(self) -> None:
        """Open the device ahead of the first cue."""
        if self.enabled and hasattr(self.output, 'open'):
            self.output.open()

    def play(self, cue: Cue) -> None:
        if not self.enabled:
            return
        logger.debug(f"Playing {cue.value} cue")
        self.output.play(self._buffers[cue], self.sample_rate)

    def close(self) -> None:
        self.output.close()
