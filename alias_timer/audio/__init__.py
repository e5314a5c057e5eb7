"""Audio cue synthesis and playback."""

from .cues import AudioCueEmitter, AudioOutput, CueTone, CUE_TONES, synthesize, get_audio_output

__all__ = ['AudioCueEmitter', 'AudioOutput', 'CueTone', 'CUE_TONES', 'synthesize', 'get_audio_output']
