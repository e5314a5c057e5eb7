import logging
import os

logger = logging.getLogger(__name__)


def env_number(name: str, default, cast=float):
    """Read a numeric env var. Malformed or non-positive values fall back to the default."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = cast(raw)
    except ValueError:
        value = None
    # NaN fails the comparison too
    if value is None or not value > 0:
        logger.warning(f"Ignoring {name}={raw!r}, using {default}")
        return default
    return value


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'alias-timer-secret'
    # Initial durations (seconds). Validated by the SettingsStore; bad values fall back to defaults.
    TURN_TIME = os.environ.get('ALIAS_TURN_TIME', '60')
    GUESS_TIME = os.environ.get('ALIAS_GUESS_TIME', '30')
    SPECIAL_TURN_TIME = os.environ.get('ALIAS_SPECIAL_TURN_TIME', '45')
    # Seconds between clock ticks
    TICK_INTERVAL_SEC = env_number('ALIAS_TICK_INTERVAL_SEC', 1.0)
    # Set to 0 to silence all cues
    AUDIO_ENABLED = os.environ.get('ALIAS_AUDIO_ENABLED', '1') != '0'
    SAMPLE_RATE = env_number('ALIAS_SAMPLE_RATE', 44100, cast=int)
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    @classmethod
    def initial_settings(cls) -> dict:
        return {
            'turn_time': cls.TURN_TIME,
            'guess_time': cls.GUESS_TIME,
            'special_turn_time': cls.SPECIAL_TURN_TIME,
        }
