import os
import sys
import pytest

# Ensure the project root (containing app.py and events.py) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from alias_timer.core import SettingsStore, TimerController
from alias_timer.timer import TimerSettings


class RecordingAudio:
    """Cue emitter double that remembers what it was asked to play."""

    def __init__(self):
        self.played = []
        self.warmed_up = 0
        self.closed = False

    def play(self, cue):
        self.played.append(cue)

    def warm_up(self):
        self.warmed_up += 1

    def close(self):
        self.closed = True


class RecordingPublisher:
    def __init__(self):
        self.events = []

    def __call__(self, event, payload):
        self.events.append((event, payload))

    def named(self, name):
        return [payload for event, payload in self.events if event == name]


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test-secret'
    TURN_TIME = '60'
    GUESS_TIME = '30'
    SPECIAL_TURN_TIME = '45'
    # Long enough that no real tick fires during a test
    TICK_INTERVAL_SEC = 3600.0
    AUDIO_ENABLED = False
    SAMPLE_RATE = 8000
    LOG_LEVEL = 'DEBUG'

    @classmethod
    def initial_settings(cls):
        return {
            'turn_time': cls.TURN_TIME,
            'guess_time': cls.GUESS_TIME,
            'special_turn_time': cls.SPECIAL_TURN_TIME,
        }


@pytest.fixture()
def settings():
    return TimerSettings(turn_time=60, guess_time=30, special_turn_time=45)


@pytest.fixture()
def audio():
    return RecordingAudio()


@pytest.fixture()
def publisher():
    return RecordingPublisher()


@pytest.fixture()
def controller(settings, audio, publisher):
    # Ticks are driven by hand through controller.tick()
    timer = TimerController(SettingsStore(settings), audio, publish=publisher, tick_interval=3600.0)
    yield timer
    timer.shutdown()


@pytest.fixture()
def flask_app(audio):
    from app import create_app
    application = create_app(TestConfig, audio=audio)
    yield application
    application.extensions['alias_timer'].shutdown()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    socketio = flask_app.extensions['socketio']
    test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
    yield test_client
    try:
        test_client.disconnect()
    except Exception:
        pass
