"""
Alias Timer - Main Flask Application
Entry point for the party-game turn timer server.
"""

import argparse
import logging
from flask import Flask, current_app, jsonify
from flask_socketio import SocketIO

from alias_timer.config import Config
from alias_timer.core import SettingsStore, TimerController
from alias_timer.audio import AudioCueEmitter
from events import register_events

# Configure logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(config_class=Config, audio=None):
    """
    Build the Flask app, its Socket.IO server and the live timer.

    Args:
        config_class: Settings object (see alias_timer.config.Config)
        audio: Cue emitter override; defaults to an AudioCueEmitter on the shared device

    Returns:
        The Flask app. The controller is at app.extensions['alias_timer'],
        the Socket.IO server at app.extensions['socketio'].
    """
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    # Initialize Socket.IO with CORS for local network access
    socketio = SocketIO(flask_app, cors_allowed_origins="*")

    if audio is None:
        audio = AudioCueEmitter(
            sample_rate=config_class.SAMPLE_RATE,
            enabled=config_class.AUDIO_ENABLED,
        )

    settings_store = SettingsStore.from_raw(config_class.initial_settings())
    controller = TimerController(
        settings_store,
        audio,
        tick_interval=config_class.TICK_INTERVAL_SEC,
    )
    flask_app.extensions['alias_timer'] = controller

    # Register Socket.IO event handlers
    register_events(socketio, controller)

    _register_routes(flask_app)

    logger.info(f"Timer ready: {settings_store.get().to_dict()}")
    return flask_app


# =============================================================================
# HTTP ROUTES
# =============================================================================

def _register_routes(flask_app):

    @flask_app.route('/health')
    def health():
        """Health check endpoint."""
        controller = current_app.extensions['alias_timer']
        state = controller.state
        return {
            'status': 'ok',
            'mode': state.mode.value,
            'is_running': state.is_running
        }

    @flask_app.route('/api/timer')
    def get_timer():
        """Current timer snapshot."""
        return jsonify(current_app.extensions['alias_timer'].snapshot())

    @flask_app.route('/api/settings')
    def get_settings():
        """Current durations."""
        controller = current_app.extensions['alias_timer']
        return jsonify(controller.settings_store.get().to_dict())


# =============================================================================
# MAIN
# =============================================================================

def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Alias Timer Server')
    parser.add_argument(
        '--port',
        type=int,
        default=5000,
        help='Port to run the server on (default: 5000)'
    )
    parser.add_argument(
        '--no-debug',
        action='store_true',
        help='Disable debug mode'
    )
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_args()
    app = create_app()

    logger.info(f"Starting Alias Timer on port {args.port}")
    try:
        app.extensions['socketio'].run(
            app,
            host='0.0.0.0',
            port=args.port,
            debug=not args.no_debug,
            use_reloader=False,
            allow_unsafe_werkzeug=True
        )
    finally:
        app.extensions['alias_timer'].shutdown()
