"""
Socket.IO event handlers for the Alias timer.
Forwards player commands to the TimerController and relays its broadcasts.
"""

import logging
from flask import request
from flask_socketio import emit

logger = logging.getLogger(__name__)

# Global reference
timer_controller = None


def register_events(sio, controller):
    """Register all Socket.IO event handlers."""
    global timer_controller
    timer_controller = controller

    # Controller broadcasts go to every connected client
    controller.init(lambda event, payload: sio.emit(event, payload))

    sio.on_event('connect', on_connect)
    sio.on_event('disconnect', on_disconnect)
    sio.on_event('timer_command', on_timer_command)
    sio.on_event('update_settings', on_update_settings)
    sio.on_event('request_timer_sync', on_request_timer_sync)

    logger.info("Socket.IO events registered")


# =============================================================================
# PLATFORM HANDLERS
# =============================================================================

def on_connect():
    logger.info(f"Client connected: {request.sid}")
    emit('timer_sync', timer_controller.snapshot())
    emit('settings_sync', timer_controller.settings_store.get().to_dict())


def on_disconnect():
    # Just log it
    logger.info(f"Client disconnected: {request.sid}")


# =============================================================================
# TIMER HANDLERS
# =============================================================================

def on_timer_command(data=None):
    """
    Run a timer command.

    Payload: {'action': 'start'|'pause'|'reset'|'next_word'|'toggle_mode'|'apply_settings',
              'settings': {...}}  (settings only for apply_settings)
    """
    if not isinstance(data, dict): data = {}
    action = str(data.get('action', ''))
    settings = data.get('settings') or {}

    response = timer_controller.handle_command(action, settings)
    if response.error:
        emit('timer_error', response.error)
    elif action == 'apply_settings':
        emit('settings_sync', timer_controller.settings_store.get().to_dict(), broadcast=True)


def on_update_settings(data=None):
    """Apply raw settings form values and re-sync the running clock."""
    if not isinstance(data, dict): data = {}
    timer_controller.apply_settings(data)
    emit('settings_sync', timer_controller.settings_store.get().to_dict(), broadcast=True)


def on_request_timer_sync(data=None):
    emit('timer_sync', timer_controller.snapshot())
