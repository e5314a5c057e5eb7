def received_named(sio_client, name):
    return [pkt['args'][0] for pkt in sio_client.get_received() if pkt['name'] == name]


def test_health(client):
    res = client.get('/health')
    assert res.status_code == 200
    body = res.get_json()
    assert body['status'] == 'ok'
    assert body['mode'] == 'regular'
    assert body['is_running'] is False


def test_timer_and_settings_endpoints(client):
    timer = client.get('/api/timer').get_json()
    assert timer['current_time'] == 60
    assert timer['display_time'] == '1:00'
    settings = client.get('/api/settings').get_json()
    assert settings == {'turn_time': 60, 'guess_time': 30, 'special_turn_time': 45}


def test_connect_sends_current_state(sio_client):
    assert sio_client.is_connected()
    received = sio_client.get_received()
    names = [pkt['name'] for pkt in received]
    assert 'timer_sync' in names
    assert 'settings_sync' in names


def test_start_command_broadcasts_sync(flask_app, sio_client):
    sio_client.get_received()  # flush
    sio_client.emit('timer_command', {'action': 'start'})
    syncs = received_named(sio_client, 'timer_sync')
    assert syncs[-1]['is_running'] is True
    assert flask_app.extensions['alias_timer'].clock.armed

    sio_client.emit('timer_command', {'action': 'pause'})
    syncs = received_named(sio_client, 'timer_sync')
    assert syncs[-1]['is_running'] is False


def test_unknown_action_returns_error(sio_client):
    sio_client.get_received()
    sio_client.emit('timer_command', {'action': 'rewind'})
    errors = received_named(sio_client, 'timer_error')
    assert errors == [{'code': 'UNKNOWN_COMMAND', 'message': 'Unknown command: rewind'}]


def test_tick_action_does_not_advance_clock(flask_app, sio_client):
    sio_client.emit('timer_command', {'action': 'start'})
    sio_client.get_received()
    sio_client.emit('timer_command', {'action': 'tick'})
    errors = received_named(sio_client, 'timer_error')
    assert errors == [{'code': 'UNKNOWN_COMMAND', 'message': 'Unknown command: tick'}]
    controller = flask_app.extensions['alias_timer']
    assert controller.state.current_time == 60
    assert controller.state.is_running
    controller.pause()


def test_toggle_and_next_word(sio_client):
    sio_client.get_received()
    sio_client.emit('timer_command', {'action': 'toggle_mode'})
    sio_client.emit('timer_command', {'action': 'next_word'})
    syncs = received_named(sio_client, 'timer_sync')
    assert syncs[-1]['mode'] == 'special'
    assert syncs[-1]['current_word'] == 2
    assert syncs[-1]['current_time'] == 45


def test_update_settings_falls_back_on_bad_input(flask_app, sio_client):
    sio_client.get_received()
    sio_client.emit('update_settings', {'turn_time': '90', 'guess_time': 'lots'})
    received = sio_client.get_received()
    settings = [pkt['args'][0] for pkt in received if pkt['name'] == 'settings_sync']
    syncs = [pkt['args'][0] for pkt in received if pkt['name'] == 'timer_sync']
    assert settings[-1] == {'turn_time': 90, 'guess_time': 30, 'special_turn_time': 45}
    assert syncs[-1]['current_time'] == 90


def test_apply_settings_action(sio_client):
    sio_client.get_received()
    sio_client.emit('timer_command', {'action': 'apply_settings', 'settings': {'turn_time': 120}})
    settings = received_named(sio_client, 'settings_sync')
    assert settings[-1]['turn_time'] == 120


def test_tick_notifications_reach_clients(flask_app, sio_client):
    controller = flask_app.extensions['alias_timer']
    controller.apply_settings({'turn_time': 10})
    controller.start()
    sio_client.get_received()
    for _ in range(10):
        controller.tick()
    notifications = received_named(sio_client, 'timer_notification')
    assert notifications[0]['kind'] == 'guess_phase_starting'
    assert notifications[0]['guess_time'] == 30
    controller.pause()


def test_request_timer_sync(sio_client):
    sio_client.get_received()
    sio_client.emit('request_timer_sync')
    syncs = received_named(sio_client, 'timer_sync')
    assert len(syncs) == 1
    assert syncs[0]['phase'] == 'turn'
