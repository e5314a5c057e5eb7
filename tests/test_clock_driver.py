import threading
import time

from alias_timer.core import ClockDriver


def wait_for(predicate, timeout=2.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def test_ticks_repeat_while_armed():
    ticks = []
    clock = ClockDriver(ticks.append, interval=0.01)
    generation = clock.arm()
    try:
        assert wait_for(lambda: len(ticks) >= 3)
        assert set(ticks) == {generation}
    finally:
        clock.shutdown()


def test_disarm_stops_ticks():
    ticks = []
    clock = ClockDriver(ticks.append, interval=0.01)
    clock.arm()
    assert wait_for(lambda: len(ticks) >= 1)
    clock.disarm()
    count = len(ticks)
    time.sleep(0.05)
    assert len(ticks) <= count + 1
    assert not clock.armed


def test_rearm_invalidates_old_generation():
    clock = ClockDriver(lambda generation: None, interval=3600)
    first = clock.arm()
    second = clock.arm()
    try:
        assert second != first
        assert not clock.is_current(first)
        assert clock.is_current(second)
    finally:
        clock.shutdown()


def test_disarmed_generation_is_stale():
    clock = ClockDriver(lambda generation: None, interval=3600)
    generation = clock.arm()
    clock.disarm()
    assert not clock.is_current(generation)


def test_disarm_when_idle_is_harmless():
    clock = ClockDriver(lambda generation: None)
    clock.disarm()
    clock.shutdown()
    assert not clock.armed


def test_callback_can_disarm_from_inside_a_tick():
    ticks = []
    clock = None

    def on_tick(generation):
        ticks.append(generation)
        clock.disarm()

    clock = ClockDriver(on_tick, interval=0.01)
    clock.arm()
    assert wait_for(lambda: len(ticks) == 1)
    time.sleep(0.05)
    assert len(ticks) == 1


def test_tick_errors_do_not_stop_the_clock():
    calls = []
    done = threading.Event()

    def on_tick(generation):
        calls.append(generation)
        if len(calls) >= 2:
            done.set()
        raise RuntimeError("boom")

    clock = ClockDriver(on_tick, interval=0.01)
    clock.arm()
    try:
        assert done.wait(2.0)
    finally:
        clock.shutdown()
