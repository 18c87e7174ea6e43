import threading

from Motion_Engine.core.alert_gate import AlertGate, AlertNotifier


def test_attempts_within_cooldown_fire_once():
    gate = AlertGate()
    fired = [gate.try_fire(0.0), gate.try_fire(5.0)]
    assert fired == [True, False]
    assert gate.last_fired == 0.0


def test_attempts_after_cooldown_fire_twice():
    gate = AlertGate()
    assert gate.try_fire(0.0)
    assert gate.try_fire(11.0)


def test_cooldown_boundary_is_inclusive():
    gate = AlertGate(cooldown=10.0)
    gate.try_fire(0.0)
    assert gate.try_fire(10.0)


def test_reset_forgets_last_fire():
    gate = AlertGate()
    gate.try_fire(0.0)
    gate.reset()
    assert gate.try_fire(1.0)


def test_notifier_runs_player_off_thread():
    played = threading.Event()
    notifier = AlertNotifier(play=played.set)
    notifier.notify().join(1.0)
    assert played.is_set()
    assert notifier.fired == 1


def test_notifier_failure_is_reported_not_raised():
    errors = []

    def broken():
        raise RuntimeError("no audio device")

    notifier = AlertNotifier(play=broken, on_error=errors.append)
    notifier.notify().join(1.0)
    assert len(errors) == 1
    assert "no audio device" in errors[0]
