import time

import pytest

from Motion_Engine.config import EngineConfig
from Motion_Engine.core.alert_gate import AlertNotifier
from Motion_Engine.core.monitor import HeadMotionMonitor
from Motion_Engine.settings import SettingsStore
from Motion_Engine.sources.motion_source import MotionSource, OrientationSample


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class StubSource(MotionSource):
    """Source without a thread; tests push samples through the stored callbacks."""

    def __init__(self, simulated: bool = False):
        super().__init__(interval=0.01)
        self.is_simulated = simulated
        self.name = "stub-simulator" if simulated else "stub-device"
        self.started = 0
        self.stopped = 0
        self.on_sample = None
        self.on_error = None
        self._active = False

    @property
    def is_running(self) -> bool:
        return self._active

    def start(self, on_sample, on_error=None):
        self.on_sample = on_sample
        self.on_error = on_error
        self.started += 1
        self._active = True

    def stop(self, timeout: float = 1.0):
        self.stopped += 1
        self._active = False


class RecordingNotifier(AlertNotifier):
    def __init__(self):
        super().__init__(play=lambda: None)
        self.calls = 0

    def notify(self):
        self.calls += 1


def sample(pitch: float = 0.0, roll: float = 0.0, yaw: float = 0.0) -> OrientationSample:
    return OrientationSample(pitch=pitch, roll=roll, yaw=yaw)


def wait_for(predicate, timeout: float = 2.0) -> bool:
    end = time.monotonic() + timeout
    while time.monotonic() < end:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return SettingsStore(persist=False)


@pytest.fixture
def simulator():
    return StubSource(simulated=True)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_monitor(settings, simulator, notifier, clock):
    created = []

    def _make(device_source=None, **config_overrides):
        config = EngineConfig(**config_overrides)
        monitor = HeadMotionMonitor(settings=settings, device_source=device_source,
                                    simulated_source=simulator, notifier=notifier,
                                    clock=clock, config=config)
        created.append(monitor)
        return monitor

    yield _make
    for m in created:
        m.stop()
