"""
Motion Source Module

Head orientation samples and the sources that deliver them. A source runs on
its own thread and hands every sample to a callback; the engine does not care
whether the samples come from a device or from the simulator.
"""

import logging
import math
import threading
from dataclasses import dataclass
from typing import Callable, Dict, NamedTuple, Optional, Tuple

from ..config import ENGINE
from ..errors import SourceUnavailable

logger = logging.getLogger(__name__)

SampleCallback = Callable[["OrientationSample"], None]
ErrorCallback = Callable[[Exception], None]


class Vector3(NamedTuple):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class OrientationSample:
    """One decoded head-orientation reading. Angles in degrees."""
    pitch: float
    roll: float
    yaw: float
    rotation_rate: Vector3 = Vector3()
    user_acceleration: Vector3 = Vector3()
    gravity: Vector3 = Vector3()

    @classmethod
    def from_radians(cls, pitch: float, roll: float, yaw: float,
                     rotation_rate: Tuple[float, float, float] = (0.0, 0.0, 0.0),
                     user_acceleration: Tuple[float, float, float] = (0.0, 0.0, 0.0),
                     gravity: Tuple[float, float, float] = (0.0, 0.0, 0.0)) -> "OrientationSample":
        """Build a sample from a device attitude reported in radians."""
        return cls(
            pitch=math.degrees(pitch),
            roll=math.degrees(roll),
            yaw=math.degrees(yaw),
            rotation_rate=Vector3(*rotation_rate),
            user_acceleration=Vector3(*user_acceleration),
            gravity=Vector3(*gravity),
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            'pitch': self.pitch, 'roll': self.roll, 'yaw': self.yaw,
            'rotation_rate': tuple(self.rotation_rate),
            'user_acceleration': tuple(self.user_acceleration),
            'gravity': tuple(self.gravity)
        }


class MotionSource:
    """Base class: a background thread that produces samples at a fixed cadence."""

    is_simulated = False
    name = "source"

    def __init__(self, interval: float = ENGINE.sample_interval):
        self.interval = interval
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._on_sample: Optional[SampleCallback] = None
        self._on_error: Optional[ErrorCallback] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, on_sample: SampleCallback, on_error: Optional[ErrorCallback] = None):
        if self.is_running:
            return
        self._on_sample = on_sample
        self._on_error = on_error
        self._stop_event = threading.Event()
        try:
            self._open()
        except SourceUnavailable:
            raise
        except Exception as e:
            logger.exception("%s failed to open", self.name)
            raise SourceUnavailable(f"{self.name} failed to open: {e}") from e
        self._thread = threading.Thread(target=self._loop, args=(self._stop_event,),
                                        name=f"{self.name}-loop", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 1.0):
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None
        self._close()

    def _loop(self, stop_event: threading.Event):
        while not stop_event.is_set():
            try:
                sample = self.read()
            except SourceUnavailable as e:
                logger.warning("%s unavailable: %s", self.name, e)
                if self._on_error is not None:
                    self._on_error(e)
                return
            except Exception as e:
                logger.exception("%s read failed", self.name)
                if self._on_error is not None:
                    self._on_error(SourceUnavailable(f"{self.name} read failed: {e}"))
                return
            if sample is not None and not stop_event.is_set():
                self._on_sample(sample)
            stop_event.wait(self.interval)

    def _open(self):
        """Acquire the underlying resource. Raise SourceUnavailable on failure."""

    def _close(self):
        """Release the underlying resource."""

    def read(self) -> Optional[OrientationSample]:
        raise NotImplementedError


class DeviceMotionSource(MotionSource):
    """
    Physical head-tracking sensor polled through a reader callable.

    The reader returns an OrientationSample, None when no new reading is
    ready, or raises SourceUnavailable when the device is gone. `probe` is an
    optional availability check run before the polling thread starts.
    """

    name = "device"

    def __init__(self, reader: Callable[[], Optional[OrientationSample]],
                 probe: Optional[Callable[[], bool]] = None,
                 interval: float = ENGINE.sample_interval):
        super().__init__(interval)
        self.reader = reader
        self.probe = probe

    def _open(self):
        if self.probe is not None and not self.probe():
            raise SourceUnavailable("Head-tracking device not connected")

    def read(self) -> Optional[OrientationSample]:
        return self.reader()
