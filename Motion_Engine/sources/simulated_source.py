"""Synthetic head motion used when no device is available."""

import numpy as np
from typing import Optional

from ..config import ENGINE, SIMULATION, SimulationConfig
from .motion_source import MotionSource, OrientationSample, Vector3


class SimulatedMotionSource(MotionSource):
    """Uniform random orientation samples at the engine sample rate."""

    is_simulated = True
    name = "simulator"

    def __init__(self, config: SimulationConfig = SIMULATION, interval: float = ENGINE.sample_interval,
                 seed: Optional[int] = None):
        super().__init__(interval)
        self.config = config
        self._rng = np.random.default_rng(seed if seed is not None else config.seed)

    def _uniform3(self, bounds) -> Vector3:
        x, y, z = self._rng.uniform(bounds[0], bounds[1], size=3)
        return Vector3(float(x), float(y), float(z))

    def read(self) -> OrientationSample:
        cfg = self.config
        return OrientationSample(
            pitch=float(self._rng.uniform(*cfg.pitch_range)),
            roll=float(self._rng.uniform(*cfg.roll_range)),
            yaw=float(self._rng.uniform(*cfg.yaw_range)),
            rotation_rate=Vector3(*cfg.rotation_rate),
            user_acceleration=self._uniform3(cfg.user_acceleration_range),
            gravity=self._uniform3(cfg.gravity_range),
        )
