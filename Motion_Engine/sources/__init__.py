"""Head-orientation sample sources."""
from .motion_source import DeviceMotionSource, MotionSource, OrientationSample, Vector3
from .simulated_source import SimulatedMotionSource
