"""
Motion Engine Module
Real-time head posture classification from head-orientation samples.
"""

from .core.monitor import HeadMotionMonitor, MonitorSnapshot, ConnectionState
from .core.posture_state import Baseline, Thresholds, PostureLevel, GoodState, WarningState, AlertState
from .settings import SettingsStore
from .sources.motion_source import DeviceMotionSource, OrientationSample, Vector3
from .sources.simulated_source import SimulatedMotionSource
