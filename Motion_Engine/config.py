"""
Engine Constants & Threshold Ranges

Fixed timing constants of the posture engine, the documented slider ranges
for the user-adjustable thresholds, and the synthetic motion generator
settings used when no head-tracking device reports.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple


_DEFAULT_SETTINGS_FILE = Path(__file__).parent.parent / "data" / "settings.json"


@dataclass(frozen=True)
class EngineConfig:
    """
    Timing and buffer constants.

    Escalation: a bad condition held for more than `escalation_delay` seconds
    turns Warning into Alert. Alerts are re-notified at most once per
    `alert_cooldown` seconds.
    """
    low_pass_alpha: float = 0.2
    escalation_delay: float = 2.0        # seconds of continuous bad posture before Alert
    alert_cooldown: float = 10.0         # seconds between alert notifications
    history_capacity: int = 100          # samples kept for pitch/roll charts
    calibration_hold: float = 3.0        # "hold still" countdown
    calibration_window: int = 30         # newest samples used for the baseline median
    device_grace_period: float = 2.0     # wait for first device sample before simulating
    sample_rate_hz: float = 30.0
    restart_delay: float = 0.5

    @property
    def sample_interval(self) -> float:
        return 1.0 / self.sample_rate_hz


@dataclass(frozen=True)
class ThresholdRange:
    """Closed interval a threshold slider is clamped to (degrees)."""
    low: float
    high: float

    def clamp(self, value: float) -> float:
        return min(max(value, self.low), self.high)


@dataclass(frozen=True)
class SimulationConfig:
    """
    Synthetic head motion used when no physical sensor is available.

    Uniform noise in the ranges below; rotation rate is a constant vector.
    """
    pitch_range: Tuple[float, float] = (-30.0, 30.0)
    roll_range: Tuple[float, float] = (-15.0, 15.0)
    yaw_range: Tuple[float, float] = (-10.0, 10.0)
    user_acceleration_range: Tuple[float, float] = (-0.2, 0.2)
    gravity_range: Tuple[float, float] = (-1.0, 1.0)
    rotation_rate: Tuple[float, float, float] = (2.0, 2.0, 2.0)
    seed: Optional[int] = None


THRESHOLD_RANGES: Dict[str, ThresholdRange] = {
    'poor_posture_threshold': ThresholdRange(-45.0, 0.0),   # forward droop
    'warning_threshold': ThresholdRange(0.0, 45.0),         # leaning back
    'roll_threshold': ThresholdRange(0.0, 45.0),            # lateral tilt
}

DEFAULT_SETTINGS: Dict[str, float] = {
    'poor_posture_threshold': -15.0,
    'warning_threshold': 1.0,
    'roll_threshold': 1.0,
    'reference_pitch': 0.0,
    'reference_roll': 0.0,
}

# Dashboard shows the poor-posture share in red at or above this percentage
PERCENTAGE_ALERT_LEVEL = 40

ENGINE = EngineConfig()
SIMULATION = SimulationConfig()


def settings_path() -> Path:
    """Settings file location, overridable with HEADMOTION_SETTINGS_PATH."""
    override = os.getenv("HEADMOTION_SETTINGS_PATH")
    return Path(override) if override else _DEFAULT_SETTINGS_FILE
