"""Core posture engine."""
from .posture_state import (
    AlertState, Baseline, GoodState, PostureClassifier, PostureLevel, PostureState,
    Thresholds, WarningState, is_bad_posture
)
from .calibration import BaselineCalibrator, CalibrationSnapshot, compute_baseline
from .session import SessionAccountant
from .alert_gate import AlertGate, AlertNotifier
from .monitor import ConnectionState, HeadMotionMonitor, MonitorSnapshot
