"""
Baseline Calibration Module

The user holds a neutral head position for a short countdown; the baseline
is then the median of the newest filtered-pitch and raw-roll samples. The
median keeps a stray glance or nod during the hold from skewing the baseline.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from ..config import ENGINE
from ..errors import CalibrationCancelled, CalibrationInProgress
from ..utils.rolling_stats import median
from .posture_state import Baseline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalibrationSnapshot:
    """Copied history tails plus the current values, taken under the tick lock."""
    pitch_samples: Sequence[float]
    roll_samples: Sequence[float]
    current_pitch: float
    current_roll: float


def compute_baseline(pitch_samples: Sequence[float], roll_samples: Sequence[float],
                     current_pitch: float, current_roll: float,
                     window: int = ENGINE.calibration_window) -> Baseline:
    """Median of the newest `window` samples; empty history falls back to the current value."""
    pitch_tail = list(pitch_samples)[-window:] if window > 0 else []
    roll_tail = list(roll_samples)[-window:] if window > 0 else []
    reference_pitch = median(pitch_tail) if pitch_tail else float(current_pitch)
    reference_roll = median(roll_tail) if roll_tail else float(current_roll)
    return Baseline(reference_pitch, reference_roll)


class BaselineCalibrator:
    """Runs one calibration at a time; a running hold can be cancelled."""

    def __init__(self, hold_seconds: float = ENGINE.calibration_hold,
                 window: int = ENGINE.calibration_window):
        self.hold_seconds = hold_seconds
        self.window = window
        self._run_lock = threading.Lock()
        self._cancel = threading.Event()
        self._is_calibrating = False

    @property
    def is_calibrating(self) -> bool:
        return self._is_calibrating

    def calibrate(self, snapshot_provider: Callable[[], CalibrationSnapshot],
                  on_hold_started: Optional[Callable[[], None]] = None) -> Baseline:
        """
        Hold for `hold_seconds`, then compute a baseline from a fresh snapshot.

        Raises CalibrationInProgress if another run is active and
        CalibrationCancelled if `cancel()` is called during the hold.
        """
        if not self._run_lock.acquire(blocking=False):
            raise CalibrationInProgress()
        try:
            self._cancel.clear()
            self._is_calibrating = True
            if on_hold_started is not None:
                on_hold_started()
            logger.info("Calibration started, holding for %.1fs", self.hold_seconds)

            if self._cancel.wait(self.hold_seconds):
                logger.info("Calibration cancelled during hold")
                raise CalibrationCancelled()

            snap = snapshot_provider()
            baseline = compute_baseline(snap.pitch_samples, snap.roll_samples,
                                        snap.current_pitch, snap.current_roll, self.window)
            logger.info("Calibrated baseline pitch=%.2f roll=%.2f",
                        baseline.reference_pitch, baseline.reference_roll)
            return baseline
        finally:
            self._is_calibrating = False
            self._run_lock.release()

    def cancel(self):
        self._cancel.set()
