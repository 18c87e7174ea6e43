"""
Session Accounting Module

Tracks total session time against time spent in bad posture, and keeps the
bounded pitch/roll histories shown on the dashboard.
"""

import math
from typing import Dict, Optional

from ..config import ENGINE
from ..utils.rolling_stats import RollingHistory, HistorySummary
from .posture_state import Baseline, Thresholds, is_bad_posture


class SessionAccountant:
    """Monotonic session counters, reset only by an explicit session reset."""

    def __init__(self, now: float, capacity: int = ENGINE.history_capacity):
        self.pitch_history = RollingHistory(capacity)
        self.roll_history = RollingHistory(capacity)
        self.session_start = now
        self.tick_anchor = now
        self.total_session_time = 0.0
        self.poor_posture_duration = 0.0
        self.poor_posture_start_time: Optional[float] = None

    def tick(self, filtered_pitch: float, raw_roll: float, baseline: Baseline,
             thresholds: Thresholds, now: float) -> bool:
        """Account one sample. Returns whether posture was bad on this tick."""
        dt = max(0.0, now - self.tick_anchor)
        self.total_session_time += dt
        self.tick_anchor = now

        bad = is_bad_posture(filtered_pitch, raw_roll, baseline, thresholds)
        if bad:
            if self.poor_posture_start_time is None:
                self.poor_posture_start_time = now
            self.poor_posture_duration += dt
        else:
            self.poor_posture_start_time = None

        self.pitch_history.append(filtered_pitch)
        self.roll_history.append(raw_roll)
        return bad

    @property
    def poor_posture_percentage(self) -> int:
        """Share of session time in bad posture, 0-100, halves rounded up."""
        if self.total_session_time <= 0:
            return 0
        return int(math.floor(self.poor_posture_duration / self.total_session_time * 100 + 0.5))

    @property
    def is_poor_posture_now(self) -> bool:
        return self.poor_posture_start_time is not None

    def history_summary(self) -> Dict[str, HistorySummary]:
        return {'pitch': self.pitch_history.summary(), 'roll': self.roll_history.summary()}

    def resume(self, now: float):
        """Re-anchor the tick clock so time spent stopped is not counted."""
        self.tick_anchor = now

    def reset(self, now: float):
        self.pitch_history.clear()
        self.roll_history.clear()
        self.session_start = now
        self.tick_anchor = now
        self.total_session_time = 0.0
        self.poor_posture_duration = 0.0
        self.poor_posture_start_time = None
