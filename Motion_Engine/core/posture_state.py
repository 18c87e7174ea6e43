"""
Posture State Module

Threshold-based head posture classification relative to a calibrated
baseline. A sample is "bad" when the filtered pitch droops forward past
`poor_posture_threshold`, leans back past `warning_threshold`, or the raw roll
tilts sideways past `roll_threshold`. Bad posture held for longer than the
escalation delay turns Warning into Alert.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Dict, Any, Union

from ..config import ENGINE, THRESHOLD_RANGES


# -----------------------------------------------------------------------------
# Enums & Data Classes
# -----------------------------------------------------------------------------

class PostureLevel(Enum):
    """Posture state tags."""
    GOOD = "good"
    WARNING = "warning"
    ALERT = "alert"


@dataclass(frozen=True)
class Baseline:
    """User-calibrated neutral head orientation (degrees)."""
    reference_pitch: float = 0.0
    reference_roll: float = 0.0


@dataclass(frozen=True)
class Thresholds:
    """User thresholds, in degrees relative to the baseline."""
    poor_posture_threshold: float = -15.0
    warning_threshold: float = 1.0
    roll_threshold: float = 1.0

    @property
    def pitch_bounds_ordered(self) -> bool:
        return self.poor_posture_threshold <= self.warning_threshold

    def clamped(self) -> "Thresholds":
        """Copy with every value clamped into its documented slider range."""
        return replace(
            self,
            poor_posture_threshold=THRESHOLD_RANGES['poor_posture_threshold'].clamp(self.poor_posture_threshold),
            warning_threshold=THRESHOLD_RANGES['warning_threshold'].clamp(self.warning_threshold),
            roll_threshold=THRESHOLD_RANGES['roll_threshold'].clamp(self.roll_threshold),
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            'poor_posture_threshold': self.poor_posture_threshold,
            'warning_threshold': self.warning_threshold,
            'roll_threshold': self.roll_threshold
        }


@dataclass(frozen=True)
class GoodState:
    duration: float

    level = PostureLevel.GOOD


@dataclass(frozen=True)
class WarningState:
    pitch: float
    time_above_threshold: float

    level = PostureLevel.WARNING


@dataclass(frozen=True)
class AlertState:
    pitch: float
    duration: float

    level = PostureLevel.ALERT


PostureState = Union[GoodState, WarningState, AlertState]


def should_trigger_alert(state: PostureState) -> bool:
    return isinstance(state, AlertState)


def state_to_dict(state: PostureState) -> Dict[str, Any]:
    """Flatten a posture state for display."""
    if isinstance(state, GoodState):
        return {'state': state.level.value, 'duration': state.duration}
    if isinstance(state, WarningState):
        return {'state': state.level.value, 'pitch': state.pitch,
                'time_above_threshold': state.time_above_threshold}
    return {'state': state.level.value, 'pitch': state.pitch, 'duration': state.duration}


# -----------------------------------------------------------------------------
# Predicate
# -----------------------------------------------------------------------------

def is_bad_posture(filtered_pitch: float, raw_roll: float,
                   baseline: Baseline, thresholds: Thresholds) -> bool:
    """
    Shared bad-posture predicate, checked in order: forward droop, leaning
    back, lateral tilt. Inverted pitch bounds or a negative roll threshold
    match nothing.
    """
    if thresholds.pitch_bounds_ordered:
        delta = filtered_pitch - baseline.reference_pitch
        if delta < thresholds.poor_posture_threshold:
            return True
        if delta > thresholds.warning_threshold:
            return True
    if thresholds.roll_threshold >= 0:
        if abs(raw_roll - baseline.reference_roll) > thresholds.roll_threshold:
            return True
    return False


# -----------------------------------------------------------------------------
# Classifier
# -----------------------------------------------------------------------------

class PostureClassifier:
    """
    Per-tick posture state machine.

    The escalation clock runs from the last instant posture was clean. Before
    any Good state has been seen it runs from the first bad sample, so a cold
    start always reports Warning first.
    """

    def __init__(self, escalation_delay: float = ENGINE.escalation_delay):
        self.escalation_delay = escalation_delay
        self.state: PostureState = GoodState(0.0)
        self._last_good_time: Optional[float] = None
        self._bad_since: Optional[float] = None
        self._entered_alert = False

    def classify(self, filtered_pitch: float, raw_roll: float, baseline: Baseline,
                 thresholds: Thresholds, now: float, session_start: float) -> PostureState:
        previous = self.state

        if not is_bad_posture(filtered_pitch, raw_roll, baseline, thresholds):
            self._last_good_time = now
            self._bad_since = None
            new_state: PostureState = GoodState(max(0.0, now - session_start))
        else:
            if self._bad_since is None:
                self._bad_since = now
            anchor = self._last_good_time if self._last_good_time is not None else self._bad_since
            elapsed = max(0.0, now - anchor)
            if elapsed > self.escalation_delay:
                new_state = AlertState(filtered_pitch, elapsed)
            else:
                new_state = WarningState(filtered_pitch, elapsed)

        self._entered_alert = isinstance(new_state, AlertState) and not isinstance(previous, AlertState)
        self.state = new_state
        return new_state

    @property
    def entered_alert(self) -> bool:
        """True when the last classification moved into Alert from another state."""
        return self._entered_alert

    def reset(self):
        self.state = GoodState(0.0)
        self._last_good_time = None
        self._bad_since = None
        self._entered_alert = False
