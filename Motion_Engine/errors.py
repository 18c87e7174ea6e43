"""Error types raised inside the motion engine."""


class MotionEngineError(Exception):
    """Base class for engine errors."""


class SourceUnavailable(MotionEngineError):
    """No physical sensor, or the sensor stopped reporting mid-session."""


class CalibrationFailure(MotionEngineError):
    """Calibration aborted; the previous baseline stays in effect."""


class CalibrationInProgress(CalibrationFailure):
    def __init__(self):
        super().__init__("Calibration already in progress")


class CalibrationCancelled(CalibrationFailure):
    def __init__(self):
        super().__init__("Calibration cancelled")


class NotificationFailure(MotionEngineError):
    """Alert sound could not be played."""


class InitializationError(MotionEngineError):
    """Engine wiring could not be set up at construction time."""
