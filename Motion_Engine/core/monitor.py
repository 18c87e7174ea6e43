"""
Head Motion Monitor

Owns one posture engine instance: filter, classifier, session accountant,
alert gate and calibrator, plus the lifecycle of the sample sources feeding
them. Samples are processed one tick at a time; a sample arriving while a
tick is still running is dropped. The presentation layer reads the
published properties (or `snapshot()`) and drives the commands.

Lifecycle: NOT_STARTED -> CONNECTING -> LIVE | SIMULATED -> STOPPED. The
simulator takes over when no device is configured, the device is not
connected, it sends nothing within the grace period, or it fails mid-session.
"""

import logging
import threading
import time
from dataclasses import dataclass, field, asdict
from enum import Enum
from functools import partial
from typing import Any, Callable, Dict, Optional, Tuple

from ..config import ENGINE, EngineConfig
from ..errors import CalibrationCancelled, CalibrationFailure, InitializationError
from ..settings import SettingsStore
from ..sources.motion_source import MotionSource, OrientationSample, Vector3
from ..sources.simulated_source import SimulatedMotionSource
from ..utils.low_pass_filter import LowPassFilter
from .alert_gate import AlertGate, AlertNotifier
from .calibration import BaselineCalibrator, CalibrationSnapshot
from .posture_state import (
    Baseline, PostureClassifier, PostureState, Thresholds, state_to_dict
)
from .session import SessionAccountant

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Enums & Data Classes
# -----------------------------------------------------------------------------

class ConnectionState(Enum):
    NOT_STARTED = "not_started"
    CONNECTING = "connecting"
    LIVE = "live"
    SIMULATED = "simulated"
    STOPPED = "stopped"


STATUS_NOT_STARTED = "Not started"
STATUS_INITIALIZING = "Initializing..."
STATUS_CONNECTING = "Connecting to device..."
STATUS_CONNECTED = "Connected"
STATUS_SIMULATION = "Simulation mode"
STATUS_SIMULATION_WAITING = "Simulation mode - waiting for device"
STATUS_STOPPED = "Stopped"


@dataclass(frozen=True)
class MonitorSnapshot:
    """Read-only view of everything the presentation layer shows."""
    pitch: float
    roll: float
    yaw: float
    rotation_rate: Vector3
    user_acceleration: Vector3
    gravity: Vector3
    is_device_connected: bool
    connection_status: str
    posture_state: PostureState
    pitch_history: Tuple[float, ...]
    roll_history: Tuple[float, ...]
    poor_posture_duration: float
    poor_posture_percentage: int
    is_simulation_mode: bool
    last_error: Optional[str]
    is_calibrating: bool
    is_poor_posture_now: bool
    reference_pitch: float
    reference_roll: float
    thresholds: Thresholds = field(default_factory=Thresholds)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d['posture_state'] = state_to_dict(self.posture_state)
        d['rotation_rate'] = tuple(self.rotation_rate)
        d['user_acceleration'] = tuple(self.user_acceleration)
        d['gravity'] = tuple(self.gravity)
        d['pitch_history'] = list(self.pitch_history)
        d['roll_history'] = list(self.roll_history)
        d['thresholds'] = self.thresholds.to_dict()
        return d


# -----------------------------------------------------------------------------
# Monitor
# -----------------------------------------------------------------------------

class HeadMotionMonitor:
    """Real-time head posture engine with explicit start/stop lifecycle."""

    def __init__(self, settings: Optional[SettingsStore] = None,
                 device_source: Optional[MotionSource] = None,
                 simulated_source: Optional[MotionSource] = None,
                 notifier: Optional[AlertNotifier] = None,
                 clock: Callable[[], float] = time.monotonic,
                 config: EngineConfig = ENGINE):
        try:
            self.config = config
            self._clock = clock
            self.settings = settings if settings is not None else SettingsStore()
            self._thresholds = Thresholds(
                self.settings.get('poor_posture_threshold'),
                self.settings.get('warning_threshold'),
                self.settings.get('roll_threshold'),
            )
            self._baseline = Baseline(self.settings.get('reference_pitch'),
                                      self.settings.get('reference_roll'))

            self._filter = LowPassFilter(config.low_pass_alpha)
            self._classifier = PostureClassifier(config.escalation_delay)
            self._session = SessionAccountant(clock(), config.history_capacity)
            self._gate = AlertGate(config.alert_cooldown)
            self._calibrator = BaselineCalibrator(config.calibration_hold, config.calibration_window)
            self._notifier = notifier if notifier is not None else AlertNotifier()
            if self._notifier.on_error is None:
                self._notifier.on_error = self._record_error

            self._device = device_source
            self._simulator = simulated_source if simulated_source is not None else \
                SimulatedMotionSource(interval=config.sample_interval)
        except (TypeError, ValueError, AttributeError) as e:
            raise InitializationError(f"Initialization error: {e}") from e

        self._tick_lock = threading.Lock()
        self._state_lock = threading.RLock()
        self._generation = 0
        self._running = False
        self._active_source: Optional[MotionSource] = None
        self._grace_timer: Optional[threading.Timer] = None
        self._device_reporting = False
        self.dropped_samples = 0

        self._pitch = 0.0
        self._roll = 0.0
        self._yaw = 0.0
        self._rotation_rate = Vector3()
        self._user_acceleration = Vector3()
        self._gravity = Vector3()
        self._is_device_connected = False
        self._is_simulation_mode = False
        self._connection_state = ConnectionState.NOT_STARTED
        self._connection_status = STATUS_NOT_STARTED
        self._last_error: Optional[str] = None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def connection_state(self) -> ConnectionState:
        return self._connection_state

    def start(self):
        """Start the device source (or the simulator). No-op when already running."""
        with self._state_lock:
            if self._running:
                return
            self._running = True
            self._generation += 1
            gen = self._generation
            self._last_error = None
            self._device_reporting = False
            self._connection_state = ConnectionState.CONNECTING
            self._connection_status = STATUS_INITIALIZING
            with self._tick_lock:
                self._session.resume(self._clock())
                self._classifier.reset()

            if self._device is None:
                logger.info("No device source configured, starting simulator")
                self._start_simulator(gen, STATUS_SIMULATION)
                return

            try:
                self._device.start(on_sample=partial(self._on_source_sample, source=self._device, generation=gen),
                                   on_error=partial(self._on_device_error, generation=gen))
            except Exception as e:
                logger.info("Device unavailable at start (%s), starting simulator", e)
                self._start_simulator(gen, STATUS_SIMULATION_WAITING)
                return

            self._active_source = self._device
            self._connection_status = STATUS_CONNECTING
            self._grace_timer = threading.Timer(self.config.device_grace_period,
                                                self._on_grace_expired, args=(gen,))
            self._grace_timer.daemon = True
            self._grace_timer.start()
            logger.info("Device source started, waiting %.1fs for first sample",
                        self.config.device_grace_period)

    def stop(self):
        """Stop sources, pending fallback timer and any running calibration."""
        with self._state_lock:
            self._calibrator.cancel()
            if not self._running:
                return
            self._running = False
            self._generation += 1
            timer, self._grace_timer = self._grace_timer, None
            source, self._active_source = self._active_source, None
            self._is_device_connected = False
            self._is_simulation_mode = False
            self._connection_state = ConnectionState.STOPPED
            self._connection_status = STATUS_STOPPED

        if timer is not None:
            timer.cancel()
        if source is not None:
            source.stop()
        logger.info("Monitor stopped")

    def restart(self, delay: Optional[float] = None):
        self.stop()
        time.sleep(self.config.restart_delay if delay is None else delay)
        self.start()

    def _start_simulator(self, gen: int, status: str):
        """Switch to the simulator. Caller holds the state lock."""
        self._active_source = self._simulator
        self._is_simulation_mode = True
        self._is_device_connected = True
        self._connection_state = ConnectionState.SIMULATED
        self._connection_status = status
        self._simulator.start(on_sample=partial(self._on_source_sample, source=self._simulator, generation=gen),
                              on_error=self._on_simulator_error)

    def _fall_back_to_simulation(self, gen: int, status: str):
        with self._state_lock:
            if gen != self._generation or not self._running or self._active_source is self._simulator:
                return
            device = self._active_source
            timer, self._grace_timer = self._grace_timer, None
            self._start_simulator(gen, status)
        logger.info("Falling back to simulation: %s", status)
        if timer is not None:
            timer.cancel()
        if device is not None:
            device.stop()

    def _on_grace_expired(self, gen: int):
        if not self._device_reporting:
            self._fall_back_to_simulation(gen, "Device did not report - switched to simulation mode")

    def _on_device_error(self, error: Exception, generation: int):
        if generation != self._generation:
            return
        self._last_error = f"Connection error: {error}"
        self._fall_back_to_simulation(generation, f"Connection error: {error}")

    def _on_simulator_error(self, error: Exception):
        self._record_error(f"Simulation error: {error}")

    def _on_source_sample(self, sample: OrientationSample, source: MotionSource, generation: int):
        if generation != self._generation or source is not self._active_source:
            return
        if not source.is_simulated and not self._device_reporting:
            with self._state_lock:
                if generation != self._generation:
                    return
                self._device_reporting = True
                self._is_device_connected = True
                self._connection_state = ConnectionState.LIVE
                self._connection_status = STATUS_CONNECTED
                logger.info("Device reporting, live mode")
        self.process_sample(sample)

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def process_sample(self, sample: OrientationSample, now: Optional[float] = None) -> bool:
        """
        Run one tick. Returns False when the sample was ignored: the engine is
        stopped, another tick is in progress, or processing failed.
        """
        if not self._running:
            return False
        if not self._tick_lock.acquire(blocking=False):
            self.dropped_samples += 1
            logger.debug("Tick in progress, dropped sample (%d dropped)", self.dropped_samples)
            return False
        try:
            self._tick(sample, self._clock() if now is None else now)
            return True
        except Exception as e:
            logger.exception("Tick failed")
            self._last_error = f"Motion data processing error: {e}"
            return False
        finally:
            self._tick_lock.release()

    def _tick(self, sample: OrientationSample, now: float):
        pitch = self._filter.update(sample.pitch)
        self._pitch = pitch
        self._roll = sample.roll
        self._yaw = sample.yaw
        self._rotation_rate = sample.rotation_rate
        self._user_acceleration = sample.user_acceleration
        self._gravity = sample.gravity

        baseline, thresholds = self._baseline, self._thresholds
        self._classifier.classify(pitch, sample.roll, baseline, thresholds, now,
                                  self._session.session_start)
        self._session.tick(pitch, sample.roll, baseline, thresholds, now)

        if self._classifier.entered_alert and self._gate.try_fire(now):
            logger.info("Bad posture alert (pitch=%.1f roll=%.1f)", pitch, sample.roll)
            self._notifier.notify()

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def reset_session(self):
        """Clear session counters and histories; baseline and thresholds are kept."""
        with self._tick_lock:
            self._session.reset(self._clock())
            self._classifier.reset()
            self._last_error = None
        logger.info("Session reset")

    def calibrate_baseline_posture(self) -> Optional[Baseline]:
        """
        Blocking calibration: hold, then set the baseline to the median of the
        newest samples. Returns None (and sets `last_error`) on failure.

        Only a running engine calibrates. A stop or restart at any point
        before the new baseline is applied cancels the run.
        """
        with self._state_lock:
            running, gen = self._running, self._generation
        try:
            if not running:
                raise CalibrationFailure("Calibration needs a running engine")
            check = partial(self._check_calibration_generation, gen)
            baseline = self._calibrator.calibrate(partial(self._calibration_snapshot, gen),
                                                  on_hold_started=check)
            with self._state_lock:
                check()
                with self._tick_lock:
                    self._baseline = baseline
        except CalibrationFailure as e:
            logger.warning("Calibration failed: %s", e)
            self._last_error = str(e)
            return None

        self.settings.update({
            'reference_pitch': baseline.reference_pitch,
            'reference_roll': baseline.reference_roll
        })
        return baseline

    def calibrate_in_background(self) -> threading.Thread:
        """Run `calibrate_baseline_posture` on a daemon thread (for UI callers)."""
        thread = threading.Thread(target=self.calibrate_baseline_posture,
                                  name="calibration", daemon=True)
        thread.start()
        return thread

    def _check_calibration_generation(self, gen: int):
        if gen != self._generation:
            raise CalibrationCancelled()

    def _calibration_snapshot(self, gen: int) -> CalibrationSnapshot:
        self._check_calibration_generation(gen)
        window = self.config.calibration_window
        with self._tick_lock:
            return CalibrationSnapshot(
                pitch_samples=self._session.pitch_history.tail(window),
                roll_samples=self._session.roll_history.tail(window),
                current_pitch=self._pitch,
                current_roll=self._roll,
            )

    def _record_error(self, message: str):
        self._last_error = message

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def _set_threshold(self, key: str, value: float):
        value = float(value)
        self._thresholds = Thresholds(**{**self._thresholds.to_dict(), key: value})
        self.settings.set(key, value)

    @property
    def thresholds(self) -> Thresholds:
        return self._thresholds

    @property
    def poor_posture_threshold(self) -> float:
        return self._thresholds.poor_posture_threshold

    @poor_posture_threshold.setter
    def poor_posture_threshold(self, value: float):
        self._set_threshold('poor_posture_threshold', value)

    @property
    def warning_threshold(self) -> float:
        return self._thresholds.warning_threshold

    @warning_threshold.setter
    def warning_threshold(self, value: float):
        self._set_threshold('warning_threshold', value)

    @property
    def roll_threshold(self) -> float:
        return self._thresholds.roll_threshold

    @roll_threshold.setter
    def roll_threshold(self, value: float):
        self._set_threshold('roll_threshold', value)

    # -------------------------------------------------------------------------
    # Published state
    # -------------------------------------------------------------------------

    @property
    def pitch(self) -> float:
        return self._pitch

    @property
    def roll(self) -> float:
        return self._roll

    @property
    def yaw(self) -> float:
        return self._yaw

    @property
    def rotation_rate(self) -> Vector3:
        return self._rotation_rate

    @property
    def user_acceleration(self) -> Vector3:
        return self._user_acceleration

    @property
    def gravity(self) -> Vector3:
        return self._gravity

    @property
    def is_device_connected(self) -> bool:
        return self._is_device_connected

    @property
    def connection_status(self) -> str:
        return self._connection_status

    @property
    def posture_state(self) -> PostureState:
        return self._classifier.state

    @property
    def pitch_history(self) -> Tuple[float, ...]:
        return tuple(self._session.pitch_history.snapshot())

    @property
    def roll_history(self) -> Tuple[float, ...]:
        return tuple(self._session.roll_history.snapshot())

    @property
    def poor_posture_duration(self) -> float:
        return self._session.poor_posture_duration

    @property
    def total_session_time(self) -> float:
        return self._session.total_session_time

    @property
    def poor_posture_percentage(self) -> int:
        return self._session.poor_posture_percentage

    @property
    def is_simulation_mode(self) -> bool:
        return self._is_simulation_mode

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    def is_calibrating(self) -> bool:
        return self._calibrator.is_calibrating

    @property
    def is_poor_posture_now(self) -> bool:
        return self._session.is_poor_posture_now

    @property
    def reference_pitch(self) -> float:
        return self._baseline.reference_pitch

    @property
    def reference_roll(self) -> float:
        return self._baseline.reference_roll

    @property
    def baseline(self) -> Baseline:
        return self._baseline

    def history_summary(self):
        with self._tick_lock:
            return self._session.history_summary()

    def snapshot(self) -> MonitorSnapshot:
        """Consistent copy of all published fields."""
        with self._tick_lock:
            return MonitorSnapshot(
                pitch=self._pitch,
                roll=self._roll,
                yaw=self._yaw,
                rotation_rate=self._rotation_rate,
                user_acceleration=self._user_acceleration,
                gravity=self._gravity,
                is_device_connected=self._is_device_connected,
                connection_status=self._connection_status,
                posture_state=self._classifier.state,
                pitch_history=tuple(self._session.pitch_history.snapshot()),
                roll_history=tuple(self._session.roll_history.snapshot()),
                poor_posture_duration=self._session.poor_posture_duration,
                poor_posture_percentage=self._session.poor_posture_percentage,
                is_simulation_mode=self._is_simulation_mode,
                last_error=self._last_error,
                is_calibrating=self._calibrator.is_calibrating,
                is_poor_posture_now=self._session.is_poor_posture_now,
                reference_pitch=self._baseline.reference_pitch,
                reference_roll=self._baseline.reference_roll,
                thresholds=self._thresholds,
            )
