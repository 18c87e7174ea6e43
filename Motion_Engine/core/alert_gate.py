"""Alert cooldown gating and fire-and-forget alert notification."""

import logging
import sys
import threading
from typing import Callable, Optional

from ..config import ENGINE
from ..errors import NotificationFailure

logger = logging.getLogger(__name__)


class AlertGate:
    """Allows one alert per cooldown window."""

    def __init__(self, cooldown: float = ENGINE.alert_cooldown):
        self.cooldown = cooldown
        self.last_fired: Optional[float] = None

    def try_fire(self, now: float) -> bool:
        if self.last_fired is not None and now - self.last_fired < self.cooldown:
            return False
        self.last_fired = now
        return True

    def reset(self):
        self.last_fired = None


def terminal_bell():
    sys.stdout.write("\a")
    sys.stdout.flush()


class AlertNotifier:
    """
    Runs the alert side effect (a sound) on a daemon thread.

    Failures are logged and reported through `on_error`; they never reach the
    tick that triggered them.
    """

    def __init__(self, play: Optional[Callable[[], None]] = None,
                 on_error: Optional[Callable[[str], None]] = None):
        self.play = play or terminal_bell
        self.on_error = on_error
        self.fired = 0

    def notify(self) -> threading.Thread:
        self.fired += 1
        thread = threading.Thread(target=self._run, name="alert-notifier", daemon=True)
        thread.start()
        return thread

    def _run(self):
        try:
            self.play()
        except Exception as e:
            err = NotificationFailure(f"Alert sound failed: {e}")
            logger.warning("%s", err)
            if self.on_error is not None:
                self.on_error(str(err))
