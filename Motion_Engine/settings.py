"""
Durable scalar settings.

Thresholds and the calibrated baseline survive restarts in a small JSON file.
Reads come from the in-memory cache; the file is written after every change
on a best-effort basis and a failed write never blocks classification.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Dict, Optional

from .config import DEFAULT_SETTINGS, THRESHOLD_RANGES, settings_path

logger = logging.getLogger(__name__)


class SettingsStore:
    """Key -> float store backed by a JSON file."""

    def __init__(self, path: Optional[Path] = None, defaults: Optional[Dict[str, float]] = None,
                 persist: bool = True):
        self.path = Path(path) if path else settings_path()
        self.defaults = dict(defaults or DEFAULT_SETTINGS)
        self.persist = persist
        self._values: Dict[str, float] = dict(self.defaults)
        self._lock = threading.Lock()
        if persist:
            self.load()

    def load(self) -> bool:
        """Merge persisted values into the cache. Returns True if a file was read."""
        if not self.path.exists():
            return False
        try:
            with open(self.path) as f:
                d = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, e)
            return False
        if not isinstance(d, dict):
            logger.warning("Ignoring settings file %s: not a JSON object", self.path)
            return False

        with self._lock:
            for key in self.defaults:
                value = d.get(key)
                if isinstance(value, (int, float)) and not isinstance(value, bool):
                    rng = THRESHOLD_RANGES.get(key)
                    self._values[key] = rng.clamp(float(value)) if rng else float(value)
        return True

    def save(self) -> bool:
        if not self.persist:
            return False
        with self._lock:
            payload = dict(self._values)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(payload, f, indent=2)
            return True
        except (OSError, TypeError) as e:
            logger.warning("Could not persist settings to %s: %s", self.path, e)
            return False

    def get(self, key: str) -> float:
        with self._lock:
            return self._values.get(key, self.defaults.get(key, 0.0))

    def set(self, key: str, value: float) -> bool:
        """Update the cache, then persist. Returns whether the write succeeded."""
        return self.update({key: value})

    def update(self, values: Dict[str, float]) -> bool:
        with self._lock:
            for key, value in values.items():
                self._values[key] = float(value)
        return self.save()

    def as_dict(self) -> Dict[str, float]:
        with self._lock:
            return dict(self._values)
