"""Bounded sample history and summary statistics."""

import numpy as np
from collections import deque
from dataclasses import dataclass
from typing import Iterable, List, Optional, Dict, Any, Sequence


def median(values: Sequence[float]) -> float:
    """Median of a non-empty sequence; even counts average the two middle values."""
    if len(values) == 0:
        raise ValueError("median of empty sequence")
    return float(np.median(np.asarray(values, dtype=float)))


@dataclass
class HistorySummary:
    mean: float
    std: float
    min: float
    max: float
    median: float
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mean': self.mean, 'std': self.std, 'min': self.min,
            'max': self.max, 'median': self.median, 'count': self.count
        }


class RollingHistory:
    """FIFO history of the most recent samples; oldest dropped beyond capacity."""

    def __init__(self, capacity: int = 100, values: Optional[Iterable[float]] = None):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._data: deque = deque(values or (), maxlen=capacity)

    def append(self, value: float):
        self._data.append(float(value))

    def snapshot(self) -> List[float]:
        """Copy of the buffer, oldest first."""
        return list(self._data)

    def tail(self, n: int) -> List[float]:
        """Copy of the newest `n` samples, oldest first."""
        if n <= 0:
            return []
        data = list(self._data)
        return data[-n:]

    def summary(self) -> HistorySummary:
        if not self._data:
            return HistorySummary(0.0, 0.0, 0.0, 0.0, 0.0, 0)
        arr = np.asarray(self._data, dtype=float)
        std = float(np.std(arr, ddof=1)) if len(arr) > 1 else 0.0
        return HistorySummary(float(arr.mean()), std, float(arr.min()), float(arr.max()),
                              float(np.median(arr)), len(arr))

    def clear(self):
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)
