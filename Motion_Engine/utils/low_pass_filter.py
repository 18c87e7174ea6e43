"""Exponential low-pass filter for head pitch smoothing."""


DEFAULT_ALPHA = 0.2


def low_pass_filter(current: float, previous: float, alpha: float = DEFAULT_ALPHA) -> float:
    """previous * (1 - alpha) + current * alpha."""
    return previous * (1.0 - alpha) + current * alpha


class LowPassFilter:
    """Stateful wrapper carrying the previous output between ticks."""

    def __init__(self, alpha: float = DEFAULT_ALPHA, initial_value: float = 0.0):
        self.alpha = alpha
        self.x = initial_value

    def update(self, measurement: float) -> float:
        self.x = low_pass_filter(measurement, self.x, self.alpha)
        return self.x

    @property
    def value(self) -> float:
        return self.x

    def reset(self, value: float = 0.0):
        self.x = value
