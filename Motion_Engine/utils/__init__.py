"""Utility modules for signal processing."""
from .low_pass_filter import LowPassFilter, low_pass_filter
from .rolling_stats import RollingHistory, HistorySummary, median
