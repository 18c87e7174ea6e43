#!/usr/bin/env python3
"""
HeadMotion Posture - Console Demo
Run the posture engine without Streamlit. With no head-tracking device
attached the engine falls back to simulated motion.

Usage: python demo_console.py [--duration 30] [--calibrate]
"""

import argparse
import logging
import time
from pathlib import Path

from Motion_Engine.config import ENGINE
from Motion_Engine.core.monitor import HeadMotionMonitor
from Motion_Engine.core.posture_state import GoodState, WarningState
from Motion_Engine.settings import SettingsStore


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    return logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="HeadMotion Posture console demo")
    parser.add_argument("--duration", "-d", type=float, default=30.0, help="Seconds to run")
    parser.add_argument("--interval", "-i", type=float, default=1.0, help="Seconds between status lines")
    parser.add_argument("--calibrate", "-c", action="store_true", help="Calibrate baseline after start")
    parser.add_argument("--settings", type=Path, default=None, help="Settings JSON path")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args()


def format_state(state) -> str:
    if isinstance(state, GoodState):
        return "GOOD   "
    if isinstance(state, WarningState):
        return f"WARNING {state.time_above_threshold:4.1f}s"
    return f"ALERT   {state.duration:4.1f}s"


class ConsoleDemo:
    def __init__(self, settings_path=None):
        self.monitor = HeadMotionMonitor(settings=SettingsStore(settings_path))

    def run(self, duration: float, interval: float, calibrate: bool = False):
        self.monitor.start()
        try:
            if calibrate:
                # let the history fill before taking the median
                time.sleep(ENGINE.calibration_window * ENGINE.sample_interval)
                print("📏 Calibrating - hold your head still...")
                baseline = self.monitor.calibrate_baseline_posture()
                if baseline is not None:
                    print(f"✅ Baseline pitch={baseline.reference_pitch:.1f}° roll={baseline.reference_roll:.1f}°")

            end = time.monotonic() + duration
            while time.monotonic() < end:
                snap = self.monitor.snapshot()
                print(f"[{snap.connection_status}] pitch={snap.pitch:6.1f}° roll={snap.roll:6.1f}° "
                      f"yaw={snap.yaw:6.1f}°  {format_state(snap.posture_state)}  "
                      f"poor={snap.poor_posture_percentage:3d}%")
                time.sleep(interval)
        except KeyboardInterrupt:
            pass
        finally:
            self.monitor.stop()
            summary = self.monitor.history_summary()
            print(f"Pitch mean {summary['pitch'].mean:.1f}° ± {summary['pitch'].std:.1f}, "
                  f"roll mean {summary['roll'].mean:.1f}° ± {summary['roll'].std:.1f}")
            print("👋 Goodbye!")


def main():
    args = parse_args()
    setup_logging(args.log_level)
    print("\n" + "=" * 50)
    print("  HeadMotion Posture - Console Demo")
    print("=" * 50 + "\n")

    demo = ConsoleDemo(args.settings)
    demo.run(args.duration, args.interval, args.calibrate)


if __name__ == "__main__":
    main()
