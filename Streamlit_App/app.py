"""
HeadMotion Posture
Main Streamlit Dashboard Application

Run with: streamlit run Streamlit_App/app.py
"""

import streamlit as st
import time
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from Motion_Engine.config import THRESHOLD_RANGES
from Motion_Engine.core.monitor import HeadMotionMonitor
from Motion_Engine.core.posture_state import GoodState, WarningState
from Streamlit_App.components.charts import (
    create_posture_gauge, create_pitch_chart, create_roll_chart, state_color
)

# Page config
st.set_page_config(
    page_title="HeadMotion Posture",
    page_icon="◉",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS - clean, minimal UI
st.markdown("""
<style>
    @import url('https://fonts.googleapis.com/css2?family=DM+Sans:wght@400;500;600;700&display=swap');

    .stApp { background: #f8fafc; }
    h1, h2, h3 { font-family: 'DM Sans', sans-serif !important; color: #0f172a !important; }

    .metric-card {
        background: #fff;
        border: 1px solid #e2e8f0;
        border-radius: 12px;
        padding: 20px;
        margin: 12px 0;
        box-shadow: 0 1px 3px rgba(0,0,0,0.05);
    }

    .metric-value { font-family: 'DM Sans', sans-serif; font-size: 2rem; font-weight: 600; }

    [data-testid="stSidebar"] { background: #f1f5f9; }
    [data-testid="stSidebar"] .stMarkdown { color: #334155; }
</style>
""", unsafe_allow_html=True)


def get_monitor() -> HeadMotionMonitor:
    """One engine per browser session, started on first use."""
    if 'monitor' not in st.session_state:
        monitor = HeadMotionMonitor()
        monitor.start()
        st.session_state.monitor = monitor
    return st.session_state.monitor


def describe_state(state) -> str:
    if isinstance(state, GoodState):
        return "Good posture"
    if isinstance(state, WarningState):
        return f"Warning ({state.time_above_threshold:.1f}s)"
    return f"Alert ({state.duration:.1f}s)"


def metric_card(value: str, label: str, color: str):
    st.markdown(f'<div class="metric-card"><div class="metric-value" style="color:{color}">{value}</div>'
                f'<small>{label}</small></div>', unsafe_allow_html=True)


def main():
    monitor = get_monitor()

    st.markdown("# HeadMotion Posture\n*Head tilt & posture monitoring*")

    # Sidebar
    with st.sidebar:
        st.markdown("## ⚙️ Settings")
        poor = THRESHOLD_RANGES['poor_posture_threshold']
        warn = THRESHOLD_RANGES['warning_threshold']
        roll = THRESHOLD_RANGES['roll_threshold']

        new_warn = st.slider("Leaning back (up) °", warn.low, warn.high,
                             warn.clamp(monitor.warning_threshold), 1.0)
        new_roll = st.slider("Tilt (left/right) °", roll.low, roll.high,
                             roll.clamp(monitor.roll_threshold), 1.0)
        new_poor = st.slider("Forward droop (down) °", poor.low, poor.high,
                             poor.clamp(monitor.poor_posture_threshold), 1.0)
        if new_warn != monitor.warning_threshold:
            monitor.warning_threshold = new_warn
        if new_roll != monitor.roll_threshold:
            monitor.roll_threshold = new_roll
        if new_poor != monitor.poor_posture_threshold:
            monitor.poor_posture_threshold = new_poor

        st.divider()
        if st.button("📏 Calibrate Posture", use_container_width=True, disabled=monitor.is_calibrating):
            monitor.calibrate_in_background()
            st.success("Calibration started! Hold your head still for 3 seconds.")
        if st.button("🔄 Reset Session", use_container_width=True):
            monitor.reset_session()
            st.rerun()
        if st.button("🔌 Restart", use_container_width=True):
            monitor.restart()
            st.rerun()

        st.divider()
        live = st.toggle("Live refresh", value=True)

    snap = monitor.snapshot()

    if snap.is_calibrating:
        st.info("Calibrating - keep your head in a neutral position...")
    st.caption(f"{'🧪 ' if snap.is_simulation_mode else ''}{snap.connection_status}")
    if snap.last_error:
        st.warning(snap.last_error)

    col_metrics, col_charts = st.columns([1, 1.2])

    with col_metrics:
        st.markdown("### 🧭 Orientation")
        c1, c2, c3 = st.columns(3)
        color = state_color(snap.posture_state.level)
        with c1:
            metric_card(f"{snap.pitch - snap.reference_pitch:+.1f}°", "Pitch vs baseline", color)
        with c2:
            metric_card(f"{snap.roll - snap.reference_roll:+.1f}°", "Roll vs baseline", color)
        with c3:
            metric_card(f"{snap.yaw:.1f}°", "Yaw", "#334155")
        metric_card(describe_state(snap.posture_state), "Posture state", color)

        gauge_fig = create_posture_gauge(snap.poor_posture_percentage, snap.is_poor_posture_now)
        st.plotly_chart(gauge_fig, use_container_width=True)
        st.caption(f"Poor posture time: {snap.poor_posture_duration:.0f}s")

    with col_charts:
        st.markdown("### 📈 History")
        if len(snap.pitch_history) >= 2:
            st.plotly_chart(create_pitch_chart(snap.pitch_history, snap.reference_pitch, snap.thresholds),
                            use_container_width=True)
            st.plotly_chart(create_roll_chart(snap.roll_history, snap.reference_roll,
                                              snap.thresholds.roll_threshold),
                            use_container_width=True)
        else:
            st.caption("Charts will appear once samples arrive")

    if live:
        time.sleep(0.5)
        st.rerun()


if __name__ == "__main__":
    main()
