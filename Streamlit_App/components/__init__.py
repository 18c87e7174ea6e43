"""Streamlit UI components."""
from .charts import create_posture_gauge, create_pitch_chart, create_roll_chart, state_color, percentage_color
