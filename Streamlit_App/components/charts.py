"""Plotly chart components for the dashboard."""

import plotly.graph_objects as go
from typing import Sequence

from Motion_Engine.config import PERCENTAGE_ALERT_LEVEL
from Motion_Engine.core.posture_state import PostureLevel, Thresholds

# Light theme colors (app uses #f8fafc background)
TEXT_COLOR = "#334155"
GRID_COLOR = "rgba(0,0,0,0.08)"
TICK_COLOR = "#64748b"
BORDER_COLOR = "#94a3b8"

GOOD_COLOR = "#059669"
WARNING_COLOR = "#d97706"
ALERT_COLOR = "#dc2626"

STATE_COLORS = {
    PostureLevel.GOOD: GOOD_COLOR,
    PostureLevel.WARNING: WARNING_COLOR,
    PostureLevel.ALERT: ALERT_COLOR,
}


def state_color(level: PostureLevel) -> str:
    return STATE_COLORS.get(level, GOOD_COLOR)


def percentage_color(percentage: int, is_poor_posture_now: bool) -> str:
    """Red while posture is bad or the session share reaches the alert level."""
    return ALERT_COLOR if is_poor_posture_now or percentage >= PERCENTAGE_ALERT_LEVEL else GOOD_COLOR


def create_posture_gauge(percentage: int, is_poor_posture_now: bool = False) -> go.Figure:
    """Create poor-posture share gauge."""
    color = percentage_color(percentage, is_poor_posture_now)

    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=percentage,
        domain={'x': [0, 1], 'y': [0, 1]},
        title={'text': "Poor Posture", 'font': {'size': 14, 'color': TEXT_COLOR}},
        number={'font': {'size': 32, 'color': color}, 'suffix': '%'},
        gauge={
            'axis': {'range': [0, 100], 'tickcolor': TICK_COLOR},
            'bar': {'color': color},
            'bgcolor': "rgba(0,0,0,0)",
            'bordercolor': BORDER_COLOR,
            'steps': [
                {'range': [0, PERCENTAGE_ALERT_LEVEL], 'color': 'rgba(5,150,105,0.15)'},
                {'range': [PERCENTAGE_ALERT_LEVEL, 100], 'color': 'rgba(220,38,38,0.15)'}
            ]
        }
    ))

    fig.update_layout(
        paper_bgcolor='rgba(0,0,0,0)', plot_bgcolor='rgba(0,0,0,0)',
        font={'color': TEXT_COLOR}, height=220, margin=dict(l=20, r=20, t=40, b=20)
    )
    return fig


def create_pitch_chart(pitch_history: Sequence[float], reference_pitch: float,
                       thresholds: Thresholds) -> go.Figure:
    """Pitch history with the forward-droop and leaning-back limits."""
    poor_line = reference_pitch + thresholds.poor_posture_threshold
    warning_line = reference_pitch + thresholds.warning_threshold
    values = list(pitch_history)
    lower = min(values + [poor_line]) - 10
    upper = max(values + [reference_pitch, warning_line]) + 10

    fig = go.Figure()
    if values:
        fig.add_trace(go.Scatter(
            x=list(range(len(values))), y=values, mode='lines', name='Pitch',
            line=dict(color='#0891b2', width=2)
        ))

    fig.add_hline(y=reference_pitch, line_dash="dot", line_color=BORDER_COLOR, annotation_text="Baseline")
    fig.add_hline(y=warning_line, line_dash="dash", line_color=WARNING_COLOR, annotation_text="Leaning back")
    fig.add_hline(y=poor_line, line_dash="dash", line_color=ALERT_COLOR, annotation_text="Poor posture")

    fig.update_layout(
        paper_bgcolor='rgba(0,0,0,0)', plot_bgcolor='rgba(0,0,0,0)',
        font={'color': TEXT_COLOR}, height=250, margin=dict(l=40, r=40, t=20, b=40),
        xaxis=dict(title="Sample", showgrid=True, gridcolor=GRID_COLOR),
        yaxis=dict(title="Pitch (°)", range=[lower, upper], showgrid=True, gridcolor=GRID_COLOR),
        showlegend=False
    )
    return fig


def create_roll_chart(roll_history: Sequence[float], reference_roll: float,
                      roll_threshold: float) -> go.Figure:
    """Roll history with the ±threshold band around the baseline."""
    values = list(roll_history)
    max_abs = max([15.0, roll_threshold] + [abs(v - reference_roll) for v in values]) + 5

    fig = go.Figure()
    if values:
        fig.add_trace(go.Scatter(
            x=list(range(len(values))), y=values, mode='lines', name='Roll',
            line=dict(color='#7c3aed', width=2)
        ))

    fig.add_hrect(y0=reference_roll - roll_threshold, y1=reference_roll + roll_threshold,
                  fillcolor='rgba(5,150,105,0.12)', line_width=0)
    fig.add_hline(y=reference_roll, line_dash="dot", line_color=BORDER_COLOR, annotation_text="Baseline")

    fig.update_layout(
        paper_bgcolor='rgba(0,0,0,0)', plot_bgcolor='rgba(0,0,0,0)',
        font={'color': TEXT_COLOR}, height=200, margin=dict(l=40, r=40, t=20, b=40),
        xaxis=dict(title="Sample", showgrid=True, gridcolor=GRID_COLOR),
        yaxis=dict(title="Roll (°)", range=[reference_roll - max_abs, reference_roll + max_abs],
                   showgrid=True, gridcolor=GRID_COLOR),
        showlegend=False
    )
    return fig
