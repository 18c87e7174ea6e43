from Motion_Engine.core.posture_state import PostureLevel, Thresholds
from Streamlit_App.components.charts import (
    ALERT_COLOR, GOOD_COLOR, WARNING_COLOR,
    create_pitch_chart, create_posture_gauge, create_roll_chart, percentage_color, state_color
)


def test_gauge_shows_percentage():
    fig = create_posture_gauge(37)
    assert fig.data[0].value == 37


def test_percentage_color_levels():
    assert percentage_color(40, False) == ALERT_COLOR
    assert percentage_color(39, False) == GOOD_COLOR
    assert percentage_color(0, True) == ALERT_COLOR


def test_state_colors():
    assert state_color(PostureLevel.GOOD) == GOOD_COLOR
    assert state_color(PostureLevel.WARNING) == WARNING_COLOR
    assert state_color(PostureLevel.ALERT) == ALERT_COLOR


def test_pitch_chart_traces_and_range():
    fig = create_pitch_chart([0.0, -3.0, 2.0], 0.0, Thresholds())
    assert len(fig.data) == 1
    lower, upper = fig.layout.yaxis.range
    assert lower <= -25.0
    assert upper >= 11.0

    empty = create_pitch_chart([], 0.0, Thresholds())
    assert len(empty.data) == 0


def test_roll_chart_band_follows_baseline():
    fig = create_roll_chart([4.0, 6.0], reference_roll=5.0, roll_threshold=2.0)
    assert len(fig.data) == 1
    band = fig.layout.shapes[0]
    assert (band.y0, band.y1) == (3.0, 7.0)
