import pytest

from Motion_Engine.core.posture_state import (
    AlertState, Baseline, GoodState, PostureClassifier, PostureLevel, Thresholds,
    WarningState, is_bad_posture, should_trigger_alert, state_to_dict
)

BASELINE = Baseline(0.0, 0.0)
THRESHOLDS = Thresholds(poor_posture_threshold=-15.0, warning_threshold=1.0, roll_threshold=1.0)


def run(classifier, samples, session_start=0.0):
    return [classifier.classify(pitch, roll, BASELINE, THRESHOLDS, t, session_start)
            for t, pitch, roll in samples]


def test_escalation_scenario():
    classifier = PostureClassifier()
    states = run(classifier, [(t, p, 0.0) for t, p in enumerate([0, 0, -20, -20, -20])])
    assert [type(s) for s in states] == [GoodState, GoodState, WarningState, WarningState, AlertState]
    assert states[2].time_above_threshold == pytest.approx(1.0)
    assert states[4].duration == pytest.approx(3.0)
    assert states[4].pitch == -20
    assert classifier.entered_alert


def test_cold_start_first_bad_sample_is_warning():
    classifier = PostureClassifier()
    state = classifier.classify(-40.0, 0.0, BASELINE, THRESHOLDS, 100.0, 0.0)
    assert isinstance(state, WarningState)
    assert state.time_above_threshold == 0.0


def test_cold_start_escalates_after_delay():
    classifier = PostureClassifier()
    states = run(classifier, [(0.0, -20, 0), (1.0, -20, 0), (2.0, -20, 0), (2.5, -20, 0)])
    assert [s.level for s in states] == [PostureLevel.WARNING] * 3 + [PostureLevel.ALERT]


def test_reverts_to_good_when_condition_clears():
    classifier = PostureClassifier()
    states = run(classifier, [(0, 0, 0), (1, -20, 0), (2, -20, 0), (4, -20, 0), (5, 0, 0)])
    assert isinstance(states[3], AlertState)
    assert isinstance(states[4], GoodState)
    assert states[4].duration == pytest.approx(5.0)


def test_entered_alert_only_on_transition():
    classifier = PostureClassifier()
    run(classifier, [(0, 0, 0), (1, -20, 0), (3.5, -20, 0)])
    assert classifier.entered_alert
    classifier.classify(-20, 0, BASELINE, THRESHOLDS, 4.0, 0.0)
    assert isinstance(classifier.state, AlertState)
    assert not classifier.entered_alert


def test_reset_restores_cold_start():
    classifier = PostureClassifier()
    run(classifier, [(0, 0, 0), (10, -20, 0)])
    classifier.reset()
    state = classifier.classify(-20, 0, BASELINE, THRESHOLDS, 20.0, 0.0)
    assert isinstance(state, WarningState)


@pytest.mark.parametrize("pitch,roll,expected", [
    (0.0, 0.0, False),
    (-15.0, 0.0, False),     # exactly at the droop limit
    (-15.5, 0.0, True),      # forward droop
    (1.0, 0.0, False),
    (1.5, 0.0, True),        # leaning back
    (0.0, 1.0, False),
    (0.0, -1.5, True),       # lateral tilt
])
def test_bad_posture_predicate(pitch, roll, expected):
    assert is_bad_posture(pitch, roll, BASELINE, THRESHOLDS) is expected


def test_predicate_is_relative_to_baseline():
    baseline = Baseline(reference_pitch=-10.0, reference_roll=5.0)
    assert not is_bad_posture(-10.0, 5.0, baseline, THRESHOLDS)
    assert is_bad_posture(-26.0, 5.0, baseline, THRESHOLDS)
    assert is_bad_posture(-10.0, 3.5, baseline, THRESHOLDS)


def test_inverted_pitch_bounds_match_nothing():
    inverted = Thresholds(poor_posture_threshold=10.0, warning_threshold=-10.0, roll_threshold=1.0)
    for pitch in (-90.0, -5.0, 0.0, 5.0, 90.0):
        assert not is_bad_posture(pitch, 0.0, BASELINE, inverted)
    assert is_bad_posture(0.0, 20.0, BASELINE, inverted)


def test_negative_roll_threshold_matches_nothing():
    t = Thresholds(roll_threshold=-1.0)
    assert not is_bad_posture(0.0, 30.0, BASELINE, t)


def test_thresholds_clamped():
    t = Thresholds(poor_posture_threshold=-60.0, warning_threshold=50.0, roll_threshold=-3.0).clamped()
    assert t == Thresholds(-45.0, 45.0, 0.0)


def test_state_helpers():
    assert should_trigger_alert(AlertState(-20.0, 3.0))
    assert not should_trigger_alert(WarningState(-20.0, 1.0))
    assert state_to_dict(GoodState(4.0)) == {'state': 'good', 'duration': 4.0}
    assert state_to_dict(WarningState(-20.0, 1.0))['state'] == 'warning'
