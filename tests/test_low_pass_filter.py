import pytest

from Motion_Engine.utils.low_pass_filter import LowPassFilter, low_pass_filter


@pytest.mark.parametrize("x", [-45.0, -1.5, 0.0, 0.1, 12.25, 90.0])
def test_fixed_point(x):
    assert low_pass_filter(x, x) == pytest.approx(x)


@pytest.mark.parametrize("current,previous", [(10.0, 0.0), (-20.0, 5.0), (3.0, 3.5), (0.0, -30.0)])
def test_result_between_previous_and_current(current, previous):
    out = low_pass_filter(current, previous)
    assert min(current, previous) <= out <= max(current, previous)


def test_smoothing_factor():
    assert low_pass_filter(10.0, 0.0) == pytest.approx(2.0)
    assert low_pass_filter(0.0, 10.0) == pytest.approx(8.0)


def test_stateful_filter_carries_previous():
    f = LowPassFilter()
    assert f.update(-100.0) == pytest.approx(-20.0)
    assert f.update(-100.0) == pytest.approx(-36.0)
    assert f.value == pytest.approx(-36.0)
    f.reset()
    assert f.value == 0.0
