import itertools

import pytest

from Motion_Engine.utils.rolling_stats import RollingHistory, median


def test_median_even_count_averages_middle_values():
    assert median([1, 2, 3, 4]) == 2.5


def test_median_single_element():
    assert median([7.5]) == 7.5


def test_median_invariant_under_reordering():
    values = [3.0, -1.0, 8.0, 2.0, 5.0]
    expected = median(values)
    for perm in itertools.permutations(values):
        assert median(list(perm)) == expected


def test_median_empty_raises():
    with pytest.raises(ValueError):
        median([])


def test_history_keeps_last_capacity_samples_in_order():
    history = RollingHistory(capacity=100)
    for i in range(150):
        history.append(float(i))
    assert len(history) == 100
    assert history.snapshot() == [float(i) for i in range(50, 150)]


def test_tail_and_snapshot_are_copies():
    history = RollingHistory(capacity=10, values=[1.0, 2.0, 3.0])
    tail = history.tail(2)
    snap = history.snapshot()
    history.append(4.0)
    assert tail == [2.0, 3.0]
    assert snap == [1.0, 2.0, 3.0]
    assert history.tail(0) == []
    assert history.tail(50) == [1.0, 2.0, 3.0, 4.0]


def test_summary():
    history = RollingHistory(capacity=5, values=[1.0, 2.0, 3.0, 4.0])
    s = history.summary()
    assert s.count == 4
    assert s.mean == pytest.approx(2.5)
    assert s.median == pytest.approx(2.5)
    assert (s.min, s.max) == (1.0, 4.0)
    assert RollingHistory(3).summary().count == 0


def test_invalid_capacity():
    with pytest.raises(ValueError):
        RollingHistory(0)
