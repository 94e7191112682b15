import random

import pytest

from coinmerge.utils.weighted_picker import WeightedPicker, normalize_weights, pick, synthetic_weights


def test_pick_always_returns_member():
    picker = WeightedPicker((1, 5, 10), (0.5, 0.3, 0.2), rng=random.Random(3))
    assert set(picker.pick_many(500)) <= {1, 5, 10}


def test_frequencies_converge_to_weights():
    values = (1, 5, 10, 25)
    weights = (0.4, 0.3, 0.2, 0.1)
    picker = WeightedPicker(values, weights, rng=random.Random(11))
    n = 20000
    draws = picker.pick_many(n)
    for value, weight in zip(values, weights):
        assert draws.count(value) / n == pytest.approx(weight, abs=0.02)


def test_mismatched_weights_use_synthetic_series():
    weights = normalize_weights((1, 5, 10), (1.0, 2.0))
    expected = [w / 6.0 for w in synthetic_weights(3)]
    assert weights == pytest.approx(expected)
    assert synthetic_weights(3) == [3.0, 2.0, 1.0]


def test_missing_weights_use_synthetic_series():
    picker = WeightedPicker((1, 5))
    assert picker.normalized_weights == pytest.approx([2 / 3, 1 / 3])


def test_zero_total_falls_back_to_uniform():
    assert normalize_weights((1, 5, 10, 25), (0, 0, 0, 0)) == pytest.approx([0.25] * 4)


def test_negative_weights_are_clamped():
    assert normalize_weights((1, 5), (-3.0, 1.0)) == pytest.approx([0.0, 1.0])


def test_float_drift_returns_last_value():
    class Always:
        def random(self):
            return 0.99999999

    assert pick((1, 5, 10), (0.3, 0.3, 0.3), Always()) == 10


def test_empty_table_picks_nothing():
    assert pick((), (), random.Random(1)) is None
