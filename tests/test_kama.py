"""Tests for the streaming KAMA recurrence."""

import math
import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from indicators.kama import (
    FAST_CONSTANT,
    SLOW_CONSTANT,
    AdaptiveSmoother,
    InvalidParameterError,
    MAXIMUM_LOOKBACK_PERIOD,
    efficiency_ratio,
    is_zero,
    iter_kama,
    smoothing_constant,
)


def _collect(period, values, indices=None):
    emitted = []
    smoother = AdaptiveSmoother(period, lambda value, index: emitted.append((value, index)))
    if indices is None:
        indices = range(len(values))
    for value, index in zip(values, indices):
        smoother.submit(value, index)
    return smoother, emitted


def _reference_kama(values, period):
    """Brute-force KAMA: rescans the window for every bar."""
    out = []
    prev = values[period - 1]
    for t in range(period, len(values)):
        net = values[t] - values[t - period]
        noise = sum(abs(values[i] - values[i - 1]) for i in range(t - period + 1, t + 1))
        if noise <= net or abs(noise) < 1e-14:
            er = 1.0
        else:
            er = abs(net / noise)
        sc = (er * (2 / 3 - 2 / 31) + 2 / 31) ** 2
        prev = prev + (values[t] - prev) * sc
        out.append(prev)
    return out


class TestConstruction:
    @pytest.mark.parametrize("period", [1, 0, -5, MAXIMUM_LOOKBACK_PERIOD + 1])
    def test_invalid_period(self, period):
        with pytest.raises(InvalidParameterError):
            AdaptiveSmoother(period, lambda value, index: None)

    @pytest.mark.parametrize("period", [2, MAXIMUM_LOOKBACK_PERIOD])
    def test_valid_period_bounds(self, period):
        smoother = AdaptiveSmoother(period, lambda value, index: None)
        assert smoother.time_period == period
        assert smoother.lookback_period == period

    def test_missing_callback(self):
        with pytest.raises(InvalidParameterError):
            AdaptiveSmoother(10, None)

    def test_invalid_parameter_is_value_error(self):
        with pytest.raises(ValueError):
            AdaptiveSmoother(1, lambda value, index: None)

    def test_non_integer_period(self):
        with pytest.raises(InvalidParameterError):
            AdaptiveSmoother(2.5, lambda value, index: None)

    def test_numpy_integer_period(self):
        smoother = AdaptiveSmoother(np.int64(5), lambda value, index: None)
        assert smoother.time_period == 5

    def test_initial_state(self):
        smoother = AdaptiveSmoother(10, lambda value, index: None)
        assert smoother.data_length == 0
        assert smoother.valid_from_bar == -1
        assert smoother.max_value == -math.inf
        assert smoother.min_value == math.inf


class TestWarmup:
    @pytest.mark.parametrize("period", [2, 3, 5, 25])
    def test_first_emission_after_period_plus_one_samples(self, period):
        values = [100.0 + i % 3 for i in range(period + 1)]
        smoother, emitted = _collect(period, values[:period])
        assert emitted == []

        smoother.submit(values[period], period)
        assert len(emitted) == 1
        assert emitted[0][1] == period
        assert smoother.valid_from_bar == period
        assert smoother.data_length == 1

    def test_one_emission_per_sample_after_warmup(self):
        values = list(np.linspace(1.0, 5.0, 40))
        smoother, emitted = _collect(5, values)
        assert len(emitted) == len(values) - 5
        assert [index for _, index in emitted] == list(range(5, 40))
        assert smoother.data_length == len(emitted)

    def test_index_is_pass_through_label(self):
        indices = [100, 105, 110, 111, 200]
        smoother, emitted = _collect(2, [10.0, 11.0, 9.0, 12.0, 15.0], indices)
        assert [index for _, index in emitted] == [110, 111, 200]
        assert smoother.valid_from_bar == 110


class TestRecurrence:
    def test_concrete_sequence(self):
        smoother, emitted = _collect(2, [10.0, 11.0, 9.0, 12.0, 15.0])

        # warm-up: seeded from the previous close (11), noise 1 + 2, net 9 - 10
        first = 11.0 + (9.0 - 11.0) * smoothing_constant(1.0 / 3.0)
        # noise 3 - 1 + 3 = 5, net 12 - 11
        second = first + (12.0 - first) * smoothing_constant(0.2)
        # noise 5 - 2 + 3 = 6, net 15 - 9: fully efficient
        third = second + (15.0 - second) * smoothing_constant(1.0)

        assert [index for _, index in emitted] == [2, 3, 4]
        values = [value for value, _ in emitted]
        assert values == pytest.approx([first, second, third], rel=1e-12)
        assert all(math.isfinite(v) for v in values)

    def test_window_never_exceeds_period_plus_one(self):
        period = 2
        smoother = AdaptiveSmoother(period, lambda value, index: None)
        for index, value in enumerate([10.0, 11.0, 9.0, 12.0, 15.0]):
            smoother.submit(value, index)
            assert len(smoother._period_history) <= period + 1

    def test_constant_input(self):
        _, emitted = _collect(4, [42.5] * 30)
        assert [value for value, _ in emitted] == [42.5] * 26

    def test_monotonic_trend_uses_fast_constant(self):
        values = [float(v) for v in range(1, 51)]
        _, emitted = _collect(10, values)

        fast_sq = (2.0 / 3.0) ** 2
        prev = values[9]
        for (value, index) in emitted:
            expected = prev + (values[index] - prev) * fast_sq
            assert value == pytest.approx(expected, rel=1e-12)
            prev = value

    def test_first_sample_zero_counts_towards_noise(self):
        _, emitted = _collect(2, [0.0, 3.0, 1.0])
        # noise |3 - 0| + |1 - 3| = 5, net 1 - 0 = 1
        expected = 3.0 + (1.0 - 3.0) * smoothing_constant(0.2)
        assert emitted[0][0] == pytest.approx(expected, rel=1e-12)

    def test_negative_inputs(self):
        values = [-5.0, -7.0, -4.0, -6.0, -3.0, -8.0]
        _, emitted = _collect(3, values)
        assert [value for value, _ in emitted] == pytest.approx(
            _reference_kama(values, 3), rel=1e-12
        )

    @pytest.mark.parametrize("period", [2, 7, 25])
    def test_matches_brute_force_reference(self, close_series, period):
        values = close_series.tolist()
        _, emitted = _collect(period, values)
        assert [value for value, _ in emitted] == pytest.approx(
            _reference_kama(values, period), rel=1e-9
        )

    def test_rolling_noise_matches_window_rescan(self, close_series):
        period = 14
        values = close_series.tolist()
        smoother, _ = _collect(period, values)
        tail = values[-(period + 1):]
        expected = sum(abs(b - a) for a, b in zip(tail, tail[1:]))
        assert smoother._sum_roc == pytest.approx(expected, rel=1e-9)


class TestResultBounds:
    def test_bounds_track_emitted_values(self, close_series):
        smoother, emitted = _collect(10, close_series.tolist())
        values = [value for value, _ in emitted]
        assert smoother.max_value == max(values)
        assert smoother.min_value == min(values)
        assert smoother.data_length == len(values)

    def test_bounds_untouched_during_warmup(self):
        smoother, _ = _collect(10, [1.0, 2.0, 3.0])
        assert smoother.max_value == -math.inf
        assert smoother.min_value == math.inf


class TestHelpers:
    def test_is_zero_epsilon(self):
        assert is_zero(0.0)
        assert is_zero(5e-15)
        assert is_zero(-5e-15)
        assert not is_zero(1e-13)

    def test_efficiency_ratio_clamps(self):
        assert efficiency_ratio(0.0, 0.0) == 1.0
        assert efficiency_ratio(1.0, 1e-15) == 1.0
        assert efficiency_ratio(5.0, 5.0) == 1.0
        assert efficiency_ratio(-1.0, 4.0) == 0.25

    def test_efficiency_ratio_in_unit_interval(self):
        rng = np.random.default_rng(7)
        for _ in range(500):
            net = rng.normal(0.0, 10.0)
            noise = abs(net) + abs(rng.normal(0.0, 10.0))
            er = efficiency_ratio(net, noise)
            assert 0.0 <= er <= 1.0

    def test_smoothing_constant_range(self):
        slow_sq = (2.0 / 31.0) ** 2
        fast_sq = (2.0 / 3.0) ** 2
        assert smoothing_constant(0.0) == pytest.approx(slow_sq, rel=1e-12)
        assert smoothing_constant(1.0) == pytest.approx(fast_sq, rel=1e-12)
        for er in np.linspace(0.0, 1.0, 21):
            sc = smoothing_constant(er)
            assert slow_sq - 1e-15 <= sc <= fast_sq + 1e-15

    def test_constants(self):
        assert FAST_CONSTANT == pytest.approx(0.6667, abs=1e-4)
        assert SLOW_CONSTANT == pytest.approx(0.0645, abs=1e-4)


class TestIterKama:
    def test_matches_callback(self, close_series):
        values = close_series.tolist()
        _, emitted = _collect(12, values)
        pulled = list(iter_kama(values, 12))
        assert pulled == [(index, value) for value, index in emitted]

    def test_short_input_yields_nothing(self):
        assert list(iter_kama([1.0, 2.0, 3.0], 5)) == []

    def test_is_lazy(self):
        gen = iter_kama(iter([1.0, 2.0, 3.0, 4.0]), 2)
        assert next(gen) == (2, pytest.approx(2.0 + (3.0 - 2.0) * smoothing_constant(1.0)))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
