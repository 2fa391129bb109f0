"""
Tests for the centered moving average.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from core.signal_processing import WindowSizeError, central_moving_average


class TestCentralMovingAverage:
    """Tests for central_moving_average."""

    def test_even_window(self):
        """Window 4 over 1..10: centers 2..7, each averaging [i-2, i+2)."""
        result = central_moving_average(np.arange(1, 11), 4)

        assert len(result) == 6
        assert_allclose(result, [2.5, 3.5, 4.5, 5.5, 6.5, 7.5])

    def test_odd_window_uses_integer_half(self):
        """Window 5 spans 2 left + 2 right samples but still divides by 5."""
        result = central_moving_average([5.0] * 8, 5)

        # centers [2, 6): four outputs of 20 / 5
        assert len(result) == 4
        assert_allclose(result, [4.0, 4.0, 4.0, 4.0])

    def test_window_two(self):
        result = central_moving_average([1, 3, 5, 7], 2)

        assert_allclose(result, [2.0, 4.0])

    def test_returns_floats_for_integer_input(self):
        result = central_moving_average(np.array([1, 2, 3, 4], dtype=np.int64), 2)

        assert result.dtype == np.float64
        assert_allclose(result, [1.5, 2.5])

    def test_negative_values(self):
        result = central_moving_average([-20, -20, -21, -21, -22], 2)

        assert_allclose(result, [-20.0, -20.5, -21.0])

    @pytest.mark.parametrize("n,window", [(4, 4), (3, 4), (0, 2), (50, 50)])
    def test_window_not_smaller_than_series(self, n, window):
        with pytest.raises(WindowSizeError) as excinfo:
            central_moving_average(np.ones(n), window)

        assert f"({window})" in str(excinfo.value)
        assert f"length {n}" in str(excinfo.value)

    def test_zero_window_rejected(self):
        with pytest.raises(WindowSizeError):
            central_moving_average(np.ones(10), 0)

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            central_moving_average([1, 2], 5)
