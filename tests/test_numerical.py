"""Tests for numerical primitives."""

from datetime import datetime

import numpy as np
import pandas as pd
import pytest

from rate_transient.numerical import (
    dates_to_days,
    logarithmic_derivative,
    moving_average,
    remove_invalid_points,
    trapezoidal_integrate,
    valid_mask,
)


class TestTrapezoidalIntegrate:
    """Test cumulative trapezoidal integration."""

    def test_irregular_spacing(self):
        """Test integration over unevenly spaced points."""
        result = trapezoidal_integrate(np.array([0.0, 1.0, 3.0]), np.array([1.0, 1.0, 2.0]))

        np.testing.assert_allclose(result, [0.0, 1.0, 4.0])

    def test_first_value_is_zero(self):
        """Test that the running integral starts at zero."""
        x = np.array([2.0, 5.0, 9.0])
        result = trapezoidal_integrate(x, np.array([3.0, 1.0, 4.0]))

        assert result[0] == 0.0
        assert len(result) == len(x)

    def test_constant_function(self):
        """Test integrating a constant gives a linear ramp."""
        x = np.linspace(0, 10, 11)
        result = trapezoidal_integrate(x, np.full(11, 2.0))

        np.testing.assert_allclose(result, 2.0 * x)

    @pytest.mark.parametrize("n", [0, 1])
    def test_short_input(self, n):
        """Test that fewer than two points give zeros."""
        result = trapezoidal_integrate(np.ones(n), np.ones(n))

        assert len(result) == n
        assert np.all(result == 0)


class TestLogarithmicDerivative:
    """Test derivative with respect to ln(x)."""

    def test_linear_in_log(self):
        """Test that y = a*ln(x) has constant derivative a."""
        x = np.array([1.0, 2.0, 4.0, 8.0, 20.0])
        y = 2.0 * np.log(x)

        result = logarithmic_derivative(x, y)

        np.testing.assert_allclose(result, 2.0)

    def test_endpoint_differences(self):
        """Test forward and backward differences at the ends."""
        x = np.array([1.0, np.e, np.e**3])
        y = np.array([0.0, 1.0, 5.0])

        result = logarithmic_derivative(x, y)

        assert result[0] == pytest.approx(1.0)
        assert result[1] == pytest.approx(5.0 / 3.0)
        assert result[2] == pytest.approx(2.0)

    def test_equal_adjacent_x_is_not_finite(self):
        """Test that equal adjacent abscissae are not guarded."""
        result = logarithmic_derivative(np.array([1.0, 1.0, 2.0]), np.array([1.0, 2.0, 3.0]))

        assert not np.isfinite(result[0])

    def test_single_point(self):
        """Test that a single point yields NaN instead of raising."""
        result = logarithmic_derivative(np.array([1.0]), np.array([1.0]))

        assert len(result) == 1
        assert np.isnan(result[0])


class TestMovingAverage:
    """Test centered moving average."""

    def test_window_three(self):
        """Test clipped window at the edges."""
        result = moving_average(np.array([1.0, 2.0, 3.0, 4.0, 5.0]), 3)

        np.testing.assert_allclose(result, [1.5, 2.0, 3.0, 4.0, 4.5])

    def test_window_five(self):
        """Test the default Blasingame smoothing window."""
        result = moving_average(np.array([1.0, 2.0, 3.0, 4.0, 5.0]), 5)

        np.testing.assert_allclose(result, [2.0, 2.5, 3.0, 3.5, 4.0])

    def test_window_one_is_identity(self):
        """Test that a unit window leaves the data unchanged."""
        data = np.array([3.0, 1.0, 4.0, 1.0, 5.0])

        np.testing.assert_allclose(moving_average(data, 1), data)

    def test_window_larger_than_data(self):
        """Test that an oversized window averages everything."""
        result = moving_average(np.array([1.0, 2.0, 3.0]), 11)

        np.testing.assert_allclose(result, [2.0, 2.0, 2.0])


class TestInvalidPoints:
    """Test finite/positive filtering."""

    def test_remove_invalid_points(self):
        """Test that indices invalid in any array are dropped everywhere."""
        x = np.array([1.0, 0.0, 3.0, 4.0, np.nan])
        y = np.array([2.0, 5.0, np.inf, -1.0, 1.0])

        x_valid, y_valid = remove_invalid_points(x, y)

        np.testing.assert_array_equal(x_valid, [1.0])
        np.testing.assert_array_equal(y_valid, [2.0])

    def test_valid_mask(self):
        """Test mask over three arrays."""
        mask = valid_mask(
            np.array([1.0, 2.0, 3.0]),
            np.array([1.0, -2.0, 3.0]),
            np.array([1.0, 2.0, 3.0]),
        )

        np.testing.assert_array_equal(mask, [True, False, True])

    def test_all_valid(self):
        """Test that clean data passes unchanged."""
        x = np.array([1.0, 2.0])
        (result,) = remove_invalid_points(x)

        np.testing.assert_array_equal(result, x)


class TestDatesToDays:
    """Test elapsed day conversion."""

    def test_fractional_days(self):
        """Test that fractional days are preserved."""
        dates = [
            datetime(2023, 1, 1),
            datetime(2023, 1, 1, 12),
            datetime(2023, 1, 3),
        ]

        np.testing.assert_allclose(dates_to_days(dates), [0.0, 0.5, 2.0])

    def test_first_is_zero(self):
        """Test that the first element is exactly zero."""
        days = dates_to_days(pd.date_range("2021-06-01", periods=5, freq="7D"))

        assert days[0] == 0.0
        np.testing.assert_allclose(days, [0, 7, 14, 21, 28])

    def test_empty(self):
        """Test empty input."""
        assert len(dates_to_days([])) == 0
