"""Numerical primitives shared by the rate transient analysis modules.

This module provides:
- Cumulative trapezoidal integration over irregular spacing
- Logarithmic derivative dy/d(ln x)
- Centered moving average with clipped edges
- Finite/positive filtering of parallel arrays
- Calendar dates to elapsed days conversion

None of these functions validate their inputs. Degenerate values (equal
adjacent abscissae, zeros, NaN) flow through as non-finite results and are
expected to be removed downstream with :func:`remove_invalid_points`.
"""

from typing import Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.integrate import cumulative_trapezoid

from .logging_config import get_logger

logger = get_logger(__name__)


def trapezoidal_integrate(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Cumulative trapezoidal integral of ``y`` with respect to ``x``.

    ``out[0] = 0`` and ``out[i] = out[i-1] + (y[i] + y[i-1]) / 2 * (x[i] - x[i-1])``.
    Irregular spacing is expected (field data rarely sits on a uniform grid).

    Args:
        x: Abscissa, non-decreasing
        y: Values to integrate

    Returns:
        Running integral with the same length as ``x``

    Example:
        >>> trapezoidal_integrate(np.array([0.0, 1.0, 3.0]), np.array([1.0, 1.0, 2.0]))
        array([0., 1., 4.])
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if len(x) < 2:
        return np.zeros(len(x))
    return cumulative_trapezoid(y, x, initial=0.0)


def logarithmic_derivative(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Derivative of ``y`` with respect to ``ln(x)``.

    Forward difference at the first point, central difference
    ``(y[i+1] - y[i-1]) / ln(x[i+1] / x[i-1])`` at interior points and
    backward difference at the last point. Equal adjacent ``x`` values give
    a zero log spacing and therefore infinite or NaN entries.

    Args:
        x: Strictly positive abscissa
        y: Ordinate

    Returns:
        Derivative array, same length as ``x``. Fewer than two points
        yields NaN entries.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    n = len(x)
    derivative = np.full(n, np.nan)
    if n < 2:
        return derivative

    with np.errstate(divide="ignore", invalid="ignore"):
        derivative[0] = (y[1] - y[0]) / np.log(x[1] / x[0])
        if n > 2:
            derivative[1:-1] = (y[2:] - y[:-2]) / np.log(x[2:] / x[:-2])
        derivative[-1] = (y[-1] - y[-2]) / np.log(x[-1] / x[-2])

    return derivative


def moving_average(data: np.ndarray, window_size: int) -> np.ndarray:
    """Centered moving average clipped at both boundaries.

    The half width is ``window_size // 2``; near the edges the window only
    covers the points that exist, so the average uses fewer samples.

    Args:
        data: Values to smooth
        window_size: Nominal window length

    Returns:
        Smoothed array with the same length as ``data``
    """
    data = np.asarray(data, dtype=float)
    n = len(data)
    half_window = max(int(window_size) // 2, 0)
    smoothed = np.empty(n)

    for i in range(n):
        start = max(0, i - half_window)
        end = min(n - 1, i + half_window)
        smoothed[i] = data[start : end + 1].mean()

    return smoothed


def valid_mask(*arrays: np.ndarray) -> np.ndarray:
    """Boolean mask of indices where every array is finite and strictly positive."""
    if not arrays:
        return np.zeros(0, dtype=bool)

    mask = np.ones(len(arrays[0]), dtype=bool)
    for values in arrays:
        values = np.asarray(values, dtype=float)
        with np.errstate(invalid="ignore"):
            mask &= np.isfinite(values) & (values > 0)
    return mask


def remove_invalid_points(*arrays: np.ndarray) -> Tuple[np.ndarray, ...]:
    """Filter parallel arrays down to the indices valid in all of them.

    An index survives only when every array holds a finite, strictly
    positive value there, so the returned arrays keep their index
    correspondence.

    Example:
        >>> x, y = remove_invalid_points(np.array([1.0, 0.0, 3.0]), np.array([2.0, 5.0, np.inf]))
        >>> x, y
        (array([1.]), array([2.]))
    """
    mask = valid_mask(*arrays)
    return tuple(np.asarray(values, dtype=float)[mask] for values in arrays)


def dates_to_days(dates: Sequence) -> np.ndarray:
    """Elapsed days since the first date, keeping fractional days."""
    if len(dates) == 0:
        return np.zeros(0)

    timestamps = pd.DatetimeIndex(pd.to_datetime(dates))
    elapsed = (timestamps - timestamps[0]) / pd.Timedelta(days=1)
    return np.asarray(elapsed, dtype=float)
