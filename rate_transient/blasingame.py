"""Blasingame type curve diagnostic functions.

This module turns a production history into the Blasingame diagnostic
curves used for rate transient analysis:
- Material balance time te = Np / q
- Normalized rate q/Δp
- Rate integral (1/te) * ∫(q/Δp) dte
- Rate integral derivative d(rate integral)/d(ln te)

Noisy, zero or degenerate points are not errors: they are dropped by a final
cleaning step so the returned curves only hold finite, positive values.

References:
- Blasingame, T.A., McCray, T.L., and Lee, W.J., "Decline Curve Analysis for
  Variable Pressure Drop/Variable Flowrate Systems," SPE 21513, 1991.
- Palacio, J.C. and Blasingame, T.A., "Decline-Curve Analysis Using Type
  Curves - Analysis of Gas Well Production Data," SPE 25909, 1993.
"""

from typing import Optional, Tuple

import numpy as np

from .config import BlasingameConfig
from .logging_config import get_logger
from .numerical import (
    dates_to_days,
    logarithmic_derivative,
    moving_average,
    trapezoidal_integrate,
    valid_mask,
)
from .schemas import BlasingameOutput, ProductionSeries, WellStaticProperties

logger = get_logger(__name__)


def material_balance_time(
    rates: np.ndarray,
    cumulative: np.ndarray,
    zero_rate_floor: float = 0.001,
) -> np.ndarray:
    """Material balance time te = Np / q.

    During a shut-in (zero rate) te freezes at its previous value. A leading
    zero-rate point gets ``zero_rate_floor`` so te is never exactly zero.

    Args:
        rates: Production rates
        cumulative: Cumulative production
        zero_rate_floor: te assigned to a zero rate at index 0 (days)

    Returns:
        Material balance time (days)
    """
    rates = np.asarray(rates, dtype=float)
    cumulative = np.asarray(cumulative, dtype=float)
    te = np.empty(len(rates))

    for i in range(len(rates)):
        if rates[i] > 0:
            te[i] = cumulative[i] / rates[i]
        else:
            te[i] = te[i - 1] if i > 0 else zero_rate_floor

    return te


def pressure_drops(
    pressures: Optional[np.ndarray],
    initial_pressure: float,
    n_points: int,
    min_drop: float = 100.0,
    fallback_fraction: float = 0.35,
) -> Tuple[np.ndarray, bool]:
    """Pressure drawdown used to normalize rates.

    Measured pressures give Δp = max(pi - pwf, ``min_drop``); the floor keeps
    near-zero or negative drawdowns from blowing up q/Δp. Missing readings in
    a sparse pressure series also take the floor.

    Without a pressure series of matching length the drawdown is the
    constant ``fallback_fraction * pi``. This stands for an assumed average
    depletion and is a crude diagnostic-only estimate, not a physically
    derived value.

    Args:
        pressures: Flowing pressures (psi) or None
        initial_pressure: Initial reservoir pressure (psi)
        n_points: Length of the production series
        min_drop: Minimum drawdown for measured pressures (psi)
        fallback_fraction: Fraction of initial pressure used when estimating

    Returns:
        Tuple of (Δp array, whether Δp was estimated)
    """
    if pressures is not None and len(pressures) == n_points:
        drops = np.fmax(initial_pressure - np.asarray(pressures, dtype=float), min_drop)
        return drops, False

    return np.full(n_points, initial_pressure * fallback_fraction), True


def normalized_rate(rates: np.ndarray, drops: np.ndarray) -> np.ndarray:
    """Normalized rate q/Δp (STB/day/psi or Mscf/day/psi)."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.asarray(rates, dtype=float) / np.asarray(drops, dtype=float)


def rate_integral(te: np.ndarray, q_dd: np.ndarray) -> np.ndarray:
    """Rate integral: time-averaged normalized rate.

    (1/te) * ∫(q/Δp) dte, set to 0 where te is not positive.
    """
    te = np.asarray(te, dtype=float)
    integral = trapezoidal_integrate(te, q_dd)
    q_ddi = np.zeros(len(te))
    positive = te > 0
    with np.errstate(invalid="ignore", over="ignore"):
        q_ddi[positive] = integral[positive] / te[positive]
    return q_ddi


def rate_integral_derivative(
    te: np.ndarray,
    q_ddi: np.ndarray,
    smoothing_window: int = 5,
) -> np.ndarray:
    """Rate integral derivative d(q_ddi)/d(ln te).

    The rate integral is smoothed with a moving average first; numerical
    differentiation amplifies field-data noise.
    """
    smoothed = moving_average(q_ddi, smoothing_window)
    return logarithmic_derivative(te, smoothed)


def clean_blasingame(
    te: np.ndarray,
    q_dd: np.ndarray,
    q_ddi: np.ndarray,
    q_ddid: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Keep only indices where all four curves are finite and positive."""
    mask = valid_mask(te, q_dd, q_ddi, q_ddid)
    return (
        np.asarray(te, dtype=float)[mask],
        np.asarray(q_dd, dtype=float)[mask],
        np.asarray(q_ddi, dtype=float)[mask],
        np.asarray(q_ddid, dtype=float)[mask],
    )


def calculate_blasingame(
    series: ProductionSeries,
    properties: Optional[WellStaticProperties] = None,
    config: Optional[BlasingameConfig] = None,
) -> BlasingameOutput:
    """Calculate the Blasingame diagnostic functions for a production history.

    Pure function of its inputs; the full series is recomputed on every call.

    Args:
        series: Production history (dates, rates, cumulative, optional pressure)
        properties: Static well properties (defaults when None)
        config: Transform settings (defaults when None)

    Returns:
        BlasingameOutput with cleaned curves. When fewer than two points
        survive, ``has_curve`` is False; this is not an error.

    Example:
        >>> import pandas as pd
        >>> series = ProductionSeries(
        ...     dates=pd.date_range("2023-01-01", periods=10),
        ...     rates=[100, 95, 90, 85, 80, 75, 70, 65, 60, 55],
        ...     cumulative=[100, 195, 285, 370, 450, 525, 595, 660, 720, 775],
        ... )
        >>> output = calculate_blasingame(series, WellStaticProperties())
        >>> output.pressure_source
        'estimated'
    """
    if properties is None:
        properties = WellStaticProperties()
    if config is None:
        config = BlasingameConfig()

    n = len(series)
    times = dates_to_days(series.dates)

    te = material_balance_time(
        series.rates, series.cumulative, config.zero_rate_time_floor
    )
    drops, estimated = pressure_drops(
        series.pressures,
        properties.initial_pressure,
        n,
        min_drop=config.min_pressure_drop,
        fallback_fraction=config.fallback_depletion_fraction,
    )
    if estimated:
        if series.pressures is None:
            reason = "No pressure series"
        else:
            reason = (
                f"Pressure series length {len(series.pressures)} does not match "
                f"{n} production points"
            )
        logger.warning(
            f"{reason}, normalizing with an estimated constant "
            f"drawdown of {properties.initial_pressure * config.fallback_depletion_fraction:.1f} psi"
        )

    q_dd = normalized_rate(series.rates, drops)
    q_ddi = rate_integral(te, q_dd)
    q_ddid = rate_integral_derivative(te, q_ddi, config.smoothing_window)

    te_clean, q_dd_clean, q_ddi_clean, q_ddid_clean = clean_blasingame(
        te, q_dd, q_ddi, q_ddid
    )
    logger.debug(f"Blasingame cleaning kept {len(te_clean)} of {n} points")
    if len(te_clean) < 2:
        logger.warning(
            f"Only {len(te_clean)} valid points after cleaning, no diagnostic curve available"
        )

    return BlasingameOutput(
        material_balance_time=te_clean,
        q_dd=q_dd_clean,
        q_ddi=q_ddi_clean,
        q_ddid=q_ddid_clean,
        pressure_drops=drops,
        times=times,
        rates=series.rates.copy(),
        pressure_source="estimated" if estimated else "measured",
    )
