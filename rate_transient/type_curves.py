"""Theoretical Blasingame type curves and match quality scoring.

A user matches the calculated diagnostic curves by adjusting three
parameters (kh, skin, drainage area). Every change regenerates the
theoretical curves on the same material balance time grid and rescores the
match, so everything here is a cheap, stateless O(M) computation.

The theoretical normalized rate is a simplified closed-form transient
approximation with a skin term, qDd = 1 / (sqrt(tD) + 0.1 * exp(s)). It is
intentionally approximate and is not a full analytical Blasingame or
van Everdingen-Hurst solution.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .config import TypeCurveConfig
from .logging_config import get_logger
from .schemas import BlasingameOutput, DataShapeError

logger = get_logger(__name__)


@dataclass(frozen=True)
class MatchParameters:
    """Type curve match parameters.

    Attributes:
        kh: Permeability-thickness product (md-ft)
        skin_factor: Skin factor (dimensionless)
        drainage_area: Drainage area (acres)
    """

    kh: float = 100.0
    skin_factor: float = 0.0
    drainage_area: float = 100.0

    def __post_init__(self):
        for name in ("kh", "skin_factor", "drainage_area"):
            if not np.isfinite(getattr(self, name)):
                raise DataShapeError(f"{name} must be finite")
        if self.kh <= 0:
            raise DataShapeError(f"kh must be positive, got {self.kh}")
        if self.drainage_area <= 0:
            raise DataShapeError(
                f"drainage_area must be positive, got {self.drainage_area}"
            )

    @classmethod
    def from_dict(cls, values: Dict[str, float]) -> "MatchParameters":
        return cls(
            kh=float(values.get("kh", 100.0)),
            skin_factor=float(values.get("skin_factor", 0.0)),
            drainage_area=float(values.get("drainage_area", 100.0)),
        )

    def clamped(self, config: Optional[TypeCurveConfig] = None) -> "MatchParameters":
        """Parameters limited to the interactive matching ranges."""
        if config is None:
            config = TypeCurveConfig()
        return MatchParameters(
            kh=float(np.clip(self.kh, *config.kh_bounds)),
            skin_factor=float(np.clip(self.skin_factor, *config.skin_bounds)),
            drainage_area=float(np.clip(self.drainage_area, *config.area_bounds)),
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True, eq=False)
class TheoreticalCurves:
    """Theoretical type curves evaluated on the calculated te grid.

    Attributes:
        te_dimensionless: Dimensionless time tD
        q_dd: Theoretical normalized rate
        q_ddi: Theoretical rate integral
        q_ddid: Theoretical rate integral derivative
    """

    te_dimensionless: np.ndarray
    q_dd: np.ndarray
    q_ddi: np.ndarray
    q_ddid: np.ndarray

    def to_dict(self) -> Dict[str, Any]:
        return {
            "te_dimensionless": self.te_dimensionless.tolist(),
            "q_dd": self.q_dd.tolist(),
            "q_ddi": self.q_ddi.tolist(),
            "q_ddid": self.q_ddid.tolist(),
        }


@dataclass(frozen=True)
class MatchQuality:
    """Goodness of fit between calculated and theoretical normalized rate.

    Attributes:
        r_squared: Coefficient of determination clamped to [0, 1]
        rmse: Root mean square error
        mae: Mean absolute error
        n_points: Number of point pairs used
        raw_r_squared: R² before clamping (may be negative)
    """

    r_squared: float = 0.0
    rmse: float = 0.0
    mae: float = 0.0
    n_points: int = 0
    raw_r_squared: float = 0.0

    def grade(self, config: Optional[TypeCurveConfig] = None) -> str:
        """Match grade: 'excellent', 'good', 'fair' or 'poor'."""
        if config is None:
            config = TypeCurveConfig()

        if self.r_squared > config.excellent_r_squared:
            return "excellent"
        elif self.r_squared > config.good_r_squared:
            return "good"
        elif self.r_squared > config.fair_r_squared:
            return "fair"
        return "poor"

    def description(self, config: Optional[TypeCurveConfig] = None) -> str:
        return _GRADE_DESCRIPTIONS[self.grade(config)]

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


_GRADE_DESCRIPTIONS = {
    "excellent": "Excellent match! Type curves align well with calculated data.",
    "good": "Good match. Consider fine-tuning parameters for better fit.",
    "fair": "Fair match. Adjust parameters to improve alignment.",
    "poor": "Poor match. Adjust kh, skin, or drainage area significantly.",
}


@dataclass(frozen=True, eq=False)
class MatchResult:
    """One evaluation of the interactive matching loop."""

    parameters: MatchParameters
    curves: TheoreticalCurves
    quality: MatchQuality


def dimensionless_time(
    material_balance_time: np.ndarray,
    kh: float,
    drainage_area: float,
    time_constant: float = 0.0002637,
) -> np.ndarray:
    """Dimensionless time tD = 0.0002637 * kh * te / A (field units)."""
    te = np.asarray(material_balance_time, dtype=float)
    return time_constant * kh * te / drainage_area


def theoretical_normalized_rate(
    t_d: np.ndarray,
    skin_factor: float,
    config: Optional[TypeCurveConfig] = None,
) -> np.ndarray:
    """Theoretical normalized rate with skin.

    qDd = max(1 / (sqrt(tD) + 0.1 * exp(min(s, 5))), 0.01) for tD > 0, and 0
    otherwise. Only the upper end of skin is capped; negative skin passes
    through unchanged.
    """
    if config is None:
        config = TypeCurveConfig()

    t_d = np.asarray(t_d, dtype=float)
    skin_effect = np.exp(min(skin_factor, config.skin_cap))
    q_dd = np.zeros(len(t_d))
    positive = t_d > 0
    q_dd[positive] = np.maximum(
        1.0 / (np.sqrt(t_d[positive]) + config.skin_coefficient * skin_effect),
        config.rate_floor,
    )
    return q_dd


def theoretical_integral(t_d: np.ndarray, q_dd: np.ndarray) -> np.ndarray:
    """Cumulative trapezoidal integral of the theoretical rate over tD."""
    t_d = np.asarray(t_d, dtype=float)
    q_dd = np.asarray(q_dd, dtype=float)
    integral = np.zeros(len(q_dd))
    if len(q_dd) > 1:
        integral[1:] = np.cumsum((q_dd[1:] + q_dd[:-1]) / 2 * np.diff(t_d))
    return integral


def theoretical_derivative(t_d: np.ndarray, integral: np.ndarray) -> np.ndarray:
    """Central-difference derivative of the integral over tD.

    Interior points where the tD spacing is not positive stay 0. The two
    endpoints copy the value of their interior neighbour.
    """
    t_d = np.asarray(t_d, dtype=float)
    integral = np.asarray(integral, dtype=float)
    n = len(integral)
    derivative = np.zeros(n)

    if n > 2:
        dt = t_d[2:] - t_d[:-2]
        spaced = dt > 0
        interior = np.zeros(n - 2)
        interior[spaced] = (integral[2:] - integral[:-2])[spaced] / dt[spaced]
        derivative[1:-1] = interior

    if n > 1:
        derivative[0] = derivative[1]
        derivative[-1] = derivative[-2]

    return derivative


def generate_theoretical_curves(
    blasingame: BlasingameOutput,
    params: MatchParameters,
    config: Optional[TypeCurveConfig] = None,
) -> TheoreticalCurves:
    """Generate the theoretical type curves for a parameter set.

    Args:
        blasingame: Calculated Blasingame output; only its te grid is used
        params: Match parameters
        config: Type curve settings (defaults when None)

    Returns:
        TheoreticalCurves on the same grid as ``blasingame.material_balance_time``
    """
    if config is None:
        config = TypeCurveConfig()

    t_d = dimensionless_time(
        blasingame.material_balance_time,
        params.kh,
        params.drainage_area,
        config.time_constant,
    )
    q_dd = theoretical_normalized_rate(t_d, params.skin_factor, config)
    q_ddi = theoretical_integral(t_d, q_dd)
    q_ddid = theoretical_derivative(t_d, q_ddi)

    return TheoreticalCurves(te_dimensionless=t_d, q_dd=q_dd, q_ddi=q_ddi, q_ddid=q_ddid)


def calculate_match_quality(
    calculated: np.ndarray,
    theoretical: np.ndarray,
) -> MatchQuality:
    """Score calculated against theoretical normalized rate.

    Only pairs where both values are finite and strictly positive are used.
    R² is 0 when the calculated values have no variance, and is clamped to
    [0, 1]: a fit worse than the mean reports 0. The unclamped value is kept
    in ``raw_r_squared``.

    Args:
        calculated: Calculated normalized rate
        theoretical: Theoretical normalized rate on the same grid

    Returns:
        MatchQuality (all zeros when no valid pair exists)
    """
    calculated = np.asarray(calculated, dtype=float)
    theoretical = np.asarray(theoretical, dtype=float)
    if len(calculated) != len(theoretical):
        raise DataShapeError(
            f"calculated ({len(calculated)}) and theoretical ({len(theoretical)}) "
            "must have equal length"
        )

    with np.errstate(invalid="ignore"):
        mask = (
            np.isfinite(calculated)
            & np.isfinite(theoretical)
            & (calculated > 0)
            & (theoretical > 0)
        )
    if not mask.any():
        return MatchQuality()

    c = calculated[mask]
    t = theoretical[mask]
    residuals = c - t

    ss_res = np.sum(residuals**2)
    ss_tot = np.sum((c - c.mean()) ** 2)
    r_squared = 1 - ss_res / ss_tot if ss_tot > 0 else 0.0

    return MatchQuality(
        r_squared=float(np.clip(r_squared, 0.0, 1.0)),
        rmse=float(np.sqrt(ss_res / len(c))),
        mae=float(np.mean(np.abs(residuals))),
        n_points=int(len(c)),
        raw_r_squared=float(r_squared),
    )


def score_match(
    blasingame: BlasingameOutput,
    params: MatchParameters,
    config: Optional[TypeCurveConfig] = None,
) -> MatchResult:
    """Generate type curves for ``params`` and score them against ``blasingame``.

    This is the call made on every parameter change of the matching loop.
    Results are not cached.
    """
    curves = generate_theoretical_curves(blasingame, params, config)
    quality = calculate_match_quality(blasingame.q_dd, curves.q_dd)
    logger.debug(
        f"Match kh={params.kh:g} s={params.skin_factor:g} A={params.drainage_area:g}: "
        f"R²={quality.r_squared:.4f}, RMSE={quality.rmse:.4g}"
    )
    return MatchResult(parameters=params, curves=curves, quality=quality)


def parameter_ranges(config: Optional[TypeCurveConfig] = None) -> Dict[str, Tuple[float, float]]:
    """Interactive matching ranges keyed by parameter name."""
    if config is None:
        config = TypeCurveConfig()
    return {
        "kh": config.kh_bounds,
        "skin_factor": config.skin_bounds,
        "drainage_area": config.area_bounds,
    }
