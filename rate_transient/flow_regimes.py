"""Flow regime identification from the Blasingame rate integral derivative.

The log-log slope of the derivative curve is classified point by point:

- 'infinite-acting': slope > -0.3 (transient, radial or early linear)
- 'transition': -0.7 <= slope <= -0.3
- 'boundary-dominated': -1.3 <= slope < -0.7
- 'depletion': slope < -1.3

Consecutive points with the same regime form a segment. Segments are
contiguous, in time order, and cover every index of the input.

Confidence is always 'medium'; no variable confidence scoring is done.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Literal, Optional, Tuple

import numpy as np

from .config import RegimeConfig
from .logging_config import get_logger
from .schemas import DataShapeError

logger = get_logger(__name__)

FlowRegime = Literal["infinite-acting", "transition", "boundary-dominated", "depletion"]
Confidence = Literal["low", "medium", "high"]


@dataclass(frozen=True)
class FlowRegimeSegment:
    """Contiguous run of points sharing one flow regime.

    Attributes:
        regime: Flow regime label
        start_index: First index of the segment (inclusive)
        end_index: Last index of the segment (inclusive)
        diagnostic_slope: Mean finite log-log slope over the segment
        confidence: Identification confidence
    """

    regime: FlowRegime
    start_index: int
    end_index: int
    diagnostic_slope: float
    confidence: Confidence = "medium"

    @property
    def n_points(self) -> int:
        return self.end_index - self.start_index + 1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def log_log_slope(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Point-wise slope d(log10 y)/d(log10 x).

    Forward difference at the first point, central difference inside and
    backward difference at the last point, computed on the log10 values.
    A single point has an undefined (NaN) slope.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    n = len(x)
    slopes = np.full(n, np.nan)
    if n < 2:
        return slopes

    with np.errstate(divide="ignore", invalid="ignore"):
        log_x = np.log10(x)
        log_y = np.log10(y)
        slopes[0] = (log_y[1] - log_y[0]) / (log_x[1] - log_x[0])
        if n > 2:
            slopes[1:-1] = (log_y[2:] - log_y[:-2]) / (log_x[2:] - log_x[:-2])
        slopes[-1] = (log_y[-1] - log_y[-2]) / (log_x[-1] - log_x[-2])

    return slopes


def classify_slope(slope: float, config: Optional[RegimeConfig] = None) -> FlowRegime:
    """Flow regime for a single log-log slope.

    NaN compares false everywhere and falls through to 'depletion'.
    """
    if config is None:
        config = RegimeConfig()

    if slope > config.infinite_acting_slope:
        return "infinite-acting"
    elif slope >= config.transition_slope:
        return "transition"
    elif slope >= config.boundary_dominated_slope:
        return "boundary-dominated"
    return "depletion"


def _average_slope(slopes: np.ndarray, start: int, end: int) -> float:
    window = slopes[start : end + 1]
    finite = window[np.isfinite(window)]
    return float(finite.mean()) if len(finite) > 0 else 0.0


def identify_flow_regimes(
    material_balance_time: np.ndarray,
    q_ddid: np.ndarray,
    config: Optional[RegimeConfig] = None,
) -> List[FlowRegimeSegment]:
    """Segment a cleaned derivative curve into flow regimes.

    The walk starts in 'infinite-acting' and classifies points from index 1
    on; the first point always joins the opening segment. A new segment
    starts whenever a point's regime differs from the current one.

    Args:
        material_balance_time: Material balance time, strictly positive
        q_ddid: Rate integral derivative, strictly positive
        config: Slope thresholds (defaults when None)

    Returns:
        Segments covering ``[0, M-1]`` in time order; empty for empty input

    Example:
        >>> te = 10 ** (np.arange(50) * 0.05)
        >>> segments = identify_flow_regimes(te, 100 / np.sqrt(te))
        >>> segments[0].regime
        'infinite-acting'
    """
    if len(material_balance_time) != len(q_ddid):
        raise DataShapeError(
            f"material_balance_time ({len(material_balance_time)}) and "
            f"q_ddid ({len(q_ddid)}) must have equal length"
        )
    if len(q_ddid) == 0:
        return []

    slopes = log_log_slope(material_balance_time, q_ddid)
    segments: List[FlowRegimeSegment] = []

    current: FlowRegime = "infinite-acting"
    start = 0

    for i in range(1, len(slopes)):
        regime = classify_slope(slopes[i], config)
        if regime != current:
            segments.append(
                FlowRegimeSegment(
                    regime=current,
                    start_index=start,
                    end_index=i - 1,
                    diagnostic_slope=_average_slope(slopes, start, i - 1),
                )
            )
            current = regime
            start = i

    segments.append(
        FlowRegimeSegment(
            regime=current,
            start_index=start,
            end_index=len(slopes) - 1,
            diagnostic_slope=_average_slope(slopes, start, len(slopes) - 1),
        )
    )

    logger.debug(
        "Identified regimes: " + ", ".join(f"{s.regime}[{s.start_index}:{s.end_index}]" for s in segments)
    )
    return segments


def segment_time_ranges(
    segments: List[FlowRegimeSegment],
    material_balance_time: np.ndarray,
) -> List[Tuple[float, float]]:
    """Material balance time span (start_te, end_te) of every segment, in days."""
    te = np.asarray(material_balance_time, dtype=float)
    return [(float(te[s.start_index]), float(te[s.end_index])) for s in segments]
