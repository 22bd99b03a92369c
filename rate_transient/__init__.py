"""Blasingame Rate Transient Analysis package.

Keep top-level imports lightweight: the analysis functions only depend on
numpy, pandas and scipy.
"""

from .blasingame import calculate_blasingame
from .flow_regimes import FlowRegimeSegment, identify_flow_regimes
from .logging_config import configure_logging, get_logger
from .rta import RTAResult, analyze_production_data
from .schemas import (
    BlasingameOutput,
    DataShapeError,
    ProductionSeries,
    WellStaticProperties,
)
from .type_curves import (
    MatchParameters,
    MatchQuality,
    TheoreticalCurves,
    calculate_match_quality,
    generate_theoretical_curves,
    score_match,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "BlasingameOutput",
    "DataShapeError",
    "FlowRegimeSegment",
    "MatchParameters",
    "MatchQuality",
    "ProductionSeries",
    "RTAResult",
    "TheoreticalCurves",
    "WellStaticProperties",
    "analyze_production_data",
    "calculate_blasingame",
    "calculate_match_quality",
    "configure_logging",
    "generate_theoretical_curves",
    "get_logger",
    "identify_flow_regimes",
    "score_match",
]
