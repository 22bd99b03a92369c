"""Input and output records for Blasingame rate transient analysis.

The analysis functions only accept these validated records. Any branching
on missing or malformed fields happens here, once, so the numerical code
can assume parallel arrays of equal length and positive well properties.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Literal, Optional

import numpy as np
import pandas as pd

from .logging_config import get_logger

logger = get_logger(__name__)

PressureSource = Literal["measured", "estimated"]


class DataShapeError(ValueError):
    """Raised when inputs are structurally invalid.

    Mismatched parallel array lengths and non-positive required physical
    quantities are integration bugs, so they fail at the API boundary instead
    of being filtered like noisy data points.
    """


def _as_float_array(values: Any) -> np.ndarray:
    return np.asarray(values, dtype=float).ravel()


@dataclass(frozen=True, eq=False)
class ProductionSeries:
    """Chronological production history of one well.

    Attributes:
        dates: Production dates; only used to compute elapsed days
        rates: Instantaneous rate (STB/day or Mscf/day), zero means shut-in
        cumulative: Cumulative production up to and including each point
        pressures: Optional flowing pressure (psi). A length that does not
            match the rates is accepted and triggers the drawdown estimate.
    """

    dates: np.ndarray
    rates: np.ndarray
    cumulative: np.ndarray
    pressures: Optional[np.ndarray] = None

    def __post_init__(self):
        dates = np.asarray(pd.to_datetime(np.asarray(self.dates).ravel()))
        rates = _as_float_array(self.rates)
        cumulative = _as_float_array(self.cumulative)

        if not (len(dates) == len(rates) == len(cumulative)):
            raise DataShapeError(
                "Production arrays must have equal length: "
                f"dates={len(dates)}, rates={len(rates)}, cumulative={len(cumulative)}"
            )

        object.__setattr__(self, "dates", dates)
        object.__setattr__(self, "rates", rates)
        object.__setattr__(self, "cumulative", cumulative)
        if self.pressures is not None:
            object.__setattr__(self, "pressures", _as_float_array(self.pressures))

    def __len__(self) -> int:
        return len(self.rates)

    @property
    def has_pressure(self) -> bool:
        """Whether a pressure array usable for normalization is attached."""
        return self.pressures is not None and len(self.pressures) == len(self.rates)

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        date_col: str = "date",
        rate_col: str = "rate",
        cumulative_col: Optional[str] = "cumulative",
        pressure_col: Optional[str] = None,
    ) -> "ProductionSeries":
        """Build a series from a production table.

        Rows are sorted by date and rows without a parseable date are dropped.
        When ``cumulative_col`` is missing from the frame the cumulative
        volume is the running sum of the rates. A pressure column with no
        values at all is treated as absent.

        Args:
            df: Production table
            date_col: Column holding production dates
            rate_col: Column holding rates
            cumulative_col: Column holding cumulative production (optional)
            pressure_col: Column holding flowing pressure (optional)

        Returns:
            ProductionSeries
        """
        missing = {date_col, rate_col} - set(df.columns)
        if missing:
            raise DataShapeError(f"Missing required columns: {missing}")

        df = df.copy()
        df[date_col] = pd.to_datetime(df[date_col], errors="coerce")
        df = df.dropna(subset=[date_col]).sort_values(date_col)

        rates = pd.to_numeric(df[rate_col], errors="coerce")
        if cumulative_col is not None and cumulative_col in df.columns:
            cumulative = pd.to_numeric(df[cumulative_col], errors="coerce")
        else:
            logger.debug("No cumulative column, using running sum of rates")
            cumulative = rates.fillna(0.0).cumsum()

        pressures = None
        if pressure_col is not None and pressure_col in df.columns:
            pressure_values = pd.to_numeric(df[pressure_col], errors="coerce")
            if pressure_values.notna().any():
                pressures = pressure_values.to_numpy(dtype=float)

        return cls(
            dates=df[date_col].to_numpy(),
            rates=rates.to_numpy(dtype=float),
            cumulative=cumulative.to_numpy(dtype=float),
            pressures=pressures,
        )


@dataclass(frozen=True)
class WellStaticProperties:
    """Static reservoir and fluid properties of a well.

    Defaults are the fallbacks used when a well record leaves a property
    unknown.

    Attributes:
        initial_pressure: Initial reservoir pressure (psi)
        wellbore_radius: Wellbore radius (ft)
        net_pay_thickness: Net pay thickness (ft)
        porosity: Porosity (fraction)
        total_compressibility: Total compressibility (1/psi)
        viscosity: Fluid viscosity (cp)
        formation_volume_factor: Formation volume factor (rb/stb)
    """

    initial_pressure: float = 5000.0
    wellbore_radius: float = 0.3
    net_pay_thickness: float = 50.0
    porosity: float = 0.15
    total_compressibility: float = 1e-5
    viscosity: float = 0.5
    formation_volume_factor: float = 1.0

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if not np.isfinite(value) or value <= 0:
                raise DataShapeError(f"{f.name} must be positive, got {value}")

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "WellStaticProperties":
        """Create properties from a well record, ignoring unknown or None entries."""
        known = {f.name for f in fields(cls)}
        return cls(
            **{k: float(v) for k, v in values.items() if k in known and v is not None}
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True, eq=False)
class BlasingameOutput:
    """Blasingame diagnostic functions computed from a production series.

    The four curve arrays are cleaned and share one length M. The reference
    arrays ``pressure_drops``, ``times`` and ``rates`` keep the input
    length N.

    Attributes:
        material_balance_time: Material balance time te (days)
        q_dd: Normalized rate q/Δp
        q_ddi: Rate integral (time-averaged normalized rate)
        q_ddid: Rate integral derivative
        pressure_drops: Δp used for normalization at every input point (psi)
        times: Elapsed days of every input point
        rates: Input rates
        pressure_source: 'measured' or 'estimated' (constant drawdown fallback)
        te_dimensionless: Dimensionless time; not produced by the engine
    """

    material_balance_time: np.ndarray
    q_dd: np.ndarray
    q_ddi: np.ndarray
    q_ddid: np.ndarray
    pressure_drops: np.ndarray
    times: np.ndarray
    rates: np.ndarray
    pressure_source: PressureSource = "measured"
    te_dimensionless: np.ndarray = field(default_factory=lambda: np.zeros(0))

    @property
    def n_points(self) -> int:
        """Number of points that survived cleaning."""
        return len(self.material_balance_time)

    @property
    def has_curve(self) -> bool:
        """Whether enough points survived to draw or match a curve."""
        return self.n_points >= 2

    @property
    def pressure_estimated(self) -> bool:
        return self.pressure_source == "estimated"

    def to_frame(self) -> pd.DataFrame:
        """Cleaned diagnostic curves as a DataFrame, one row per point."""
        return pd.DataFrame(
            {
                "material_balance_time": self.material_balance_time,
                "q_dd": self.q_dd,
                "q_ddi": self.q_ddi,
                "q_ddid": self.q_ddid,
            }
        )

    def to_dict(self) -> Dict[str, Any]:
        """Plain, JSON-serialisable representation."""
        return {
            "material_balance_time": self.material_balance_time.tolist(),
            "q_dd": self.q_dd.tolist(),
            "q_ddi": self.q_ddi.tolist(),
            "q_ddid": self.q_ddid.tolist(),
            "pressure_drops": self.pressure_drops.tolist(),
            "times": self.times.tolist(),
            "rates": self.rates.tolist(),
            "pressure_source": self.pressure_source,
            "te_dimensionless": self.te_dimensionless.tolist(),
        }
