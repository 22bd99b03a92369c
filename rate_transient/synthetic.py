"""Synthetic production histories for demonstrations and tests.

Generates daily production following typical decline behaviour:
- Oil: hyperbolic decline of a horizontal unconventional oil well
- Gas: exponential decline of a conventional gas well

Three sample wells with realistic static properties are included.
"""

from dataclasses import dataclass
from typing import Dict, Literal, Optional

import numpy as np
import pandas as pd

from .logging_config import get_logger
from .schemas import ProductionSeries, WellStaticProperties

logger = get_logger(__name__)

FluidType = Literal["oil", "gas"]


@dataclass(frozen=True)
class SampleWell:
    """Sample well used for demonstrations.

    Attributes:
        well_id: Well identifier
        well_name: Well name
        field: Field name
        fluid_type: 'oil' or 'gas'
        properties: Static well properties
        drainage_area: Drainage area (acres), a sensible starting match value
    """

    well_id: str
    well_name: str
    field: str
    fluid_type: FluidType
    properties: WellStaticProperties
    drainage_area: float


SAMPLE_WELLS: Dict[str, SampleWell] = {
    "W001": SampleWell(
        well_id="W001",
        well_name="Baker-Federal 12-34H",
        field="Wolfcamp Field",
        fluid_type="oil",
        properties=WellStaticProperties(
            initial_pressure=6800.0,
            wellbore_radius=0.328,
            net_pay_thickness=250.0,
            porosity=0.08,
            viscosity=0.35,
            formation_volume_factor=1.25,
        ),
        drainage_area=160.0,
    ),
    "W002": SampleWell(
        well_id="W002",
        well_name="Smith Unit 5-8",
        field="Wolfcamp Field",
        fluid_type="oil",
        properties=WellStaticProperties(
            initial_pressure=7200.0,
            wellbore_radius=0.328,
            net_pay_thickness=220.0,
            porosity=0.07,
            viscosity=0.40,
            formation_volume_factor=1.30,
        ),
        drainage_area=140.0,
    ),
    "W003": SampleWell(
        well_id="W003",
        well_name="Anderson Gas 21-14",
        field="Piceance Basin",
        fluid_type="gas",
        properties=WellStaticProperties(
            initial_pressure=4500.0,
            wellbore_radius=0.292,
            net_pay_thickness=180.0,
            porosity=0.12,
            viscosity=0.018,
            formation_volume_factor=1.0,
        ),
        drainage_area=640.0,
    ),
}


def generate_production_frame(
    fluid_type: FluidType = "oil",
    days: int = 365 * 3,
    start: str = "2021-01-01",
    qi: Optional[float] = None,
    di: Optional[float] = None,
    b: float = 1.2,
    initial_pressure: Optional[float] = None,
    final_pressure: Optional[float] = None,
    noise: float = 0.0,
    seed: Optional[int] = None,
) -> pd.DataFrame:
    """Generate a daily production table.

    Args:
        fluid_type: 'oil' (hyperbolic) or 'gas' (exponential)
        days: Number of daily records
        start: First production date
        qi: Initial rate (default 800 STB/day oil, 3500 Mscf/day gas)
        di: Nominal initial decline (1/year, default 0.70 oil, 0.45 gas)
        b: Hyperbolic exponent (oil only)
        initial_pressure: Flowing pressure at the first day (psi). When both
            pressures are given a linearly declining pressure column is added.
        final_pressure: Flowing pressure at the last day (psi)
        noise: Relative standard deviation of multiplicative rate noise
        seed: Random seed for the noise

    Returns:
        DataFrame with 'date', 'rate', 'cumulative' and optionally 'pressure'
    """
    if fluid_type not in ("oil", "gas"):
        raise ValueError(f"Unknown fluid type: {fluid_type}")
    if days < 1:
        raise ValueError("days must be at least 1")

    t = np.arange(days) / 365.0
    if fluid_type == "oil":
        qi = 800.0 if qi is None else qi
        di = 0.70 if di is None else di
        rate = qi / (1 + b * di * t) ** (1 / b)
    else:
        qi = 3500.0 if qi is None else qi
        di = 0.45 if di is None else di
        rate = qi * np.exp(-di * t)

    if noise > 0:
        rng = np.random.default_rng(seed)
        rate = rate * np.clip(rng.normal(1.0, noise, days), 0.0, None)

    frame = pd.DataFrame(
        {
            "date": pd.date_range(start, periods=days, freq="D"),
            "rate": np.round(rate, 1),
            "cumulative": np.round(np.cumsum(rate)),
        }
    )

    if initial_pressure is not None and final_pressure is not None:
        frame["pressure"] = np.linspace(initial_pressure, final_pressure, days)

    logger.debug(f"Generated {days} days of synthetic {fluid_type} production")
    return frame


def generate_production_series(
    fluid_type: FluidType = "oil",
    days: int = 365 * 3,
    **kwargs,
) -> ProductionSeries:
    """Synthetic production history as a :class:`ProductionSeries`.

    Keyword arguments are passed to :func:`generate_production_frame`.
    """
    frame = generate_production_frame(fluid_type=fluid_type, days=days, **kwargs)
    return ProductionSeries.from_frame(
        frame,
        pressure_col="pressure" if "pressure" in frame.columns else None,
    )


def sample_well_series(well_id: str, days: int = 365 * 3) -> ProductionSeries:
    """Production history of one of the :data:`SAMPLE_WELLS`."""
    if well_id not in SAMPLE_WELLS:
        raise KeyError(f"Unknown sample well: {well_id}")
    return generate_production_series(SAMPLE_WELLS[well_id].fluid_type, days=days)
