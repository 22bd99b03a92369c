"""Configuration file support for rate transient analysis.

This module provides TOML and YAML configuration parsing. The default values
of every dataclass reproduce the constants of the standard Blasingame
workflow, so ``AnalysisConfig()`` is the reference configuration.
"""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .logging_config import get_logger
from .schemas import WellStaticProperties

logger = get_logger(__name__)

# Try to import TOML support
try:
    import tomli  # noqa: F401

    TOML_AVAILABLE = True
except ImportError:
    try:
        import tomllib  # noqa: F401

        TOML_AVAILABLE = True
    except ImportError:
        TOML_AVAILABLE = False
        logger.debug("TOML support not available. Install with: pip install tomli")

# Try to import YAML support
try:
    import yaml

    YAML_AVAILABLE = True
except ImportError:
    YAML_AVAILABLE = False
    logger.debug("YAML support not available. Install with: pip install pyyaml")


@dataclass
class DataSourceConfig:
    """Production data source.

    Attributes:
        path: Path to a CSV file
        date_col: Column name for date
        rate_col: Column name for rate
        cumulative_col: Column name for cumulative production
        pressure_col: Optional column name for flowing pressure
    """

    path: str = ""
    date_col: str = "date"
    rate_col: str = "rate"
    cumulative_col: Optional[str] = "cumulative"
    pressure_col: Optional[str] = None


@dataclass
class BlasingameConfig:
    """Blasingame transform settings.

    Attributes:
        smoothing_window: Moving-average window applied before differentiation
        min_pressure_drop: Minimum drawdown applied to measured pressures (psi)
        fallback_depletion_fraction: Fraction of initial pressure used as a
            constant drawdown when no pressure series is available
        zero_rate_time_floor: Material balance time assigned to a leading
            zero-rate point (days)
    """

    smoothing_window: int = 5
    min_pressure_drop: float = 100.0
    fallback_depletion_fraction: float = 0.35
    zero_rate_time_floor: float = 0.001


@dataclass
class RegimeConfig:
    """Log-log slope thresholds separating the flow regimes.

    Attributes:
        infinite_acting_slope: Slopes above this are infinite-acting
        transition_slope: Slopes at or above this (and not infinite-acting)
            are transition
        boundary_dominated_slope: Slopes at or above this (and below the
            transition threshold) are boundary-dominated; steeper is depletion
    """

    infinite_acting_slope: float = -0.3
    transition_slope: float = -0.7
    boundary_dominated_slope: float = -1.3


@dataclass
class TypeCurveConfig:
    """Theoretical type curve and match grading settings.

    Attributes:
        time_constant: Field-unit constant of the dimensionless time
        skin_cap: Upper bound applied to skin before exponentiation
        skin_coefficient: Weight of the skin term in the rate approximation
        rate_floor: Minimum theoretical normalized rate
        excellent_r_squared: R² above which a match is excellent
        good_r_squared: R² above which a match is good
        fair_r_squared: R² above which a match is fair
        kh_bounds: Interactive kh range (md-ft)
        skin_bounds: Interactive skin range
        area_bounds: Interactive drainage area range (acres)
    """

    time_constant: float = 0.0002637
    skin_cap: float = 5.0
    skin_coefficient: float = 0.1
    rate_floor: float = 0.01
    excellent_r_squared: float = 0.95
    good_r_squared: float = 0.85
    fair_r_squared: float = 0.70
    kh_bounds: Tuple[float, float] = (10.0, 1000.0)
    skin_bounds: Tuple[float, float] = (-5.0, 10.0)
    area_bounds: Tuple[float, float] = (10.0, 1000.0)

    def __post_init__(self):
        for name in ("kh_bounds", "skin_bounds", "area_bounds"):
            low, high = getattr(self, name)
            if low > high:
                raise ValueError(f"{name} lower bound exceeds upper bound")
            setattr(self, name, (float(low), float(high)))


@dataclass
class AnalysisConfig:
    """Complete analysis configuration.

    Attributes:
        data: Data source configuration
        well: Static well properties
        blasingame: Blasingame transform settings
        regimes: Flow regime thresholds
        type_curves: Type curve and grading settings
        match: Initial match parameters (kh, skin_factor, drainage_area)
        output: Optional CSV path for the cleaned diagnostic curves
        log_level: Logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR')
        log_file: Optional log file path
    """

    data: DataSourceConfig = field(default_factory=DataSourceConfig)
    well: WellStaticProperties = field(default_factory=WellStaticProperties)
    blasingame: BlasingameConfig = field(default_factory=BlasingameConfig)
    regimes: RegimeConfig = field(default_factory=RegimeConfig)
    type_curves: TypeCurveConfig = field(default_factory=TypeCurveConfig)
    match: Dict[str, float] = field(
        default_factory=lambda: {"kh": 100.0, "skin_factor": 0.0, "drainage_area": 100.0}
    )
    output: Optional[str] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "AnalysisConfig":
        """Create AnalysisConfig from dictionary.

        Args:
            config_dict: Configuration dictionary

        Returns:
            AnalysisConfig instance
        """
        match = {"kh": 100.0, "skin_factor": 0.0, "drainage_area": 100.0}
        match.update(config_dict.get("match", {}))

        return cls(
            data=DataSourceConfig(**config_dict.get("data", {})),
            well=WellStaticProperties.from_dict(config_dict.get("well", {})),
            blasingame=BlasingameConfig(**config_dict.get("blasingame", {})),
            regimes=RegimeConfig(**config_dict.get("regimes", {})),
            type_curves=TypeCurveConfig(**config_dict.get("type_curves", {})),
            match=match,
            output=config_dict.get("output"),
            log_level=config_dict.get("log_level", "INFO"),
            log_file=config_dict.get("log_file"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary suitable for TOML/YAML output."""
        config_dict = asdict(self)
        for key in ("kh_bounds", "skin_bounds", "area_bounds"):
            config_dict["type_curves"][key] = list(config_dict["type_curves"][key])
        # TOML has no null
        config_dict["data"] = {k: v for k, v in config_dict["data"].items() if v is not None}
        return {k: v for k, v in config_dict.items() if v is not None}

    @classmethod
    def from_file(cls, config_path: str | Path) -> "AnalysisConfig":
        """Load configuration from file (auto-detect format)."""
        config_path = Path(config_path)
        suffix = config_path.suffix.lower()

        if suffix in (".toml", ".tml"):
            return cls.from_toml(config_path)
        elif suffix in (".yaml", ".yml"):
            return cls.from_yaml(config_path)
        else:
            raise ValueError(f"Unknown config format: {suffix}")

    @classmethod
    def from_toml(cls, config_path: Path) -> "AnalysisConfig":
        """Load configuration from TOML file."""
        if not TOML_AVAILABLE:
            raise ImportError(
                "TOML support not available. Install with: pip install tomli"
            )

        try:
            import tomli as toml_loader
        except ImportError:
            import tomllib as toml_loader

        with open(config_path, "rb") as f:
            config_dict = toml_loader.load(f)
        return cls.from_dict(config_dict)

    @classmethod
    def from_yaml(cls, config_path: Path) -> "AnalysisConfig":
        """Load configuration from YAML file."""
        if not YAML_AVAILABLE:
            raise ImportError(
                "YAML support not available. Install with: pip install pyyaml"
            )

        with open(config_path, "r") as f:
            config_dict = yaml.safe_load(f) or {}
        return cls.from_dict(config_dict)


def create_example_config(output_path: str | Path, format: str = "yaml") -> None:
    """Create an example configuration file.

    Args:
        output_path: Path to save example configuration
        format: Configuration format ('yaml' or 'toml')

    Example:
        >>> from rate_transient.config import create_example_config
        >>> create_example_config('analysis.yaml')
    """
    example = AnalysisConfig(
        data=DataSourceConfig(
            path="data/production.csv",
            date_col="date",
            rate_col="oil_rate",
            cumulative_col="cum_oil",
            pressure_col="flowing_pressure",
        ),
        well=WellStaticProperties(
            initial_pressure=6800.0,
            wellbore_radius=0.328,
            net_pay_thickness=250.0,
            porosity=0.08,
            viscosity=0.35,
            formation_volume_factor=1.25,
        ),
        output="output/blasingame_curves.csv",
        log_file="rta.log",
    )
    example_dict = example.to_dict()

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if format == "toml":
        import tomli_w

        with open(output_path, "wb") as f:
            tomli_w.dump(example_dict, f)
    elif format in ["yaml", "yml"]:
        if not YAML_AVAILABLE:
            raise ImportError(
                "YAML support not available. Install with: pip install pyyaml"
            )
        with open(output_path, "w") as f:
            yaml.dump(example_dict, f, default_flow_style=False, sort_keys=False)
    else:
        raise ValueError(f"Unknown format: {format}")

    logger.info(f"Example configuration written to {output_path}")
