"""Command-line interface for Blasingame rate transient analysis."""

import argparse
import json
import logging
from dataclasses import replace
from pathlib import Path

import pandas as pd

from .config import AnalysisConfig
from .logging_config import configure_logging, get_logger
from .rta import analyze_production_data
from .schemas import ProductionSeries
from .synthetic import SAMPLE_WELLS, sample_well_series

logger = get_logger(__name__)


def main():
    """Run the CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Blasingame rate transient analysis tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Analyse from config
  python -m rate_transient analysis.yaml

  # Analyse a CSV file with explicit match parameters
  python -m rate_transient --csv data.csv --kh 250 --skin 1.5 --area 160

  # Analyse a built-in sample well
  python -m rate_transient --demo W001
        """,
    )
    parser.add_argument(
        "config", nargs="?", help="Path to TOML/YAML config file"
    )
    parser.add_argument("--csv", help="Input CSV file")
    parser.add_argument("--date-col", default="date")
    parser.add_argument("--rate-col", default="rate")
    parser.add_argument("--cumulative-col", default="cumulative")
    parser.add_argument("--pressure-col", default=None)
    parser.add_argument("--initial-pressure", type=float, default=None)
    parser.add_argument("--demo", choices=sorted(SAMPLE_WELLS), help="Sample well ID")
    parser.add_argument("--kh", type=float, help="Permeability-thickness (md-ft)")
    parser.add_argument("--skin", type=float, help="Skin factor")
    parser.add_argument("--area", type=float, help="Drainage area (acres)")
    parser.add_argument("--output", help="Write cleaned Blasingame curves to CSV")
    parser.add_argument("--json", action="store_true", help="Print summary as JSON")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument(
        "--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"]
    )
    args = parser.parse_args()

    log_level = getattr(logging, args.log_level)
    if args.verbose:
        log_level = logging.DEBUG
    configure_logging(level=log_level)

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            logger.error(f"Config file not found: {config_path}")
            logger.info("Creating example config...")
            try:
                from .config import create_example_config

                create_example_config(str(config_path), format="yaml")
                logger.info(f"Example config created at {config_path}")
                logger.info("Please edit the config file and run again.")
            except Exception as e:
                logger.error(f"Failed to create example config: {e}")
            return
        config = AnalysisConfig.from_file(config_path)
        configure_logging(
            level=logging.DEBUG if args.verbose else getattr(logging, config.log_level),
            log_file=config.log_file,
        )
    else:
        config = AnalysisConfig()

    if args.kh is not None:
        config.match["kh"] = args.kh
    if args.skin is not None:
        config.match["skin_factor"] = args.skin
    if args.area is not None:
        config.match["drainage_area"] = args.area

    well_id = None
    properties = config.well
    if args.demo:
        sample = SAMPLE_WELLS[args.demo]
        well_id = sample.well_id
        properties = sample.properties
        if args.area is None:
            config.match["drainage_area"] = sample.drainage_area
        series = sample_well_series(sample.well_id)
    elif args.csv or config.data.path:
        data = config.data
        if args.csv:
            data.path = args.csv
            data.date_col = args.date_col
            data.rate_col = args.rate_col
            data.cumulative_col = args.cumulative_col
            data.pressure_col = args.pressure_col
        df = pd.read_csv(data.path)
        series = ProductionSeries.from_frame(
            df,
            date_col=data.date_col,
            rate_col=data.rate_col,
            cumulative_col=data.cumulative_col,
            pressure_col=data.pressure_col,
        )
        well_id = Path(data.path).stem
    else:
        parser.print_help()
        logger.info("\nRecommended usage: python -m rate_transient <config.yaml>")
        return

    if args.initial_pressure is not None:
        properties = replace(properties, initial_pressure=args.initial_pressure)

    result = analyze_production_data(
        series, properties=properties, config=config, well_id=well_id
    )

    if not result.has_curve:
        logger.warning("Too few valid points for a Blasingame curve")
    else:
        for segment in result.flow_regimes:
            logger.info(
                f"  {segment.regime:<20} points {segment.start_index}-{segment.end_index} "
                f"slope {segment.diagnostic_slope:.3f}"
            )
        quality = result.match.quality
        logger.info(
            f"Match quality: R²={quality.r_squared:.4f} RMSE={quality.rmse:.4g} "
            f"MAE={quality.mae:.4g}"
        )
        logger.info(quality.description(config.type_curves))

    if args.json:
        print(json.dumps(result.summary(), indent=2))

    output = args.output or config.output
    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        result.blasingame.to_frame().to_csv(output_path, index=False)
        logger.info(f"Blasingame curves saved to: {output_path}")


if __name__ == "__main__":
    main()
