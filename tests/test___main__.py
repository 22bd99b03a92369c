"""Tests for __main__.py CLI interface."""

import json
import logging
import sys
from unittest.mock import patch

import pandas as pd
import pytest

from rate_transient.__main__ import main
from rate_transient.config import AnalysisConfig
from rate_transient.logging_config import PACKAGE_LOGGER
from rate_transient.synthetic import generate_production_frame


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Remove handlers the CLI installs on the package logger."""
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def production_csv(tmp_path):
    """Synthetic oil well with flowing pressure written to CSV."""
    frame = generate_production_frame(
        "oil", days=300, initial_pressure=4500.0, final_pressure=2500.0
    )
    frame = frame.rename(columns={"rate": "oil_rate", "pressure": "pwf"})
    csv_path = tmp_path / "well_a.csv"
    frame.to_csv(csv_path, index=False)
    return csv_path


class TestMainCLI:
    """Test CLI interface functionality."""

    def test_main_help(self, capsys):
        """Test that help message works."""
        with patch.object(sys, "argv", ["__main__.py", "--help"]):
            with pytest.raises(SystemExit):
                main()

        captured = capsys.readouterr()
        assert "Blasingame rate transient analysis tool" in captured.out

    def test_main_no_input_prints_help(self, capsys):
        """Test running without input prints usage."""
        with patch.object(sys, "argv", ["__main__.py"]):
            main()

        assert "usage:" in capsys.readouterr().out

    def test_main_with_csv(self, production_csv, tmp_path, capsys):
        """Test CSV analysis with JSON summary and curve output."""
        output = tmp_path / "out" / "curves.csv"
        with patch.object(
            sys,
            "argv",
            [
                "__main__.py",
                "--csv",
                str(production_csv),
                "--rate-col",
                "oil_rate",
                "--pressure-col",
                "pwf",
                "--initial-pressure",
                "5000",
                "--kh",
                "250",
                "--skin",
                "1.5",
                "--area",
                "160",
                "--output",
                str(output),
                "--json",
            ],
        ):
            main()

        summary = json.loads(capsys.readouterr().out)
        assert summary["well_id"] == "well_a"
        assert summary["pressure_source"] == "measured"
        assert summary["kh"] == 250.0
        assert summary["skin_factor"] == 1.5
        assert summary["drainage_area"] == 160.0
        assert 0.0 <= summary["r_squared"] <= 1.0
        assert summary["flow_regimes"][0]["regime"] == "infinite-acting"

        curves = pd.read_csv(output)
        assert list(curves.columns) == ["material_balance_time", "q_dd", "q_ddi", "q_ddid"]
        assert len(curves) == summary["n_points"]

    def test_main_demo_well(self, capsys):
        """Test analysing a sample well."""
        with patch.object(sys, "argv", ["__main__.py", "--demo", "W003", "--json"]):
            main()

        summary = json.loads(capsys.readouterr().out)
        assert summary["well_id"] == "W003"
        assert summary["pressure_source"] == "estimated"
        assert summary["drainage_area"] == 640.0

    def test_main_unknown_demo_well(self):
        """Test argparse rejects unknown sample wells."""
        with patch.object(sys, "argv", ["__main__.py", "--demo", "W999"]):
            with pytest.raises(SystemExit):
                main()

    def test_main_with_config(self, production_csv, tmp_path, capsys):
        """Test analysis driven by a YAML config file."""
        output = tmp_path / "config_curves.csv"
        config_path = tmp_path / "analysis.yaml"
        config_path.write_text(
            "data:\n"
            f"  path: {production_csv.as_posix()}\n"
            "  rate_col: oil_rate\n"
            "  pressure_col: pwf\n"
            "well:\n"
            "  initial_pressure: 5000\n"
            "match:\n"
            "  kh: 400\n"
            f"output: {output.as_posix()}\n"
            "log_level: WARNING\n"
        )

        with patch.object(sys, "argv", ["__main__.py", str(config_path), "--json"]):
            main()

        summary = json.loads(capsys.readouterr().out)
        assert summary["kh"] == 400.0
        assert summary["pressure_source"] == "measured"
        assert output.exists()

    def test_main_missing_config_creates_example(self, tmp_path):
        """Test a missing config file is created from the example."""
        config_path = tmp_path / "new_analysis.yaml"

        with patch.object(sys, "argv", ["__main__.py", str(config_path)]):
            main()

        assert config_path.exists()
        config = AnalysisConfig.from_file(config_path)
        assert config.data.path == "data/production.csv"

    def test_main_too_few_points(self, tmp_path, capsys):
        """Test a CSV without a usable curve still reports a summary."""
        csv_path = tmp_path / "short.csv"
        pd.DataFrame(
            {"date": ["2023-01-01"], "rate": [100.0], "cumulative": [100.0]}
        ).to_csv(csv_path, index=False)

        with patch.object(sys, "argv", ["__main__.py", "--csv", str(csv_path), "--json"]):
            main()

        summary = json.loads(capsys.readouterr().out)
        assert summary["n_points"] == 0
        assert summary["flow_regimes"] == []
        assert "r_squared" not in summary
