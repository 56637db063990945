"""Tests for the console report, figures and the CLI wrapper."""

import sys

import pandas as pd
from conftest import write_csv

from autoprod.forecasting.comparison import compare_forecast
from autoprod.forecasting.formatters.console import (
    format_comparison,
    format_forecast_table,
    format_report_for_console,
)
from autoprod.forecasting.pipeline import main, write_figures


def test_format_comparison_marks_skipped() -> None:
    index = pd.date_range("2022-10-01", periods=3, freq="MS")
    result = compare_forecast(
        pd.Series([105.0, 110.0, 90.0], index=index), pd.Series([100.0, 0.0, 100.0], index=index)
    )

    text = format_comparison(result)

    assert "2022-10" in text
    assert "+5.00" in text
    assert "skipped" in text
    assert "Defined: 2/3" in text


def test_format_forecast_table(production_report) -> None:
    text = format_forecast_table(production_report.original.forecast)
    lines = text.splitlines()

    assert len(lines) == 13
    assert lines[1].startswith("2022-10")
    assert lines[-1].startswith("2023-09")


def test_format_report(production_report) -> None:
    text = format_report_for_console(production_report)

    assert "Vintage: original" in text
    assert "Vintage: smoothed" in text
    assert "Vintage: updated" in text
    assert "SARIMA(0,1,2)(0,1,1)12 [fixed]" in text
    assert "Ljung-Box" in text
    assert "Sensitivity analysis (smoothed 2020-04, 2020-05)" in text
    assert "Original forecast vs updated actuals" in text


def test_write_figures(production_report, tmp_path) -> None:
    written = write_figures(production_report, tmp_path / "figures")

    assert len(written) == 7
    for path in written:
        assert path.exists()
        assert path.stat().st_size > 0


def test_cli_runs_report(vintages, tmp_path, monkeypatch, capsys) -> None:
    original, updated = vintages
    original_csv = write_csv(tmp_path / "original.csv", original)
    updated_csv = write_csv(tmp_path / "updated.csv", updated)

    monkeypatch.setattr(
        sys,
        "argv",
        [
            "autoprod-report",
            "--original",
            str(original_csv),
            "--updated",
            str(updated_csv),
            "--no-search",
            "--no-sensitivity",
        ],
    )
    main()

    out = capsys.readouterr().out
    assert "Loaded 357 and 365 months" in out
    assert "Original forecast vs updated actuals" in out
    assert "Report completed successfully" in out
