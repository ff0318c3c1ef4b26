"""Tests for the results table."""

from __future__ import annotations

import math

import pandas as pd

from roivolume.models import VolumeFractionResult
from roivolume.results import LABEL_COLUMN, ResultsTable, volume_metric_names


class TestResultsTable:
    """Tests for the row policy of ResultsTable."""

    def test_first_measurement_adds_row(self) -> None:
        table = ResultsTable()

        table.set_measurement("bone", "Volume ratio", 0.5)

        frame = table.to_frame()
        assert len(frame) == 1
        assert frame.loc[0, LABEL_COLUMN] == "bone"
        assert frame.loc[0, "Volume ratio"] == 0.5

    def test_repeated_metric_appends_row(self) -> None:
        table = ResultsTable()

        table.set_measurement("bone", "m", 1.0)
        table.set_measurement("bone", "m", 2.0)

        assert list(table.to_frame()["m"]) == [1.0, 2.0]

    def test_new_metric_fills_first_free_row(self) -> None:
        table = ResultsTable()
        table.set_measurement("bone", "m", 1.0)
        table.set_measurement("bone", "m", 2.0)

        table.set_measurement("bone", "n", 3.0)
        table.set_measurement("bone", "n", 4.0)

        frame = table.to_frame()
        assert len(frame) == 2
        assert list(frame["n"]) == [3.0, 4.0]

    def test_labels_get_separate_rows(self) -> None:
        table = ResultsTable()

        table.set_measurement("a", "m", 1.0)
        table.set_measurement("b", "m", 2.0)

        assert list(table.to_frame()[LABEL_COLUMN]) == ["a", "b"]

    def test_missing_cells_are_nan(self) -> None:
        table = ResultsTable()
        table.set_measurement("a", "m", 1.0)
        table.set_measurement("b", "n", 2.0)

        assert math.isnan(table.to_frame().loc[0, "n"])

    def test_empty_label_or_metric_is_ignored(self) -> None:
        table = ResultsTable()

        table.set_measurement("", "m", 1.0)
        table.set_measurement("a", "", 1.0)

        assert len(table) == 0

    def test_add_volume_fraction(self) -> None:
        table = ResultsTable()

        table.add_volume_fraction("femur", VolumeFractionResult(2.0, 8.0), unit="mm")

        foreground, total, ratio = volume_metric_names("mm")
        row = table.to_frame().iloc[0]
        assert foreground == "Bone volume (mm³)"
        assert (row[foreground], row[total], row[ratio]) == (2.0, 8.0, 0.25)

    def test_write(self, tmp_path) -> None:
        table = ResultsTable()
        table.add_volume_fraction("femur", VolumeFractionResult(1.0, 4.0))

        path = table.write(tmp_path / "nested" / "results.tsv")

        frame = pd.read_csv(path, sep="\t")
        assert frame.loc[0, "Volume ratio"] == 0.25
