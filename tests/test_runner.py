"""Tests for the volume fraction workflow runner."""

from __future__ import annotations

import json
from unittest.mock import patch

import pandas as pd

from roivolume.interfaces.models import MeasurementConfig
from roivolume.interfaces.runner import run_measurement_workflow
from roivolume.interfaces.shared import build_output_path
from roivolume.utils.image import save_volume
from roivolume.utils.phantoms import create_cuboid


def _write_cuboid(tmp_path, name: str = "cuboid.nii.gz"):
    return save_volume(create_cuboid(4, 4, 4, padding=2), tmp_path / "inputs" / name)


def _write_rois(tmp_path, rows: str):
    path = tmp_path / "rois.tsv"
    path.write_text("name\tx\ty\twidth\theight\n" + rows)
    return path


class TestRunMeasurementWorkflow:
    """Tests for run_measurement_workflow."""

    def test_no_images(self, tmp_path) -> None:
        assert run_measurement_workflow(MeasurementConfig(output_dir=tmp_path)) == []

    def test_writes_table_and_sidecar(self, tmp_path) -> None:
        image = _write_cuboid(tmp_path)
        config = MeasurementConfig(images=[image], output_dir=tmp_path / "out")

        outputs = run_measurement_workflow(config)

        assert outputs == [tmp_path / "out" / "cuboid_algorithm-voxel_volumefraction.tsv"]
        frame = pd.read_csv(outputs[0], sep="\t")
        assert frame.loc[0, "label"] == "cuboid"
        assert frame.loc[0, "Bone volume (pixel³)"] == 64
        assert frame.loc[0, "Total volume (pixel³)"] == 512
        assert frame.loc[0, "Volume ratio"] == 0.125

        sidecar = json.loads(outputs[0].with_suffix(".json").read_text())
        assert sidecar["original_file"] == str(image)
        assert sidecar["thresholds"] == [128, 255]

    def test_roi_table_and_crop(self, tmp_path) -> None:
        image = _write_cuboid(tmp_path)
        rois = _write_rois(tmp_path, "0004-0000-0000\t2\t2\t4\t4\n")
        config = MeasurementConfig(images=[image], output_dir=tmp_path / "out", rois=rois, crop=True, padding=1)

        outputs = run_measurement_workflow(config)

        assert outputs[0].name == "cuboid_algorithm-voxel_roi-catalog_volumefraction.tsv"
        frame = pd.read_csv(outputs[0], sep="\t")
        assert frame.loc[0, "Volume ratio"] == 1.0
        cropped = tmp_path / "out" / "cuboid_desc-cropped.nii.gz"
        assert cropped.exists()
        sidecar = json.loads(outputs[0].with_suffix(".json").read_text())
        assert sidecar["cropped_file"] == str(cropped)
        assert sidecar["roi_table"] == str(rois)

    def test_reuses_existing_outputs(self, tmp_path) -> None:
        image = _write_cuboid(tmp_path)
        config = MeasurementConfig(images=[image], output_dir=tmp_path / "out")
        existing = build_output_path("cuboid", config)
        existing.parent.mkdir(parents=True)
        existing.write_text("label\n")

        with patch("roivolume.interfaces.runner._measure_image") as mock_measure:
            outputs = run_measurement_workflow(config)

        mock_measure.assert_not_called()
        assert outputs == [existing]

    def test_force_remeasures(self, tmp_path) -> None:
        image = _write_cuboid(tmp_path)
        config = MeasurementConfig(images=[image], output_dir=tmp_path / "out", force=True)
        existing = build_output_path("cuboid", config)
        existing.parent.mkdir(parents=True)
        existing.write_text("label\n")

        run_measurement_workflow(config)

        assert "Volume ratio" in existing.read_text()

    def test_failed_image_is_logged_and_skipped(self, tmp_path, caplog) -> None:
        good = _write_cuboid(tmp_path)
        missing = tmp_path / "inputs" / "missing.nii.gz"
        config = MeasurementConfig(images=[missing, good], output_dir=tmp_path / "out", n_procs=2)

        outputs = run_measurement_workflow(config)

        assert [path.name for path in outputs] == ["cuboid_algorithm-voxel_volumefraction.tsv"]
        assert "Failed to measure" in caplog.text

    def test_surface_algorithm(self, tmp_path) -> None:
        image = _write_cuboid(tmp_path)
        config = MeasurementConfig(images=[image], output_dir=tmp_path / "out", algorithm="surface", resampling=1)

        outputs = run_measurement_workflow(config)

        frame = pd.read_csv(outputs[0], sep="\t")
        assert 0.0 < frame.loc[0, "Volume ratio"] < 1.0
        assert json.loads(outputs[0].with_suffix(".json").read_text())["surface_resampling"] == 1
