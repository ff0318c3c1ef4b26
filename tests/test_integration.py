"""End-to-end tests through the public package API."""

from __future__ import annotations

import numpy as np
import pytest

import roivolume
from roivolume import Calibration, RoiCatalog, Volume, VolumeFraction, VolumeFractionConfig, crop_to_rois
from roivolume.roi import load_roi_catalog, region_limits
from roivolume.utils import load_volume, save_volume


@pytest.fixture
def sample(tmp_path):
    rng = np.random.default_rng(7)
    data = rng.integers(0, 255, size=(6, 12, 10), dtype=np.uint8)
    volume = Volume(data, Calibration(0.5, 0.5, 1.0, "mm"), title="sample")
    return save_volume(volume, tmp_path / "sample.nii.gz")


def test_public_api_exports() -> None:
    assert set(roivolume.__all__) >= {"Volume", "RoiCatalog", "VolumeFraction", "crop_to_rois", "region_limits"}


def test_crop_then_measure_matches_catalog_measurement(sample, tmp_path) -> None:
    """Measuring a cropped image equals measuring the original under the same ROI."""
    table = tmp_path / "rois.tsv"
    table.write_text("name\tx\ty\twidth\theight\nwhole\t2\t3\t5\t6\n")
    volume = load_volume(sample)
    catalog = load_roi_catalog(table)
    config = VolumeFractionConfig(min_threshold=1)

    cropped = crop_to_rois(volume, catalog)
    on_original = VolumeFraction(config=config).measure(volume, catalog=catalog)
    on_cropped = VolumeFraction(config=config).measure(cropped)

    assert cropped.shape == (6, 6, 5)
    assert on_cropped.total_volume == pytest.approx(on_original.total_volume)
    assert on_cropped.foreground_volume == pytest.approx(on_original.foreground_volume)
    assert on_original.total_volume == pytest.approx(6 * 6 * 5 * 0.25)


def test_limits_of_loaded_catalog(sample, tmp_path) -> None:
    table = tmp_path / "rois.tsv"
    table.write_text(
        "name\tx\ty\twidth\theight\n"
        "0002-0000-0000\t0\t0\t3\t3\n"
        "0005-0000-0000\t8\t9\t5\t5\n",
    )
    volume = load_volume(sample)

    limits = region_limits(load_roi_catalog(table), volume.width, volume.height, volume.depth)

    assert limits.as_tuple() == (0, 10, 0, 12, 2, 5)


def test_empty_catalog_measurement_and_crop(sample) -> None:
    volume = load_volume(sample)

    assert crop_to_rois(volume, RoiCatalog()) is None
    assert VolumeFraction().measure(volume).total_volume == pytest.approx(6 * 12 * 10 * 0.25)
