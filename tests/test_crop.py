"""Tests for cropping volumes to ROIs."""

from __future__ import annotations

import numpy as np
import pytest

from roivolume.errors import InvalidInputError, InvalidParameterError
from roivolume.models import Calibration, Volume
from roivolume.roi.catalog import Region, RoiCatalog
from roivolume.roi.crop import crop_to_rois


def _random_volume(shape=(4, 5, 6), seed: int = 0) -> Volume:
    rng = np.random.default_rng(seed)
    return Volume(rng.integers(1, 255, size=shape, dtype=np.uint8), calibration=Calibration(0.5, 0.5, 2.0, "mm"))


class TestCropToRois:
    """Tests for crop_to_rois."""

    def test_full_plane_roi_is_identity(self) -> None:
        volume = _random_volume()
        catalog = RoiCatalog([Region.from_label("whole", 0, 0, volume.width, volume.height)])

        cropped = crop_to_rois(volume, catalog)

        np.testing.assert_array_equal(cropped.data, volume.data)
        assert cropped.data.dtype == volume.data.dtype
        assert cropped.calibration == volume.calibration
        assert cropped.title == "volume_cropped"

    def test_source_is_not_modified(self) -> None:
        volume = _random_volume()
        before = volume.data.copy()
        catalog = RoiCatalog([Region.from_label("0002-0000-0000", 1, 1, 2, 2)])

        crop_to_rois(volume, catalog, fill_background=True, fill_value=9, padding=2)

        np.testing.assert_array_equal(volume.data, before)

    def test_padding_offsets(self) -> None:
        data = np.arange(5 * 10 * 10, dtype=np.uint16).reshape(5, 10, 10)
        volume = Volume(data)
        catalog = RoiCatalog([Region.from_label("0002-0000-0000", 3, 4, 2, 3)])

        cropped = crop_to_rois(volume, catalog, padding=1)

        assert cropped.shape == (3, 5, 4)
        np.testing.assert_array_equal(cropped.data[1, 1:4, 1:3], data[1, 4:7, 3:5])
        assert np.count_nonzero(cropped.data) == 6

    def test_fill_background(self) -> None:
        volume = Volume(np.full((5, 10, 10), 200, dtype=np.uint8))
        catalog = RoiCatalog([Region.from_label("0002-0000-0000", 3, 4, 2, 3)])

        cropped = crop_to_rois(volume, catalog, fill_background=True, fill_value=7, padding=1)

        assert np.count_nonzero(cropped.data == 7) == 3 * 5 * 4 - 6
        assert np.count_nonzero(cropped.data == 200) == 6

    def test_fill_value_ignored_without_fill_background(self) -> None:
        volume = Volume(np.full((2, 4, 4), 200, dtype=np.uint8))
        catalog = RoiCatalog([Region.from_label("0001-0000-0000", 0, 0, 2, 2)])

        cropped = crop_to_rois(volume, catalog, fill_value=7, padding=1)

        assert not np.any(cropped.data == 7)

    def test_planes_without_rois_are_emitted(self) -> None:
        volume = Volume(np.full((4, 6, 6), 100, dtype=np.uint8))
        catalog = RoiCatalog([
            Region.from_label("0001-0000-0000", 0, 0, 3, 3),
            Region.from_label("0003-0000-0000", 0, 0, 3, 3),
        ])

        cropped = crop_to_rois(volume, catalog)

        assert cropped.depth == 3
        assert np.all(cropped.data[0] == 100)
        assert np.all(cropped.data[1] == 0)
        assert np.all(cropped.data[2] == 100)

    def test_mask_aware_copy(self) -> None:
        volume = Volume(np.full((2, 4, 4), 50, dtype=np.uint8))
        mask = np.ones((4, 4), dtype=bool)
        mask[:2, 2:] = False
        catalog = RoiCatalog([Region.from_label("whole", 0, 0, 4, 4, mask=mask)])

        cropped = crop_to_rois(volume, catalog, fill_background=True, fill_value=1)

        assert np.count_nonzero(cropped.data == 50) == 2 * 12
        assert np.all(cropped.data[:, :2, 2:] == 1)

    def test_parallel_planes_match_serial(self) -> None:
        volume = _random_volume(shape=(6, 8, 8))
        catalog = RoiCatalog([
            Region.from_label("0002-0000-0000", 1, 1, 4, 4),
            Region.from_label("0005-0000-0000", 3, 2, 5, 5),
        ])

        serial = crop_to_rois(volume, catalog, padding=2)
        parallel = crop_to_rois(volume, catalog, padding=2, n_jobs=3)

        np.testing.assert_array_equal(serial.data, parallel.data)

    def test_empty_catalog_returns_none(self) -> None:
        assert crop_to_rois(_random_volume(), RoiCatalog()) is None
        assert crop_to_rois(_random_volume(), None) is None

    def test_missing_volume(self) -> None:
        with pytest.raises(InvalidInputError):
            crop_to_rois(None, RoiCatalog())

    def test_negative_padding(self) -> None:
        with pytest.raises(InvalidParameterError):
            crop_to_rois(_random_volume(), RoiCatalog(), padding=-1)

    def test_fill_value_must_fit_dtype(self) -> None:
        catalog = RoiCatalog([Region.from_label("whole", 0, 0, 2, 2)])

        with pytest.raises(InvalidParameterError, match="does not fit"):
            crop_to_rois(_random_volume(), catalog, fill_background=True, fill_value=300)
