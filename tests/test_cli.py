"""Tests for the command line entry point and config loading."""

from __future__ import annotations

import argparse
import logging
from unittest.mock import patch

import pytest

from roivolume.cli import main
from roivolume.interfaces.shared import add_cli_args, load_config
from roivolume.utils.image import save_volume
from roivolume.utils.phantoms import create_cuboid


def _parse(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    add_cli_args(parser)
    return parser.parse_args(argv)


class TestLoadConfig:
    """Tests for TOML configuration with CLI overrides."""

    def test_defaults(self, tmp_path) -> None:
        config = load_config(_parse([str(tmp_path / "a.nii.gz")]))

        assert config.images == [(tmp_path / "a.nii.gz").resolve()]
        assert config.algorithm == "voxel"
        assert config.min_threshold is None
        assert config.resampling == 6
        assert config.padding == 0
        assert not config.crop
        assert not config.fill_background
        assert config.log_level == logging.INFO
        assert config.output_dir.name == "volumefraction"

    def test_toml_values(self, tmp_path) -> None:
        toml = tmp_path / "config.toml"
        toml.write_text(
            f'images = ["{tmp_path / "b.nii.gz"}"]\n'
            f'output_dir = "{tmp_path / "results"}"\n'
            'algorithm = "surface"\n'
            "min_threshold = 100\n"
            "resampling = 2\n"
            "crop = true\n"
            "fill_value = 3\n"
            'log_level = "DEBUG"\n'
            "n_jobs = 4\n",
        )

        config = load_config(_parse(["--config", str(toml)]))

        assert config.images == [(tmp_path / "b.nii.gz").resolve()]
        assert config.output_dir == (tmp_path / "results").resolve()
        assert config.algorithm == "surface"
        assert config.min_threshold == 100
        assert config.max_threshold is None
        assert config.resampling == 2
        assert config.crop
        assert config.fill_background
        assert config.fill_value == 3
        assert config.log_level == logging.DEBUG
        assert config.n_jobs == 4

    def test_cli_overrides_toml(self, tmp_path) -> None:
        toml = tmp_path / "config.toml"
        toml.write_text('algorithm = "surface"\nresampling = 2\npadding = 5\n')

        config = load_config(_parse([
            str(tmp_path / "c.nii.gz"),
            "--config",
            str(toml),
            "--algorithm",
            "voxel",
            "--padding",
            "0",
        ]))

        assert config.algorithm == "voxel"
        assert config.padding == 0
        assert config.resampling == 2


class TestMainCLI:
    """Tests for the roivolume command."""

    def test_no_args_prints_help(self, capsys) -> None:
        result = main([])
        captured = capsys.readouterr()

        assert result == 1
        assert "roivolume" in captured.out.lower()
        assert "--rois" in captured.out

    def test_help_flag(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])

        assert exc_info.value.code == 0
        assert "--algorithm" in capsys.readouterr().out

    def test_invalid_algorithm_exits(self) -> None:
        with pytest.raises(SystemExit):
            main(["a.nii.gz", "--algorithm", "magic"])

    def test_runs_workflow(self, tmp_path) -> None:
        image = save_volume(create_cuboid(3, 3, 3, padding=1), tmp_path / "cube.nii.gz")
        out = tmp_path / "out"

        result = main([str(image), "--output-dir", str(out)])

        assert result == 0
        assert (out / "cube_algorithm-voxel_volumefraction.tsv").exists()

    def test_workflow_failure_returns_one(self, tmp_path) -> None:
        with patch("roivolume.cli.run_measurement_workflow", side_effect=RuntimeError("boom")):
            result = main([str(tmp_path / "x.nii.gz")])

        assert result == 1

    def test_missing_config_returns_one(self, tmp_path) -> None:
        assert main(["--config", str(tmp_path / "missing.toml")]) == 1
