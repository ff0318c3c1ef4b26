"""Workflow configuration, runner and output writing."""

from roivolume.interfaces.models import MeasurementConfig, MeasurementOutput
from roivolume.interfaces.runner import run_measurement_workflow
from roivolume.interfaces.shared import load_config, write_output
from roivolume.interfaces.utils import _parse_log_level, write_measurement_sidecar

__all__ = [
    "MeasurementConfig",
    "MeasurementOutput",
    "_parse_log_level",
    "load_config",
    "run_measurement_workflow",
    "write_measurement_sidecar",
    "write_output",
]
