"""
Validation functions for run.yaml configuration files.
"""
from __future__ import annotations

from typing import Any, Dict, List
from pathlib import Path
import yaml


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_run_config(data: Dict[str, Any], file_path: Path | None = None) -> List[str]:
    """
    Validate a run.yaml configuration dictionary.

    Returns a list of error messages. Empty list means validation passed.
    """
    errors: List[str] = []
    file_prefix = f"{file_path}: " if file_path else ""

    # Required fields
    required_fields = ["resource_path", "particles_file", "output"]
    for field in required_fields:
        if field not in data:
            errors.append(f"{file_prefix}Missing required field: {field}")
        elif not isinstance(data[field], str) or not data[field]:
            errors.append(f"{file_prefix}{field} must be a non-empty path string")

    valid_top_level = set(required_fields) | {
        "description",
        "num_particles",
        "simulation",
        "device",
        # Carried for forward extension, not used by the tracer
        "precision",
        "length",
        "mode",
        "magprof",
        "phi_angle",
        "dimension",
    }
    for key in data.keys():
        if key not in valid_top_level:
            errors.append(
                f"{file_prefix}Unknown key: '{key}'. "
                f"Valid keys: {sorted(valid_top_level)}"
            )

    if data.get("num_particles") is not None:
        num_particles = data["num_particles"]
        if not _is_int(num_particles) or num_particles < 1:
            errors.append(
                f"{file_prefix}num_particles must be a positive integer, "
                f"got {type(num_particles).__name__}: {num_particles}"
            )

    for key in ("precision", "length", "mode", "magprof", "phi_angle", "dimension"):
        if key in data and (not _is_int(data[key]) or data[key] < 0):
            errors.append(f"{file_prefix}{key} must be a non-negative integer")

    # Validate simulation section
    if "simulation" in data:
        simulation = data["simulation"]
        if not isinstance(simulation, dict):
            errors.append(f"{file_prefix}simulation must be a dictionary")
        else:
            valid_simulation = {"steps", "step_size", "write_frequency"}
            for key in simulation.keys():
                if key not in valid_simulation:
                    errors.append(
                        f"{file_prefix}Unknown simulation key: '{key}'. "
                        f"Valid keys: {sorted(valid_simulation)}"
                    )

            if "steps" in simulation:
                steps = simulation["steps"]
                if isinstance(steps, float) and steps.is_integer():
                    errors.append(
                        f"{file_prefix}simulation.steps should be an integer, not a float. "
                        f"Got {steps}. Use {int(steps)} instead."
                    )
                elif not _is_int(steps) or steps < 0:
                    errors.append(f"{file_prefix}simulation.steps must be a non-negative integer")
            if "step_size" in simulation:
                step_size = simulation["step_size"]
                if not _is_number(step_size) or step_size <= 0:
                    errors.append(f"{file_prefix}simulation.step_size must be a positive number")
            if "write_frequency" in simulation:
                write_frequency = simulation["write_frequency"]
                if not _is_int(write_frequency) or write_frequency < 1:
                    errors.append(f"{file_prefix}simulation.write_frequency must be a positive integer")

    # Validate device section
    if "device" in data:
        device = data["device"]
        if not isinstance(device, dict):
            errors.append(f"{file_prefix}device must be a dictionary")
        else:
            valid_device = {"major_radius", "minor_radius", "permeability", "current"}
            for key, value in device.items():
                if key not in valid_device:
                    errors.append(
                        f"{file_prefix}Unknown device key: '{key}'. "
                        f"Valid keys: {sorted(valid_device)}"
                    )
                elif not _is_number(value):
                    errors.append(f"{file_prefix}device.{key} must be a number")
                elif key in ("major_radius", "minor_radius", "permeability") and value <= 0:
                    errors.append(f"{file_prefix}device.{key} must be positive")

    return errors


def validate_run_yaml_file(file_path: Path) -> List[str]:
    """
    Validate a run.yaml file.

    Returns a list of error messages. Empty list means validation passed.
    """
    try:
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f)

        if data is None:
            return [f"{file_path}: File is empty or contains no valid YAML"]

        if not isinstance(data, dict):
            return [f"{file_path}: Root element must be a dictionary"]

        return validate_run_config(data, file_path)
    except yaml.YAMLError as e:
        return [f"{file_path}: YAML parsing error: {e}"]
    except OSError as e:
        return [f"{file_path}: Error reading file: {e}"]
