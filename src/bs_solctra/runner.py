from __future__ import annotations

import logging
from concurrent.futures import Executor
from pathlib import Path
from typing import List, Optional, Tuple

import yaml

from .config_scheme import RunConfig
from .data_io import (
    CsvSnapshotWriter,
    ensure_output_directory,
    read_coil_data_directory,
    read_points_from_file,
)
from .geometry import CoilSetGeometry, compute_all_segment_geometry
from .particles import Particle, particles_from_points
from .simulation import SimulationSummary, simulate_particles
from .validate_config import validate_run_config
from .vector import Vector3

logger = logging.getLogger(__name__)


def load_run_config(run_path: Path) -> RunConfig:
    """
    Load a run.yaml file into a RunConfig dataclass.

    Accepts either:
    - A directory path containing run.yaml
    - A direct path to a YAML file

    The file is checked with validate_run_config first; every problem it
    reports is raised together as one ValueError.
    """
    if run_path.is_dir():
        cfg_path = run_path / "run.yaml"
    else:
        cfg_path = run_path

    if not cfg_path.is_file():
        raise FileNotFoundError(f"Expected run.yaml file at {run_path} or {run_path}/run.yaml")

    try:
        data = yaml.safe_load(cfg_path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"{cfg_path}: YAML parsing error: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"{cfg_path}: root element must be a dictionary")
    errors = validate_run_config(data, cfg_path)
    if errors:
        raise ValueError("\n".join(errors))
    return RunConfig.from_dict(data)


def prepare_inputs(
    run_cfg: RunConfig,
) -> Tuple[List[List[Vector3]], CoilSetGeometry, List[Particle]]:
    """
    Read particles and coils and preprocess the coil geometry.

    Every input error is raised here, before any tracing work starts.
    """
    logger.info("Reading particles from file %s", run_cfg.particles_file)
    points = read_points_from_file(run_cfg.particles_file, run_cfg.num_particles)
    if not points:
        raise ValueError(f"No particles found in {run_cfg.particles_file}")

    logger.info("Reading coil data from directory: %s", run_cfg.resource_path)
    coils = read_coil_data_directory(run_cfg.resource_path)
    if not coils:
        raise ValueError(f"No coil files found in {run_cfg.resource_path}")

    logger.info("Computing displacements and unit tangents")
    segments = compute_all_segment_geometry(coils)
    geometry = CoilSetGeometry.from_coils(coils, segments)
    logger.debug("Total segments: %d", geometry.n_segments)
    return coils, geometry, particles_from_points(points)


def run_simulation(run_cfg: RunConfig, executor: Optional[Executor] = None) -> SimulationSummary:
    """
    Load the inputs of ``run_cfg`` and trace its particles.

    Snapshots are written as out_<step>.csv into ``run_cfg.output``.
    """
    _, geometry, particles = prepare_inputs(run_cfg)
    output_dir = ensure_output_directory(run_cfg.output)
    sink = CsvSnapshotWriter(output_dir, run_cfg.device.divergent_marker)
    summary = simulate_particles(
        particles,
        run_cfg.simulation,
        geometry,
        run_cfg.device,
        sink,
        executor=executor,
    )
    logger.info(
        "Finished %d steps: %d active, %d diverged",
        summary.total_steps,
        summary.active,
        summary.diverged,
    )
    return summary
