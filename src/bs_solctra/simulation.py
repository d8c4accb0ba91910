from __future__ import annotations

import logging
from concurrent.futures import Executor
from dataclasses import dataclass, field
from functools import partial
from typing import List, Optional

from .config_scheme import DeviceConfig, SimulationConfig
from .data_io import SnapshotSink
from .geometry import CoilSetGeometry
from .particles import Particle, count_active
from .tracing import advance_particle

logger = logging.getLogger(__name__)


@dataclass
class SimulationSummary:
    total_steps: int
    snapshot_steps: List[int] = field(default_factory=list)
    active: int = 0
    diverged: int = 0


def simulate_particles(
    particles: List[Particle],
    config: SimulationConfig,
    geometry: CoilSetGeometry,
    device: DeviceConfig,
    sink: SnapshotSink,
    executor: Optional[Executor] = None,
) -> SimulationSummary:
    """
    Advance every particle for ``config.total_steps`` steps, in place.

    Step 0 is written before the loop. After step t, a snapshot is written
    when t is a multiple of ``config.write_frequency``. Diverged particles
    are skipped and keep their state for the rest of the run.

    Parameters
    ----------
    particles:
        The particle set. Entries are replaced in place; the list length and
        order never change.
    config:
        Step count, step size and snapshot cadence.
    geometry:
        Preprocessed coil set, shared read-only by all updates.
    device:
        Physical constants and containment boundary.
    sink:
        Receives (step, particles) snapshots. Its exceptions abort the run.
    executor:
        Optional executor used to map the particle updates of a step. All
        updates of a step complete before its snapshot is written.

    Returns
    -------
    SimulationSummary
    """
    summary = SimulationSummary(total_steps=config.total_steps)
    n_particles = len(particles)
    logger.debug("Total particles: %d", n_particles)

    sink.write(0, particles)
    summary.snapshot_steps.append(0)

    update = partial(
        advance_particle,
        geometry=geometry,
        step_size=config.step_size,
        device=device,
    )
    for step in range(1, config.total_steps + 1):
        active_idx = [i for i, p in enumerate(particles) if p.is_active]
        if executor is None:
            updated = [update(particles[i]) for i in active_idx]
        else:
            updated = list(executor.map(update, [particles[i] for i in active_idx]))
        for i, new_state in zip(active_idx, updated):
            if new_state.is_diverged:
                logger.debug("Particle %d diverged at step %d", i, step)
            particles[i] = new_state

        if step % config.write_frequency == 0:
            sink.write(step, particles)
            summary.snapshot_steps.append(step)
            logger.info("Step %d/%d: %d active particles", step, config.total_steps, count_active(particles))

    summary.active = count_active(particles)
    summary.diverged = n_particles - summary.active
    return summary
