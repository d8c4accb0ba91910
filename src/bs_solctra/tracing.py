from __future__ import annotations

import math

import numpy as np

from .biotsavart import field_at
from .config_scheme import DeviceConfig
from .geometry import CoilSetGeometry
from .particles import Particle
from .vector import Vector3


def _scaled_direction(
    point: np.ndarray,
    geometry: CoilSetGeometry,
    step_size: float,
    device: DeviceConfig,
) -> np.ndarray:
    b = field_at(point, geometry, device)
    b_norm = math.sqrt(b[0] * b[0] + b[1] * b[1] + b[2] * b[2])
    return (b / b_norm) * step_size


def rk4_step(
    position: np.ndarray,
    geometry: CoilSetGeometry,
    step_size: float,
    device: DeviceConfig,
) -> np.ndarray:
    """
    Advance a point by one RK4 step along the field direction.

    Every stage uses the unit field direction scaled by ``step_size``, so
    each sub-step has exactly that length regardless of |B|. This follows
    the field line rather than integrating the raw field.

    Parameters
    ----------
    position:
        Current position, shape (3,).
    geometry:
        Preprocessed coil set.
    step_size:
        Length of each RK4 stage.
    device:
        Physical constants for the field evaluation.

    Returns
    -------
    np.ndarray
        New position, shape (3,). No containment check is applied.
    """
    position = np.asarray(position, dtype=float)
    k1 = _scaled_direction(position, geometry, step_size, device)
    k2 = _scaled_direction(k1 / 2.0 + position, geometry, step_size, device)
    k3 = _scaled_direction(k2 / 2.0 + position, geometry, step_size, device)
    k4 = _scaled_direction(k3 + position, geometry, step_size, device)
    return position + (k1 + 2.0 * k2 + 2.0 * k3 + k4) / 6.0


def is_confined(position: Vector3, device: DeviceConfig) -> bool:
    """
    Whether ``position`` lies inside the toroidal boundary.

    The (x, y) part is projected onto the major-radius circle at z = 0 and
    the distance to that point is compared with the minor radius. Points on
    the device axis have no projection and are never confined.
    """
    planar = Vector3(position.x, position.y, 0.0)
    planar_norm = planar.norm()
    if planar_norm == 0.0:
        return False
    origin = Vector3(
        device.major_radius * planar.x / planar_norm,
        device.major_radius * planar.y / planar_norm,
        0.0,
    )
    # NaN distances compare False, so non-finite positions are not escapes.
    return not position.distance(origin) > device.minor_radius


def advance_particle(
    particle: Particle,
    geometry: CoilSetGeometry,
    step_size: float,
    device: DeviceConfig,
) -> Particle:
    """
    One integrator step for a particle.

    Diverged particles are returned unchanged. An active particle whose new
    position falls outside the boundary becomes diverged.
    """
    if particle.position is None:
        return particle
    new_position = Vector3.from_array(rk4_step(particle.position.as_array(), geometry, step_size, device))
    if not is_confined(new_position, device):
        return Particle.divergent()
    return Particle.active(new_position)
