from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .config_scheme import DeviceConfig
from .geometry import Coil, CoilSetGeometry, SegmentGeometry
from .vector import ZERO, Vector3


def biot_savart_prefactor(device: DeviceConfig) -> float:
    """mu0 * I / (4 pi), shared by every filament segment."""
    return (device.permeability * device.current) / (4.0 * math.pi)


def field_at(position: np.ndarray, geometry: CoilSetGeometry, device: DeviceConfig) -> np.ndarray:
    """
    Net magnetic field at ``position`` from every straight segment of every coil.

    Each segment contributes ``(k e) x (rmi c)`` with

        c = 2 d (|rmi| + |rmf|) / (|rmi| |rmf|) / ((|rmi| + |rmf|)^2 - d^2)

    where rmi, rmf are the vectors from the segment start/end to the point,
    d the segment length and e its unit tangent. The segment sum is
    vectorized; it matches the sequential sum to floating-point rounding.

    Parameters
    ----------
    position:
        Observation point, shape (3,).
    geometry:
        Preprocessed coil set.
    device:
        Supplies the permeability and coil current.

    Returns
    -------
    np.ndarray
        Field vector, shape (3,).
    """
    position = np.asarray(position, dtype=float)
    multiplier = biot_savart_prefactor(device)

    rmi = position - geometry.starts
    rmf = position - geometry.ends
    rmi_norm = np.sqrt(np.einsum("ij,ij->i", rmi, rmi))
    rmf_norm = np.sqrt(np.einsum("ij,ij->i", rmf, rmf))
    d = geometry.lengths
    norm_sum = rmi_norm + rmf_norm

    c = ((2.0 * d * norm_sum) / (rmi_norm * rmf_norm)) * (1.0 / (norm_sum * norm_sum - d * d))
    u = multiplier * geometry.tangents
    v = rmi * c[:, np.newaxis]
    return np.cross(u, v).sum(axis=0)


def field_at_sequential(
    position: Vector3,
    coils: Sequence[Coil],
    segments: Sequence[SegmentGeometry],
    device: DeviceConfig,
) -> Vector3:
    """
    Segment-by-segment reference evaluation of the same sum as field_at.

    Accumulates coil by coil, point by point, so the summation order is the
    load order of the coil set.
    """
    multiplier = biot_savart_prefactor(device)
    b = ZERO
    for coil, seg in zip(coils, segments):
        for i in range(len(coil) - 1):
            rmi = position.displacement(coil[i])
            rmf = position.displacement(coil[i + 1])
            u = seg.tangents[i] * multiplier
            d = seg.displacements[i].norm()
            rmi_norm = rmi.norm()
            rmf_norm = rmf.norm()
            c = ((2.0 * d * (rmi_norm + rmf_norm)) / (rmi_norm * rmf_norm)) * (
                1.0 / ((rmi_norm + rmf_norm) * (rmi_norm + rmf_norm) - d * d)
            )
            b = b + u.cross(rmi * c)
    return b
