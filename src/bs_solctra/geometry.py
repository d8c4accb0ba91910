from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .vector import Vector3, points_to_array

logger = logging.getLogger(__name__)

Coil = Sequence[Vector3]


@dataclass(frozen=True)
class SegmentGeometry:
    """
    Per-segment geometry of one coil.

    displacements[i] = coil[i + 1] - coil[i] and tangents[i] is its unit
    vector, so both have len(coil) - 1 entries in point order.
    """

    displacements: List[Vector3]
    tangents: List[Vector3]

    def __len__(self) -> int:
        return len(self.displacements)


def compute_segment_geometry(coil: Coil, coil_index: int | None = None) -> SegmentGeometry:
    """
    Compute displacement and unit tangent vectors for every adjacent point pair.

    Parameters
    ----------
    coil:
        Ordered points of one coil (at least two).
    coil_index:
        Position of the coil in the coil set, only used in error messages.

    Raises
    ------
    ValueError
        If the coil has fewer than two points or two consecutive points
        coincide (zero-length segment).
    """
    label = f"coil {coil_index}" if coil_index is not None else "coil"
    if len(coil) < 2:
        raise ValueError(f"{label} needs at least 2 points, got {len(coil)}")

    displacements: List[Vector3] = []
    tangents: List[Vector3] = []
    for i in range(len(coil) - 1):
        displacement = coil[i + 1].displacement(coil[i])
        if displacement.norm() == 0.0:
            raise ValueError(f"{label} has a zero-length segment at index {i} ({coil[i]})")
        displacements.append(displacement)
        tangents.append(displacement.unit_vector())
    return SegmentGeometry(displacements=displacements, tangents=tangents)


def compute_all_segment_geometry(coils: Sequence[Coil]) -> List[SegmentGeometry]:
    """Apply compute_segment_geometry to every coil, preserving coil order."""
    return [compute_segment_geometry(coil, idx) for idx, coil in enumerate(coils)]


@dataclass(frozen=True, eq=False)
class CoilSetGeometry:
    """
    The whole coil set flattened into contiguous, read-only arrays.

    Segments are laid out coil by coil in coil-set order, then in point
    order, which fixes the summation order of the field evaluator.
    """

    starts: np.ndarray
    ends: np.ndarray
    tangents: np.ndarray
    lengths: np.ndarray
    coil_offsets: np.ndarray

    @property
    def n_segments(self) -> int:
        return int(self.starts.shape[0])

    @property
    def n_coils(self) -> int:
        return int(self.coil_offsets.shape[0] - 1)

    @classmethod
    def from_coils(
        cls,
        coils: Sequence[Coil],
        segments: Sequence[SegmentGeometry] | None = None,
    ) -> "CoilSetGeometry":
        if not coils:
            raise ValueError("Coil set is empty")
        if segments is None:
            segments = compute_all_segment_geometry(coils)
        if len(segments) != len(coils):
            raise ValueError(f"Got {len(segments)} segment geometries for {len(coils)} coils")

        starts, ends, tangents, lengths = [], [], [], []
        offsets = [0]
        for coil, seg in zip(coils, segments):
            points = points_to_array(coil)
            starts.append(points[:-1])
            ends.append(points[1:])
            tangents.append(points_to_array(seg.tangents))
            lengths.append(np.array([d.norm() for d in seg.displacements], dtype=float))
            offsets.append(offsets[-1] + len(seg))

        geometry = cls(
            starts=np.concatenate(starts),
            ends=np.concatenate(ends),
            tangents=np.concatenate(tangents),
            lengths=np.concatenate(lengths),
            coil_offsets=np.array(offsets, dtype=int),
        )
        for arr in (geometry.starts, geometry.ends, geometry.tangents, geometry.lengths, geometry.coil_offsets):
            arr.setflags(write=False)
        logger.debug("Prepared %d segments across %d coils", geometry.n_segments, geometry.n_coils)
        return geometry
