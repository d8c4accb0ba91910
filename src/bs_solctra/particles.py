from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from .vector import Vector3


class ParticleStatus(str, Enum):
    ACTIVE = "active"
    DIVERGED = "diverged"


@dataclass(frozen=True)
class Particle:
    """
    Tagged particle state: an active position, or diverged with no position.

    A diverged particle has left the confinement volume and is never
    integrated again.
    """

    status: ParticleStatus
    position: Optional[Vector3] = None

    def __post_init__(self) -> None:
        if self.status is ParticleStatus.ACTIVE and self.position is None:
            raise ValueError("Active particle requires a position")
        if self.status is ParticleStatus.DIVERGED and self.position is not None:
            raise ValueError("Diverged particle carries no position")

    @classmethod
    def active(cls, position: Vector3) -> "Particle":
        return cls(ParticleStatus.ACTIVE, position)

    @classmethod
    def divergent(cls) -> "Particle":
        return cls(ParticleStatus.DIVERGED)

    @property
    def is_active(self) -> bool:
        return self.status is ParticleStatus.ACTIVE

    @property
    def is_diverged(self) -> bool:
        return self.status is ParticleStatus.DIVERGED


def particles_from_points(points: Iterable[Vector3]) -> List[Particle]:
    """Build the initial particle set; every particle starts active."""
    return [Particle.active(p) for p in points]


def snapshot_rows(particles: Sequence[Particle], divergent_marker: Vector3) -> List[Vector3]:
    """
    Positions to write for a snapshot, in particle order.

    Diverged particles are rendered as ``divergent_marker``.
    """
    return [p.position if p.position is not None else divergent_marker for p in particles]


def count_active(particles: Iterable[Particle]) -> int:
    return sum(1 for p in particles if p.is_active)
