from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator

import numpy as np


@dataclass(frozen=True)
class Vector3:
    """
    Immutable 3-component real vector. All operations return new instances.
    """

    x: float
    y: float
    z: float

    def norm(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def distance(self, other: "Vector3") -> float:
        return self.displacement(other).norm()

    def displacement(self, other: "Vector3") -> "Vector3":
        """Return self - other."""
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def unit_vector(self) -> "Vector3":
        """
        Return self / |self|.

        Raises ZeroDivisionError for the zero vector; callers guarantee a
        nonzero input.
        """
        norm = self.norm()
        if norm == 0.0:
            raise ZeroDivisionError("unit vector of a zero-length vector is undefined")
        return Vector3(self.x / norm, self.y / norm, self.z / norm)

    def cross(self, other: "Vector3") -> "Vector3":
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return self.displacement(other)

    def __mul__(self, scalar: float) -> "Vector3":
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vector3":
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __str__(self) -> str:
        return f"{float(self.x)!r},{float(self.y)!r},{float(self.z)!r}"

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    @classmethod
    def from_array(cls, values: Iterable[float]) -> "Vector3":
        x, y, z = (float(v) for v in values)
        return cls(x, y, z)


ZERO = Vector3(0.0, 0.0, 0.0)


def points_to_array(points: Iterable[Vector3]) -> np.ndarray:
    """Stack a sequence of Vector3 into an (n, 3) float array."""
    return np.array([[p.x, p.y, p.z] for p in points], dtype=float).reshape(-1, 3)
