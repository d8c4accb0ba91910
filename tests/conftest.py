"""
Shared synthetic coil sets for the tests.
"""
from pathlib import Path

import numpy as np
import pytest

from bs_solctra.config_scheme import DeviceConfig
from bs_solctra.geometry import CoilSetGeometry
from bs_solctra.vector import Vector3

MAJOR_RADIUS = 0.2381
MINOR_RADIUS = 0.0944165


def make_circular_loop(radius, n_points, center=(0.0, 0.0, 0.0)):
    """Closed horizontal loop, counter-clockwise seen from +z."""
    t = np.linspace(0.0, 2 * np.pi, n_points + 1)
    cx, cy, cz = center
    points = [Vector3(float(cx + radius * np.cos(a)), float(cy + radius * np.sin(a)), float(cz)) for a in t[:-1]]
    return points + [points[0]]


def make_toroidal_coils(n_coils=12, major_radius=MAJOR_RADIUS, coil_radius=0.15, n_points=72):
    """
    Planar circular coils evenly spaced in toroidal angle, offset so that
    phi = 0 falls between two coils. Produces a purely toroidal field.
    """
    coils = []
    t = np.linspace(0.0, 2 * np.pi, n_points + 1)
    for k in range(n_coils):
        phi = 2 * np.pi * k / n_coils + np.pi / n_coils
        points = []
        for a in t[:-1]:
            R = major_radius + coil_radius * np.cos(a)
            points.append(Vector3(float(R * np.cos(phi)), float(R * np.sin(phi)), float(coil_radius * np.sin(a))))
        coils.append(points + [points[0]])
    return coils


def write_coils(directory: Path, coils, delimiter="\t"):
    directory.mkdir(parents=True, exist_ok=True)
    for idx, coil in enumerate(coils):
        lines = [delimiter.join(repr(c) for c in (p.x, p.y, p.z)) for p in coil]
        (directory / f"coil_{idx:02d}.txt").write_text("\n".join(lines) + "\n")
    return directory


@pytest.fixture
def device():
    return DeviceConfig()


@pytest.fixture
def positive_current_device():
    return DeviceConfig(current=1000.0)


@pytest.fixture
def toroidal_coils():
    return make_toroidal_coils()


@pytest.fixture
def toroidal_geometry(toroidal_coils):
    return CoilSetGeometry.from_coils(toroidal_coils)


@pytest.fixture
def coil_dir(tmp_path, toroidal_coils):
    return write_coils(tmp_path / "resources", toroidal_coils)


@pytest.fixture
def particles_file(tmp_path):
    path = tmp_path / "particles.txt"
    path.write_text(
        "x,y,z\n"
        f"{MAJOR_RADIUS},0.0,0.0\n"
        "0.2,0.0,0.01\n"
        f"{MAJOR_RADIUS + 0.12},0.0,0.0\n"
    )
    return path
