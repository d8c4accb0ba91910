"""
Post-processing of tracing runs: load out_<step>.csv snapshots and plot them.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Optional, Sequence

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend by default
import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d import Axes3D  # noqa: F401

from .config_scheme import DeviceConfig
from .geometry import Coil
from .vector import points_to_array

logger = logging.getLogger(__name__)

_SNAPSHOT_NAME = re.compile(r"out_(\d+)\.csv")


def load_snapshots(output_dir: Path) -> Dict[int, np.ndarray]:
    """
    Load every out_<step>.csv in ``output_dir``.

    Returns
    -------
    Dict[int, np.ndarray]
        Step -> (n_particles, 3) array, ordered by step.
    """
    output_dir = Path(output_dir)
    if not output_dir.is_dir():
        raise FileNotFoundError(f"Output directory not found: {output_dir}")

    snapshots: Dict[int, np.ndarray] = {}
    for path in output_dir.iterdir():
        match = _SNAPSHOT_NAME.fullmatch(path.name)
        if match is None:
            continue
        data = np.loadtxt(path, delimiter=",", skiprows=1, ndmin=2)
        snapshots[int(match.group(1))] = data.reshape(-1, 3)
    logger.debug("Loaded %d snapshots from %s", len(snapshots), output_dir)
    return dict(sorted(snapshots.items()))


def divergent_mask(positions: np.ndarray, device: DeviceConfig) -> np.ndarray:
    """Rows written with the divergent marker."""
    return np.all(positions == device.minor_radius, axis=1)


def confinement_history(snapshots: Dict[int, np.ndarray], device: DeviceConfig) -> Dict[int, int]:
    """Number of still-confined particles at each snapshot step."""
    return {
        step: int(np.count_nonzero(~divergent_mask(positions, device)))
        for step, positions in snapshots.items()
    }


def plot_cross_section(
    snapshots: Dict[int, np.ndarray],
    output_path: Path,
    device: DeviceConfig,
    markersize: float = 2,
    dpi: int = 300,
) -> None:
    """
    Plot every snapshot position in the (R, Z) plane.

    Toroidal angle is discarded, so the plot shows how the traced points
    fill the poloidal cross-section. The minor-radius boundary is drawn
    around the major-radius axis. Diverged rows are left out.

    Parameters
    ----------
    snapshots : Dict[int, np.ndarray]
        Output of load_snapshots.
    output_path : Path
        Where to save the plot.
    device : DeviceConfig
        Supplies the boundary and the divergent marker.
    markersize : float, default=2
        Scatter marker size.
    dpi : int, default=300
        Resolution for saved figure.
    """
    plt.figure(figsize=(8, 8))
    for step, positions in snapshots.items():
        confined = positions[~divergent_mask(positions, device)]
        if confined.size == 0:
            continue
        R = np.sqrt(confined[:, 0]**2 + confined[:, 1]**2)
        plt.scatter(R, confined[:, 2], s=markersize)

    theta = np.linspace(0, 2 * np.pi, 200)
    plt.plot(
        device.major_radius + device.minor_radius * np.cos(theta),
        device.minor_radius * np.sin(theta),
        'k--',
        label='Boundary',
    )
    plt.gca().set_aspect('equal')
    plt.xlabel('R [m]')
    plt.ylabel('Z [m]')
    plt.legend()
    plt.tight_layout()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(output_path, dpi=dpi)
    plt.close()


def plot_trajectories_3d(
    snapshots: Dict[int, np.ndarray],
    output_path: Path,
    device: DeviceConfig,
    coils: Optional[Sequence[Coil]] = None,
    dpi: int = 300,
) -> None:
    """
    Plot each particle's snapshot positions as a 3D polyline, optionally
    with the coils.
    """
    fig = plt.figure(figsize=(10, 8))
    ax = fig.add_subplot(111, projection='3d')

    if coils is not None:
        for coil in coils:
            pts = points_to_array(coil)
            ax.plot(pts[:, 0], pts[:, 1], pts[:, 2], color='gray', linewidth=0.5)

    if snapshots:
        stacked = np.stack(list(snapshots.values()))  # (n_steps, n_particles, 3)
        for idx in range(stacked.shape[1]):
            track = stacked[:, idx, :]
            track = track[~divergent_mask(track, device)]
            if track.size:
                ax.plot(track[:, 0], track[:, 1], track[:, 2], linewidth=1)

    ax.set_xlabel('x [m]')
    ax.set_ylabel('y [m]')
    ax.set_zlabel('z [m]')
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi)
    plt.close(fig)
