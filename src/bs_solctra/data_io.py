from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from .particles import Particle, snapshot_rows
from .vector import Vector3

logger = logging.getLogger(__name__)

SNAPSHOT_HEADER = "x,y,z"
_DELIMITER = re.compile(r"[,\t ]+")


class InputDataError(ValueError):
    """
    Malformed coil or particle file: bad number or wrong field count.
    """

    def __init__(self, path: Path, line_number: int, message: str):
        self.path = Path(path)
        self.line_number = line_number
        super().__init__(f"{path}:{line_number}: {message}")


def _parse_line(path: Path, line_number: int, line: str) -> Vector3:
    fields = [f for f in _DELIMITER.split(line.strip()) if f]
    if len(fields) != 3:
        raise InputDataError(path, line_number, f"expected 3 coordinates, got {len(fields)}")
    try:
        x, y, z = (float(f) for f in fields)
    except ValueError as e:
        raise InputDataError(path, line_number, f"invalid number ({e})") from e
    return Vector3(x, y, z)


def _is_header(line: str) -> bool:
    fields = [f for f in _DELIMITER.split(line.strip()) if f]
    return bool(fields) and all(re.fullmatch(r"[A-Za-z_]\w*", f) for f in fields)


def read_points_from_file(path: Path, max_points: Optional[int] = None) -> List[Vector3]:
    """
    Read coordinate triples, one per line.

    Fields may be separated by commas, tabs or spaces. A header line made of
    names only (e.g. ``x,y,z``) is skipped if it is the first non-blank
    line, and blank lines are ignored.

    Parameters
    ----------
    path:
        File to read.
    max_points:
        Stop after this many points (None reads all).

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    InputDataError
        On a line that is not three real numbers.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Points file not found: {path}")

    points: List[Vector3] = []
    seen_content = False
    with open(path, "r") as f:
        for line_number, line in enumerate(f, start=1):
            if max_points is not None and len(points) >= max_points:
                break
            if not line.strip():
                continue
            if not seen_content:
                seen_content = True
                if _is_header(line):
                    continue
            points.append(_parse_line(path, line_number, line))
    return points


def read_coil_data_directory(path: Path) -> List[List[Vector3]]:
    """
    Read one coil per file from ``path``, in lexicographic filename order.

    The order fixes the field summation order and has to be reproducible.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Coil directory not found: {path}")
    if not path.is_dir():
        raise NotADirectoryError(f"Coil resource path is not a directory: {path}")

    coil_files = sorted(p for p in path.iterdir() if p.is_file())
    coils = [read_points_from_file(coil_file) for coil_file in coil_files]
    logger.debug("Read %d coils from %s", len(coils), path)
    return coils


def snapshot_path(output_dir: Path, step: int) -> Path:
    return Path(output_dir) / f"out_{step}.csv"


def write_points_to_file(points: Sequence[Vector3], output_dir: Path, step: int) -> Path:
    """Write one snapshot file with an ``x,y,z`` header and one row per point."""
    out_path = snapshot_path(output_dir, step)
    lines = [SNAPSHOT_HEADER] + [str(p) for p in points]
    out_path.write_text("\n".join(lines) + "\n")
    return out_path


class SnapshotSink(Protocol):
    def write(self, step: int, particles: Sequence[Particle]) -> None:
        ...


class CsvSnapshotWriter:
    """
    Snapshot sink writing ``out_<step>.csv`` files into ``output_dir``.

    Diverged particles are written as ``divergent_marker``.
    """

    def __init__(self, output_dir: Path, divergent_marker: Vector3):
        self.output_dir = Path(output_dir)
        self.divergent_marker = divergent_marker
        self.written_steps: List[int] = []

    def write(self, step: int, particles: Sequence[Particle]) -> None:
        out_path = write_points_to_file(snapshot_rows(particles, self.divergent_marker), self.output_dir, step)
        self.written_steps.append(step)
        logger.debug("Wrote points to %s", out_path)


def ensure_output_directory(path: Path) -> Path:
    path = Path(path)
    if path.is_dir():
        logger.info("Output path: %s already exists", path)
    else:
        logger.info("Creating path: %s", path)
        path.mkdir(parents=True, exist_ok=True)
    return path
