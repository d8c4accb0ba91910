from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict

from .vector import Vector3


@dataclass(frozen=True)
class DeviceConfig:
    """
    Physical constants and toroidal boundary of the confinement device.

    Defaults describe the SCR-1 stellarator: the coil current is shared by
    every filament segment and the minor/major radii define the containment
    test used by the integrator.
    """

    major_radius: float = 0.2381
    minor_radius: float = 0.0944165
    permeability: float = 1.2566e-06
    current: float = -4350.0

    def __post_init__(self) -> None:
        if self.major_radius <= 0:
            raise ValueError(f"major_radius must be positive, got {self.major_radius}")
        if self.minor_radius <= 0:
            raise ValueError(f"minor_radius must be positive, got {self.minor_radius}")

    @property
    def divergent_marker(self) -> Vector3:
        """Coordinates written in snapshots for particles that left the device."""
        return Vector3(self.minor_radius, self.minor_radius, self.minor_radius)

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "DeviceConfig":
        data = data or {}
        defaults = cls()
        return cls(
            major_radius=float(data.get("major_radius", defaults.major_radius)),
            minor_radius=float(data.get("minor_radius", defaults.minor_radius)),
            permeability=float(data.get("permeability", defaults.permeability)),
            current=float(data.get("current", defaults.current)),
        )


@dataclass(frozen=True)
class SimulationConfig:
    """
    Time stepping parameters, fixed for the whole run.
    """

    total_steps: int = 10000
    step_size: float = 0.001
    write_frequency: int = 10

    def __post_init__(self) -> None:
        if self.total_steps < 0:
            raise ValueError(f"total_steps must be non-negative, got {self.total_steps}")
        if self.step_size <= 0:
            raise ValueError(f"step_size must be positive, got {self.step_size}")
        if self.write_frequency < 1:
            raise ValueError(f"write_frequency must be at least 1, got {self.write_frequency}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "SimulationConfig":
        data = data or {}
        defaults = cls()
        return cls(
            total_steps=int(data.get("steps", defaults.total_steps)),
            step_size=float(data.get("step_size", defaults.step_size)),
            write_frequency=int(data.get("write_frequency", defaults.write_frequency)),
        )


@dataclass(frozen=True)
class RunConfig:
    """
    Configuration for a single tracing run, usually parsed from run.yaml.

    precision, length, mode, magprof, phi_angle and dimension are part of the
    parameter surface but are not consumed by the tracer.
    """

    resource_path: Path
    particles_file: Path
    output: Path
    num_particles: int | None = None
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    device: DeviceConfig = field(default_factory=DeviceConfig)
    precision: int = 5
    length: int = 1
    mode: int = 1
    magprof: int = 0
    phi_angle: int = 0
    dimension: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunConfig":
        num_particles = data.get("num_particles")
        return cls(
            resource_path=Path(data["resource_path"]),
            particles_file=Path(data["particles_file"]),
            output=Path(data["output"]),
            num_particles=int(num_particles) if num_particles is not None else None,
            simulation=SimulationConfig.from_dict(data.get("simulation")),
            device=DeviceConfig.from_dict(data.get("device")),
            precision=int(data.get("precision", 5)),
            length=int(data.get("length", 1)),
            mode=int(data.get("mode", 1)),
            magprof=int(data.get("magprof", 0)),
            phi_angle=int(data.get("phi_angle", 0)),
            dimension=int(data.get("dimension", 1)),
        )

    def with_overrides(self, **overrides: Any) -> "RunConfig":
        """
        Return a copy with the non-None overrides applied.

        Simulation keys (steps, step_size, write_frequency) are routed into
        the nested SimulationConfig; path keys are converted to Path.
        """
        sim_keys = {"steps": "total_steps", "step_size": "step_size", "write_frequency": "write_frequency"}
        sim_updates = {}
        top_updates: Dict[str, Any] = {}
        for key, value in overrides.items():
            if value is None:
                continue
            if key in sim_keys:
                sim_updates[sim_keys[key]] = value
            elif key in ("resource_path", "particles_file", "output"):
                top_updates[key] = Path(value)
            else:
                top_updates[key] = value
        if sim_updates:
            top_updates["simulation"] = replace(self.simulation, **sim_updates)
        return replace(self, **top_updates)
