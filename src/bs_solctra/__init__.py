"""
BS-Solctra: Biot-Savart particle tracing for toroidal confinement devices.

Primary workflow:
- Put one coil file per coil in a resource directory
- Describe the run in a run.yaml (or pass CLI options)
- Run `bs-solctra run` to trace particles and write out_<step>.csv snapshots
- Run `bs-solctra plot` to visualize the snapshots
"""

__all__ = [
    "cli",
    "config_scheme",
    "data_io",
    "geometry",
    "biotsavart",
    "particles",
    "post_processing",
    "runner",
    "simulation",
    "tracing",
    "validate_config",
    "vector",
]
