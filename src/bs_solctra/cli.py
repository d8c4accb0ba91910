# src/bs_solctra/cli.py
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional

import typer

app = typer.Typer(help="BS-Solctra: Biot-Savart particle tracing for toroidal confinement devices.")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("run")
def run_cmd(
    resource_path: Optional[Path] = typer.Option(
        None,
        "--resource-path",
        "-r",
        help="Directory with one coil file per coil.",
    ),
    particles_file: Optional[Path] = typer.Option(
        None,
        "--particles-file",
        "-p",
        help="File with the initial particle positions.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Directory where out_<step>.csv snapshots are written.",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="run.yaml file (or directory containing one). Command-line options override it.",
    ),
    steps: Optional[int] = typer.Option(None, "--steps", help="Total simulation steps [default: 10000]."),
    step_size: Optional[float] = typer.Option(None, "--step-size", help="Size of time step [default: 0.001]."),
    write_frequency: Optional[int] = typer.Option(
        None,
        "--write-frequency",
        "-w",
        help="How often to write output files [default: 10].",
    ),
    num_particles: Optional[int] = typer.Option(
        None,
        "--num-particles",
        help="Maximum number of particles to read (default: all).",
    ),
    precision: Optional[int] = typer.Option(None, "--precision", help="Precision to use (unused by the tracer)."),
    length: Optional[int] = typer.Option(None, "--length", help="Total particles to use (unused by the tracer)."),
    mode: Optional[int] = typer.Option(None, "--mode", help="Mode to run (unused by the tracer)."),
    magprof: Optional[int] = typer.Option(None, "--magprof", help="Magnetic profile (unused by the tracer)."),
    phi_angle: Optional[int] = typer.Option(None, "--phi-angle", help="Phi angle (unused by the tracer)."),
    dimension: Optional[int] = typer.Option(None, "--dimension", help="Dimension (unused by the tracer)."),
    workers: int = typer.Option(1, "--workers", help="Threads used to advance particles within a step."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """
    Trace particles through the coil field and write periodic snapshots.

    Example:
        bs-solctra run -r resources/ -p particles.txt -o results/ --steps 1000 -w 100
    """
    from .config_scheme import RunConfig
    from .data_io import InputDataError
    from .runner import load_run_config, run_simulation

    _configure_logging(verbose)
    logger = logging.getLogger(__name__)
    logger.info("Starting BS-Solctra")

    overrides = dict(
        resource_path=resource_path,
        particles_file=particles_file,
        output=output,
        steps=steps,
        step_size=step_size,
        write_frequency=write_frequency,
        num_particles=num_particles,
        precision=precision,
        length=length,
        mode=mode,
        magprof=magprof,
        phi_angle=phi_angle,
        dimension=dimension,
    )

    try:
        if config is not None:
            run_cfg = load_run_config(config).with_overrides(**overrides)
        else:
            missing = [
                flag
                for flag, value in (
                    ("--resource-path", resource_path),
                    ("--particles-file", particles_file),
                    ("--output", output),
                )
                if value is None
            ]
            if missing:
                typer.echo(f"Error: missing required option(s): {', '.join(missing)}", err=True)
                raise typer.Exit(1)
            run_cfg = RunConfig(
                resource_path=resource_path,
                particles_file=particles_file,
                output=output,
            ).with_overrides(**overrides)
    except (FileNotFoundError, ValueError, KeyError) as e:
        typer.echo(f"Error: invalid run configuration: {e}", err=True)
        raise typer.Exit(1)

    logger.debug("%s", run_cfg)

    try:
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                summary = run_simulation(run_cfg, executor=executor)
        else:
            summary = run_simulation(run_cfg)
    except (FileNotFoundError, NotADirectoryError, InputDataError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(
        f"Traced {summary.active + summary.diverged} particles for {summary.total_steps} steps "
        f"({summary.diverged} diverged). Wrote {len(summary.snapshot_steps)} snapshots to {run_cfg.output}"
    )


@app.command("validate-config")
def validate_config_cmd(
    files: List[Path] = typer.Argument(..., help="run.yaml files to validate."),
) -> None:
    """
    Validate run.yaml files. Exits with code 1 if any file has errors.
    """
    from .validate_config import validate_run_yaml_file

    all_errors: List[str] = []
    for file_path in files:
        errors = validate_run_yaml_file(file_path)
        if errors:
            all_errors.extend(errors)
        else:
            typer.echo(f"{file_path}: OK")

    for error in all_errors:
        typer.echo(error, err=True)
    if all_errors:
        raise typer.Exit(1)


@app.command("plot")
def plot_cmd(
    output_dir: Path = typer.Argument(..., help="Directory containing out_<step>.csv snapshots."),
    plots_dir: Optional[Path] = typer.Option(
        None,
        "--plots-dir",
        help="Where to write the figures (default: <output_dir>/plots).",
    ),
    resource_path: Optional[Path] = typer.Option(
        None,
        "--resource-path",
        "-r",
        help="Coil directory; when given, coils are drawn in the 3D plot.",
    ),
    major_radius: float = typer.Option(0.2381, "--major-radius", help="Device major radius."),
    minor_radius: float = typer.Option(0.0944165, "--minor-radius", help="Device minor radius."),
) -> None:
    """
    Plot the (R, Z) cross-section and 3D trajectories of a finished run.
    """
    from .config_scheme import DeviceConfig
    from .data_io import InputDataError, read_coil_data_directory
    from .post_processing import (
        confinement_history,
        load_snapshots,
        plot_cross_section,
        plot_trajectories_3d,
    )

    device = DeviceConfig(major_radius=major_radius, minor_radius=minor_radius)
    try:
        snapshots = load_snapshots(output_dir)
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    if not snapshots:
        typer.echo(f"Error: no out_<step>.csv snapshots in {output_dir}", err=True)
        raise typer.Exit(1)

    coils = None
    if resource_path is not None:
        try:
            coils = read_coil_data_directory(resource_path)
        except (FileNotFoundError, NotADirectoryError, InputDataError) as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)
    if plots_dir is None:
        plots_dir = output_dir / "plots"

    plot_cross_section(snapshots, plots_dir / "cross_section.png", device)
    plot_trajectories_3d(snapshots, plots_dir / "trajectories_3d.png", device, coils=coils)

    history = confinement_history(snapshots, device)
    last_step = max(history)
    typer.echo(f"Confined particles at step {last_step}: {history[last_step]}")
    typer.echo(f"Wrote plots to {plots_dir}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
