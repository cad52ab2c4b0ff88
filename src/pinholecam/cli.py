"""pinholecam CLI -- build, inspect, and list pinhole camera records."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import click

from pinholecam.camera import (
    PinholeCameraIntrinsic,
    PinholeCameraIntrinsicPreset,
    PinholeCameraParameters,
)
from pinholecam.config import (
    CameraConfig,
    build_camera_parameters,
    load_config,
    serialize_config,
)
from pinholecam.io import (
    read_camera_record,
    write_pinhole_camera_intrinsic,
    write_pinhole_camera_parameters,
)


def _parse_overrides(items: tuple[str, ...]) -> dict[str, Any]:
    """Parse ``key=val`` pairs from repeated ``--set`` options.

    Args:
        items: Raw option values.

    Returns:
        Dict of dot-notation key to string value.

    Raises:
        click.BadParameter: If an item has no ``=`` or an empty key.
    """
    overrides: dict[str, Any] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(
                f"expected key=val, got {item!r}", param_hint="--set"
            )
        overrides[key.strip()] = value.strip()
    return overrides


def _describe_intrinsic(intrinsic: PinholeCameraIntrinsic) -> list[str]:
    fx, fy = intrinsic.get_focal_length()
    cx, cy = intrinsic.get_principal_point()
    return [
        repr(intrinsic),
        f"focal length: ({fx}, {fy})",
        f"principal point: ({cx}, {cy})",
        f"skew: {intrinsic.get_skew()}",
        f"valid: {intrinsic.is_valid()}",
    ]


# ---------------------------------------------------------------------------
# CLI definition
# ---------------------------------------------------------------------------


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug logging.")
def cli(verbose: bool) -> None:
    """pinholecam -- pinhole camera intrinsics, presets, and posed parameters."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
def presets() -> None:
    """List the built-in sensor presets and their calibrations."""
    for preset in PinholeCameraIntrinsicPreset:
        cal = preset.calibration
        click.echo(
            f"{int(preset)} {preset.name}: {cal.width}x{cal.height} "
            f"fx={cal.fx} fy={cal.fy} cx={cal.cx} cy={cal.cy}"
        )


@cli.command("init-config")
@click.option(
    "--output",
    "-o",
    default="camera.yaml",
    type=click.Path(),
    help="Output file path (default: camera.yaml).",
)
@click.option(
    "--force",
    is_flag=True,
    default=False,
    help="Overwrite existing file.",
)
def init_config(output: str, force: bool) -> None:
    """Generate a default template YAML camera config."""
    output_path = Path(output)
    if output_path.exists() and not force:
        raise click.ClickException(
            f"'{output}' already exists. Use --force to overwrite."
        )
    output_path.write_text(serialize_config(CameraConfig()), encoding="utf-8")
    click.echo(f"Config written to {output}")


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    type=click.Path(exists=True),
    help="Path to camera config YAML.",
)
@click.option(
    "--output",
    "-o",
    default="camera.json",
    type=click.Path(),
    help="Output JSON path (default: camera.json).",
)
@click.option(
    "--set",
    "overrides",
    multiple=True,
    help="Config override as key=val (e.g. --set intrinsic.fx=600).",
)
@click.option(
    "--intrinsic-only",
    is_flag=True,
    default=False,
    help="Write only the intrinsic record.",
)
def build(
    config_path: str | None,
    output: str,
    overrides: tuple[str, ...],
    intrinsic_only: bool,
) -> None:
    """Resolve a camera config and write it as a JSON record."""
    try:
        config = load_config(config_path, cli_overrides=_parse_overrides(overrides))
        parameters = build_camera_parameters(config)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    if intrinsic_only:
        write_pinhole_camera_intrinsic(output, parameters.intrinsic)
    else:
        write_pinhole_camera_parameters(output, parameters)
    click.echo(f"Camera {config.name!r} written to {output}")


@cli.command()
@click.argument("path", type=click.Path())
def inspect(path: str) -> None:
    """Print a summary of a camera JSON record."""
    try:
        record = read_camera_record(path)
    except (FileNotFoundError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc

    if isinstance(record, PinholeCameraParameters):
        click.echo(repr(record))
        lines = _describe_intrinsic(record.intrinsic)
        lines.append("extrinsic:")
        lines.extend(f"  {row}" for row in record.extrinsic.tolist())
    else:
        lines = _describe_intrinsic(record)
    for line in lines:
        click.echo(line)


def main() -> None:
    """Entry point for the ``pinholecam`` console script."""
    cli()
