"""Frozen dataclass config for describing a posed pinhole camera.

Loading precedence: defaults -> YAML file -> CLI overrides -> freeze.

A config names a sensor preset and/or explicit intrinsic numbers, plus an
optional 4x4 extrinsic, and resolves to a
:class:`~pinholecam.camera.PinholeCameraParameters` via
:func:`build_camera_parameters`.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from pinholecam.camera import (
    PinholeCameraIntrinsic,
    PinholeCameraIntrinsicPreset,
    PinholeCameraParameters,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Config dataclasses
# ---------------------------------------------------------------------------

_INT_FIELDS = ("width", "height")
_FLOAT_FIELDS = ("fx", "fy", "cx", "cy")


@dataclass(frozen=True)
class IntrinsicConfig:
    """Config for the camera intrinsic.

    When ``preset`` is set, its calibration supplies the base values and any
    numeric field given here overrides the matching preset value. When
    ``preset`` is None, all six numeric fields are required.

    Attributes:
        preset: Preset name (case-insensitive) or integer preset value,
            stored as the name; None for explicit values.
        width: Image width in pixels.
        height: Image height in pixels.
        fx: X-axis focal length in pixels.
        fy: Y-axis focal length in pixels.
        cx: X-axis principal point in pixels.
        cy: Y-axis principal point in pixels.
    """

    preset: str | None = PinholeCameraIntrinsicPreset.PrimeSenseDefault.name
    width: int | None = None
    height: int | None = None
    fx: float | None = None
    fy: float | None = None
    cx: float | None = None
    cy: float | None = None

    def __post_init__(self) -> None:
        # CLI overrides arrive as strings; coerce to the field types.
        preset = self.preset
        if isinstance(preset, bool) or not isinstance(preset, (str, int, type(None))):
            raise ValueError(
                f"preset must be a preset name or integer, got {preset!r}"
            )
        if isinstance(preset, str) and preset.strip().isdigit():
            preset = int(preset)
        if isinstance(preset, int):
            try:
                preset = PinholeCameraIntrinsicPreset(preset).name
            except ValueError as exc:
                known = ", ".join(
                    f"{int(m)} {m.name}" for m in PinholeCameraIntrinsicPreset
                )
                raise ValueError(
                    f"Unknown preset {preset!r}. Known presets: {known}"
                ) from exc
            object.__setattr__(self, "preset", preset)
        elif isinstance(preset, str) and preset.strip().lower() in (
            "",
            "none",
            "null",
        ):
            object.__setattr__(self, "preset", None)
        for name in _INT_FIELDS:
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, int(value))
        for name in _FLOAT_FIELDS:
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, float(value))


@dataclass(frozen=True)
class CameraConfig:
    """Top-level frozen config for one posed camera.

    Attributes:
        name: Camera identifier, informational only.
        intrinsic: Intrinsic config.
        extrinsic: Optional 4x4 world-to-camera matrix as nested rows.
            None means identity.
    """

    name: str = "camera"
    intrinsic: IntrinsicConfig = field(default_factory=IntrinsicConfig)
    extrinsic: tuple[tuple[float, ...], ...] | None = None

    def __post_init__(self) -> None:
        if self.extrinsic is not None:
            rows = tuple(tuple(float(v) for v in row) for row in self.extrinsic)
            if len(rows) != 4 or any(len(row) != 4 for row in rows):
                raise ValueError("extrinsic must be a 4x4 nested list of numbers")
            object.__setattr__(self, "extrinsic", rows)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _flatten_overrides(
    flat: dict[str, Any], nested: dict[str, Any]
) -> dict[str, Any]:
    """Flatten nested dict overrides onto a dot-notation mapping.

    Overrides may arrive as dot-notation keys ("intrinsic.fx") or as nested
    dicts ({"intrinsic": {"fx": 600.0}}). Only the ``intrinsic`` section is
    nested; other dict values (none today) are kept whole.

    Args:
        flat: Existing flat override dict (dot-notation keys).
        nested: Override source; may be nested or already flat.

    Returns:
        New flat dict combining both sources, nested taking precedence.
    """
    result = dict(flat)
    for key, value in nested.items():
        if key == "intrinsic" and isinstance(value, dict):
            for subkey, subvalue in value.items():
                result[f"{key}.{subkey}"] = subvalue
        else:
            result[key] = value
    return result


def _split_sections(flat: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split dot-notation keys into (top-level kwargs, intrinsic kwargs).

    Args:
        flat: Flat dict with dot-notation keys.

    Returns:
        Tuple of top-level field dict and intrinsic field dict.

    Raises:
        ValueError: If a dotted key names a section other than ``intrinsic``.
    """
    top: dict[str, Any] = {}
    intrinsic: dict[str, Any] = {}
    for key, value in flat.items():
        if "." in key:
            section, _, field_name = key.partition(".")
            if section != "intrinsic":
                raise ValueError(f"Unknown config section {section!r} in {key!r}")
            intrinsic[field_name] = value
        else:
            top[key] = value
    return top, intrinsic


# ---------------------------------------------------------------------------
# Public factory
# ---------------------------------------------------------------------------


def load_config(
    yaml_path: str | Path | None = None,
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> CameraConfig:
    """Construct a frozen :class:`CameraConfig` using layered overrides.

    Loading precedence (lowest to highest priority):

    1. Dataclass field defaults
    2. YAML file (*yaml_path*)
    3. CLI overrides (*cli_overrides*)
    4. Freeze

    Args:
        yaml_path: Optional path to a YAML config file.
        cli_overrides: Optional dict of overrides, dot-notation
            (``"intrinsic.fx"``) or nested.

    Returns:
        Frozen :class:`CameraConfig` with all overrides applied.

    Raises:
        FileNotFoundError: If *yaml_path* does not exist.
        ValueError: If a key or value cannot be applied.
    """
    flat: dict[str, Any] = {}

    if yaml_path is not None:
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file does not exist: {yaml_path}")
        with yaml_path.open(encoding="utf-8") as fh:
            raw: dict[str, Any] = yaml.safe_load(fh) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"{yaml_path} must contain a YAML mapping")
        flat = _flatten_overrides(flat, raw)
        logger.debug("Applied %d config values from %s", len(flat), yaml_path)

    if cli_overrides:
        flat = _flatten_overrides(flat, cli_overrides)
        logger.debug("Applied CLI overrides: %s", sorted(cli_overrides))

    top_kwargs, intrinsic_kwargs = _split_sections(flat)
    try:
        return CameraConfig(
            intrinsic=IntrinsicConfig(**intrinsic_kwargs),
            **top_kwargs,
        )
    except TypeError as exc:
        raise ValueError(f"Invalid camera config: {exc}") from exc


def build_intrinsic(config: IntrinsicConfig) -> PinholeCameraIntrinsic:
    """Resolve an :class:`IntrinsicConfig` to an intrinsic.

    Args:
        config: Intrinsic config.

    Returns:
        New intrinsic.

    Raises:
        ValueError: If the preset name is unknown, or no preset is given and
            some numeric field is missing.
    """
    explicit = {
        name: getattr(config, name) for name in _INT_FIELDS + _FLOAT_FIELDS
    }
    if config.preset is not None:
        calibration = PinholeCameraIntrinsicPreset.from_name(config.preset).calibration
        base = dataclasses.asdict(calibration)
    else:
        missing = [name for name, value in explicit.items() if value is None]
        if missing:
            raise ValueError(
                f"Intrinsic config without a preset is missing: {', '.join(missing)}"
            )
        base = {}
    base.update({name: value for name, value in explicit.items() if value is not None})
    return PinholeCameraIntrinsic(**base)


def build_camera_parameters(config: CameraConfig) -> PinholeCameraParameters:
    """Resolve a :class:`CameraConfig` to camera parameters.

    Args:
        config: Camera config.

    Returns:
        New camera parameters; identity extrinsic when none is configured.
    """
    intrinsic = build_intrinsic(config.intrinsic)
    if not intrinsic.is_valid():
        logger.warning(
            "Camera %r resolves to an invalid intrinsic (%dx%d)",
            config.name,
            intrinsic.width,
            intrinsic.height,
        )
    return PinholeCameraParameters(intrinsic=intrinsic, extrinsic=config.extrinsic)


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def serialize_config(config: CameraConfig) -> str:
    """Serialize *config* to a YAML string.

    Tuples become lists so the output reloads with :func:`yaml.safe_load`.

    Args:
        config: Frozen camera config to serialize.

    Returns:
        YAML string representation of the config.
    """
    data = dataclasses.asdict(config)
    if data["extrinsic"] is not None:
        data["extrinsic"] = [list(row) for row in data["extrinsic"]]
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=True)
