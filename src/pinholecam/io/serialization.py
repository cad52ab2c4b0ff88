"""JSON records for pinhole camera intrinsics and parameters.

Record layout (matrices flattened row-major)::

    {
        "class_name": "PinholeCameraIntrinsic",
        "version_major": 1,
        "version_minor": 0,
        "width": 640,
        "height": 480,
        "intrinsic_matrix": [fx, 0, cx, 0, fy, cy, 0, 0, 1]
    }

    {
        "class_name": "PinholeCameraParameters",
        "version_major": 1,
        "version_minor": 0,
        "extrinsic": [16 numbers],
        "intrinsic": {...intrinsic record...}
    }

Floats are written with their shortest round-trip representation, so a
write/read cycle reproduces every float64 bit.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any

import numpy as np

from pinholecam.camera.intrinsic import (
    PinholeCameraIntrinsic,
    is_canonical_intrinsic_matrix,
)
from pinholecam.camera.parameters import PinholeCameraParameters

__all__ = [
    "intrinsic_from_dict",
    "intrinsic_to_dict",
    "parameters_from_dict",
    "parameters_to_dict",
    "read_camera_record",
    "read_pinhole_camera_intrinsic",
    "read_pinhole_camera_parameters",
    "write_pinhole_camera_intrinsic",
    "write_pinhole_camera_parameters",
]

logger = logging.getLogger(__name__)

INTRINSIC_CLASS_NAME = "PinholeCameraIntrinsic"
PARAMETERS_CLASS_NAME = "PinholeCameraParameters"
VERSION_MAJOR = 1
VERSION_MINOR = 0


# ---------------------------------------------------------------------------
# Dict conversion
# ---------------------------------------------------------------------------


def _flatten(matrix: np.ndarray) -> list[float]:
    return [float(v) for v in matrix.reshape(-1)]


def _unflatten(values: Any, shape: tuple[int, int], name: str) -> np.ndarray:
    try:
        flat = np.asarray(values, dtype=np.float64).reshape(-1)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a list of numbers: {exc}") from exc
    expected = shape[0] * shape[1]
    if flat.size != expected:
        raise ValueError(f"{name} must have {expected} entries, got {flat.size}")
    return flat.reshape(shape).copy()


def _require(record: dict[str, Any], key: str, class_name: str) -> Any:
    if key not in record:
        raise ValueError(f"{class_name} record is missing field {key!r}")
    return record[key]


def _as_extent(value: Any, name: str) -> int:
    # JSON numbers arrive as int or float; only integral finite values count.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, float) and not (
        math.isfinite(value) and value.is_integer()
    ):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    return int(value)


def _check_class_name(record: dict[str, Any], expected: str) -> None:
    if not isinstance(record, dict):
        raise ValueError(f"{expected} record must be a JSON object")
    class_name = record.get("class_name", expected)
    if class_name != expected:
        raise ValueError(f"Expected class_name {expected!r}, got {class_name!r}")


def intrinsic_to_dict(intrinsic: PinholeCameraIntrinsic) -> dict[str, Any]:
    """Convert an intrinsic to a JSON-compatible record.

    Args:
        intrinsic: Intrinsic to convert. Invalid (0x0) intrinsics are allowed.

    Returns:
        Record dict in the layout described in the module docstring.
    """
    return {
        "class_name": INTRINSIC_CLASS_NAME,
        "version_major": VERSION_MAJOR,
        "version_minor": VERSION_MINOR,
        "width": intrinsic.width,
        "height": intrinsic.height,
        "intrinsic_matrix": _flatten(intrinsic.intrinsic_matrix),
    }


def intrinsic_from_dict(record: dict[str, Any]) -> PinholeCameraIntrinsic:
    """Rebuild an intrinsic from a record produced by :func:`intrinsic_to_dict`.

    ``class_name`` and the version fields are optional; when ``class_name``
    is present it must match.

    Args:
        record: Parsed JSON record.

    Returns:
        New intrinsic. Invalid extents and non-canonical matrices are kept
        as-is and only logged.

    Raises:
        ValueError: If the record has the wrong class name, lacks a field,
            has a width or height that is not an integer, or the matrix does
            not have nine entries.
    """
    _check_class_name(record, INTRINSIC_CLASS_NAME)
    width = _as_extent(_require(record, "width", INTRINSIC_CLASS_NAME), "width")
    height = _as_extent(_require(record, "height", INTRINSIC_CLASS_NAME), "height")
    matrix = _unflatten(
        _require(record, "intrinsic_matrix", INTRINSIC_CLASS_NAME),
        (3, 3),
        "intrinsic_matrix",
    )

    intrinsic = PinholeCameraIntrinsic()
    intrinsic.width = width
    intrinsic.height = height
    intrinsic.intrinsic_matrix = matrix

    if not intrinsic.is_valid():
        logger.warning(
            "Loaded intrinsic has invalid extent %dx%d",
            intrinsic.width,
            intrinsic.height,
        )
    if not is_canonical_intrinsic_matrix(matrix):
        logger.warning("Loaded intrinsic matrix is not in canonical pinhole form")
    return intrinsic


def parameters_to_dict(parameters: PinholeCameraParameters) -> dict[str, Any]:
    """Convert camera parameters to a JSON-compatible record.

    Args:
        parameters: Posed camera to convert.

    Returns:
        Record dict with a nested intrinsic record.
    """
    return {
        "class_name": PARAMETERS_CLASS_NAME,
        "version_major": VERSION_MAJOR,
        "version_minor": VERSION_MINOR,
        "extrinsic": _flatten(parameters.extrinsic),
        "intrinsic": intrinsic_to_dict(parameters.intrinsic),
    }


def parameters_from_dict(record: dict[str, Any]) -> PinholeCameraParameters:
    """Rebuild camera parameters from a record.

    Args:
        record: Parsed JSON record.

    Returns:
        New camera parameters.

    Raises:
        ValueError: If the record or its nested intrinsic record is malformed.
    """
    _check_class_name(record, PARAMETERS_CLASS_NAME)
    extrinsic = _unflatten(
        _require(record, "extrinsic", PARAMETERS_CLASS_NAME), (4, 4), "extrinsic"
    )
    intrinsic = intrinsic_from_dict(
        _require(record, "intrinsic", PARAMETERS_CLASS_NAME)
    )
    return PinholeCameraParameters(intrinsic=intrinsic, extrinsic=extrinsic)


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def _read_json(path: str | Path) -> dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Camera file does not exist: {path}")
    with path.open(encoding="utf-8") as fh:
        try:
            record = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path} is not valid JSON: {exc}") from exc
    logger.debug("Read camera record from %s", path)
    return record


def _write_json(path: str | Path, record: dict[str, Any]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(record, fh, indent=4)
        fh.write("\n")
    logger.debug("Wrote %s record to %s", record["class_name"], path)


def read_pinhole_camera_intrinsic(path: str | Path) -> PinholeCameraIntrinsic:
    """Read an intrinsic JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        Loaded intrinsic.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a valid intrinsic record.
    """
    return intrinsic_from_dict(_read_json(path))


def write_pinhole_camera_intrinsic(
    path: str | Path, intrinsic: PinholeCameraIntrinsic
) -> None:
    """Write an intrinsic to a JSON file, creating parent directories.

    Args:
        path: Destination path.
        intrinsic: Intrinsic to write.
    """
    _write_json(path, intrinsic_to_dict(intrinsic))


def read_pinhole_camera_parameters(path: str | Path) -> PinholeCameraParameters:
    """Read a camera parameters JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        Loaded camera parameters.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a valid parameters record.
    """
    return parameters_from_dict(_read_json(path))


def write_pinhole_camera_parameters(
    path: str | Path, parameters: PinholeCameraParameters
) -> None:
    """Write camera parameters to a JSON file, creating parent directories.

    Args:
        path: Destination path.
        parameters: Camera parameters to write.
    """
    _write_json(path, parameters_to_dict(parameters))


def read_camera_record(
    path: str | Path,
) -> PinholeCameraIntrinsic | PinholeCameraParameters:
    """Read either kind of camera record, dispatching on ``class_name``.

    Args:
        path: Path to the JSON file.

    Returns:
        The loaded intrinsic or camera parameters.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If ``class_name`` is missing or unknown, or the record is
            malformed.
    """
    record = _read_json(path)
    class_name = record.get("class_name") if isinstance(record, dict) else None
    if class_name == INTRINSIC_CLASS_NAME:
        return intrinsic_from_dict(record)
    if class_name == PARAMETERS_CLASS_NAME:
        return parameters_from_dict(record)
    raise ValueError(f"Unknown camera record class_name {class_name!r} in {path}")
