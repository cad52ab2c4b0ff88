"""Pinhole camera intrinsics and the preset sensor calibrations.

Coordinate conventions:
    - Image (pixel): (u, v), origin at the top-left pixel centre.
    - Intrinsic matrix K maps camera-frame rays to homogeneous pixels:
      ``[[fx, s, cx], [0, fy, cy], [0, 0, 1]]`` where ``s`` is the skew.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

import numpy as np

# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PresetCalibration:
    """Frozen factory calibration for a known sensor.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        fx: X-axis focal length in pixels.
        fy: Y-axis focal length in pixels.
        cx: X-axis principal point in pixels.
        cy: Y-axis principal point in pixels.
    """

    width: int
    height: int
    fx: float
    fy: float
    cx: float
    cy: float


class PinholeCameraIntrinsicPreset(enum.IntEnum):
    """Enum class that contains default camera intrinsic parameters for different sensors."""

    PrimeSenseDefault = 0
    Kinect2DepthCameraDefault = 1
    Kinect2ColorCameraDefault = 2

    @property
    def calibration(self) -> PresetCalibration:
        """Frozen calibration constants for this sensor."""
        return _PRESET_CALIBRATIONS[self]

    @classmethod
    def from_name(cls, name: str) -> PinholeCameraIntrinsicPreset:
        """Look up a preset by member name, ignoring case.

        Args:
            name: Preset name, e.g. ``"PrimeSenseDefault"`` or
                ``"primesensedefault"``.

        Returns:
            The matching preset.

        Raises:
            ValueError: If ``name`` is not a string or no preset has that name.
        """
        if not isinstance(name, str):
            raise ValueError(f"Preset name must be a string, got {name!r}")
        for member in cls:
            if member.name.lower() == name.strip().lower():
                return member
        known = ", ".join(m.name for m in cls)
        raise ValueError(f"Unknown preset {name!r}. Known presets: {known}")


# Kinect2 depth values are the reference library's shipped constants (fx/fy
# and cx/cy are as published there); do not re-derive them.
_PRESET_CALIBRATIONS: dict[PinholeCameraIntrinsicPreset, PresetCalibration] = {
    PinholeCameraIntrinsicPreset.PrimeSenseDefault: PresetCalibration(
        640, 480, 525.0, 525.0, 319.5, 239.5
    ),
    PinholeCameraIntrinsicPreset.Kinect2DepthCameraDefault: PresetCalibration(
        512, 424, 254.878, 205.395, 365.456, 365.456
    ),
    PinholeCameraIntrinsicPreset.Kinect2ColorCameraDefault: PresetCalibration(
        1920, 1080, 1059.9413, 1059.9413, 959.5, 539.5
    ),
}

# Alias kept for callers using the historical enum name
PinholeCameraIntrinsicParameters = PinholeCameraIntrinsicPreset

PrimeSenseDefault = PinholeCameraIntrinsicPreset.PrimeSenseDefault
Kinect2DepthCameraDefault = PinholeCameraIntrinsicPreset.Kinect2DepthCameraDefault
Kinect2ColorCameraDefault = PinholeCameraIntrinsicPreset.Kinect2ColorCameraDefault


# ---------------------------------------------------------------------------
# Intrinsic
# ---------------------------------------------------------------------------


def _canonical_matrix(fx: float, fy: float, cx: float, cy: float) -> np.ndarray:
    return np.array(
        [[fx, 0.0, cx], [0.0, fy, cy], [0.0, 0.0, 1.0]],
        dtype=np.float64,
    )


def as_matrix(value: Any, shape: tuple[int, int], name: str) -> np.ndarray:
    """Copy *value* into a float64 array of the given shape.

    Args:
        value: Array-like (nested lists, numpy array, tensor).
        shape: Required shape.
        name: Field name used in the error message.

    Returns:
        New float64 array owned by the caller.

    Raises:
        ValueError: If *value* does not have the required shape.
    """
    matrix = np.array(value, dtype=np.float64)
    if matrix.shape != shape:
        raise ValueError(f"{name} must have shape {shape}, got {matrix.shape}")
    return matrix


class PinholeCameraIntrinsic:
    """Intrinsic camera matrix together with the image width and height.

    Construction forms:

    - ``PinholeCameraIntrinsic()``: invalid 0x0 camera, identity matrix.
    - ``PinholeCameraIntrinsic(width, height, fx, fy, cx, cy)``: canonical
      matrix with zero skew.
    - ``PinholeCameraIntrinsic(preset)`` or ``PinholeCameraIntrinsic(param=preset)``:
      factory calibration of a known sensor.
    - ``PinholeCameraIntrinsic(other)``: independent copy of *other*.

    Non-positive extents are accepted and reported by :meth:`is_valid`
    rather than rejected, so partially initialized cameras can be stored
    and reloaded.

    Attributes:
        width: Width of the image in pixels.
        height: Height of the image in pixels.
        intrinsic_matrix: 3x3 float64 array ``[[fx, 0, cx], [0, fy, cy], [0, 0, 1]]``.
            Element writes are visible to the accessors.
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(
        self,
        width: int | PinholeCameraIntrinsicPreset | PinholeCameraIntrinsic = 0,
        height: int = 0,
        fx: float = 1.0,
        fy: float = 1.0,
        cx: float = 0.0,
        cy: float = 0.0,
        *,
        param: PinholeCameraIntrinsicPreset | None = None,
    ) -> None:
        # IntEnum members are ints, so check the preset form first.
        if isinstance(width, PinholeCameraIntrinsicPreset):
            param = width
        if param is not None:
            cal = PinholeCameraIntrinsicPreset(param).calibration
            self.set_intrinsics(cal.width, cal.height, cal.fx, cal.fy, cal.cx, cal.cy)
        elif isinstance(width, PinholeCameraIntrinsic):
            self._width = width._width
            self._height = width._height
            self._intrinsic_matrix = width._intrinsic_matrix.copy()
        else:
            self.set_intrinsics(width, height, fx, fy, cx, cy)

    @classmethod
    def from_preset(
        cls, preset: PinholeCameraIntrinsicPreset | int
    ) -> PinholeCameraIntrinsic:
        """Build an intrinsic from a preset sensor calibration.

        Args:
            preset: Preset member or its integer value.

        Returns:
            New intrinsic holding the preset constants.
        """
        return cls(param=PinholeCameraIntrinsicPreset(preset))

    # --- fields -----------------------------------------------------------

    @property
    def width(self) -> int:
        """int: Width of the image."""
        return self._width

    @width.setter
    def width(self, value: int) -> None:
        self._width = int(value)

    @property
    def height(self) -> int:
        """int: Height of the image."""
        return self._height

    @height.setter
    def height(self, value: int) -> None:
        self._height = int(value)

    @property
    def intrinsic_matrix(self) -> np.ndarray:
        """3x3 numpy array: Intrinsic camera matrix ``[[fx, 0, cx], [0, fy, cy], [0, 0, 1]]``."""
        return self._intrinsic_matrix

    @intrinsic_matrix.setter
    def intrinsic_matrix(self, value: Any) -> None:
        self._intrinsic_matrix = as_matrix(value, (3, 3), "intrinsic_matrix")

    # --- operations -------------------------------------------------------

    def set_intrinsics(
        self, width: int, height: int, fx: float, fy: float, cx: float, cy: float
    ) -> None:
        """Set camera intrinsic parameters.

        Resets the matrix to the canonical zero-skew form.

        Args:
            width: Width of the image.
            height: Height of the image.
            fx: X-axis focal length.
            fy: Y-axis focal length.
            cx: X-axis principal point.
            cy: Y-axis principal point.
        """
        self._width = int(width)
        self._height = int(height)
        self._intrinsic_matrix = _canonical_matrix(fx, fy, cx, cy)

    def get_focal_length(self) -> tuple[float, float]:
        """Returns the focal length in a tuple of X-axis and Y-axis focal lengths."""
        m = self._intrinsic_matrix
        return float(m[0, 0]), float(m[1, 1])

    def get_principal_point(self) -> tuple[float, float]:
        """Returns the principal point in a tuple of X-axis and Y-axis principal points."""
        m = self._intrinsic_matrix
        return float(m[0, 2]), float(m[1, 2])

    def get_skew(self) -> float:
        """Returns the skew."""
        return float(self._intrinsic_matrix[0, 1])

    def is_valid(self) -> bool:
        """Returns True iff both the width and height are greater than 0."""
        return self._width > 0 and self._height > 0

    # --- value semantics --------------------------------------------------

    def copy(self) -> PinholeCameraIntrinsic:
        """Return an independent copy."""
        return PinholeCameraIntrinsic(self)

    def __copy__(self) -> PinholeCameraIntrinsic:
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> PinholeCameraIntrinsic:
        return self.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PinholeCameraIntrinsic):
            return NotImplemented
        return (
            self._width == other._width
            and self._height == other._height
            and np.array_equal(
                self._intrinsic_matrix, other._intrinsic_matrix, equal_nan=True
            )
        )

    def __repr__(self) -> str:
        return (
            f"PinholeCameraIntrinsic with width = {self._width} and height = "
            f"{self._height}.\nAccess intrinsics with intrinsic_matrix."
        )


def is_canonical_intrinsic_matrix(matrix: Any) -> bool:
    """Check that a matrix has the upper-triangular pinhole form.

    The bottom row must be exactly ``(0, 0, 1)`` and entries (1, 0), (2, 0),
    (2, 1) exactly zero. Skew at (0, 1) is allowed. The value types do not
    enforce this; consumers that need the canonical form call it first.

    Args:
        matrix: 3x3 array-like.

    Returns:
        True if *matrix* is 3x3 and in canonical form.
    """
    m = np.asarray(matrix, dtype=np.float64)
    if m.shape != (3, 3):
        return False
    return bool(
        m[1, 0] == 0.0
        and m[2, 0] == 0.0
        and m[2, 1] == 0.0
        and m[2, 2] == 1.0
    )

