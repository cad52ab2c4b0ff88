"""Posed pinhole camera: one intrinsic plus one world-to-camera extrinsic."""

from __future__ import annotations

from typing import Any

import numpy as np

from .intrinsic import PinholeCameraIntrinsic, as_matrix


class PinholeCameraParameters:
    """Contains both intrinsic and extrinsic pinhole camera parameters.

    The extrinsic maps world points to camera points,
    ``P_camera = extrinsic @ P_world`` in homogeneous coordinates. It is not
    checked for orthonormality; see :func:`is_rigid_transform`.

    Args:
        intrinsic: Intrinsic to copy in. Defaults to an invalid 0x0 camera.
        extrinsic: 4x4 array-like. Defaults to the identity.

    Attributes:
        intrinsic: Owned :class:`PinholeCameraIntrinsic`. Assigning stores a
            copy; reading returns the owned instance.
        extrinsic: 4x4 float64 array, camera extrinsic parameters.
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(
        self,
        intrinsic: PinholeCameraIntrinsic | PinholeCameraParameters | None = None,
        extrinsic: Any = None,
    ) -> None:
        if isinstance(intrinsic, PinholeCameraParameters):
            other = intrinsic
            self._intrinsic = other._intrinsic.copy()
            self._extrinsic = other._extrinsic.copy()
            return
        self._intrinsic = (
            PinholeCameraIntrinsic() if intrinsic is None else intrinsic.copy()
        )
        self._extrinsic = (
            np.eye(4, dtype=np.float64)
            if extrinsic is None
            else as_matrix(extrinsic, (4, 4), "extrinsic")
        )

    @property
    def intrinsic(self) -> PinholeCameraIntrinsic:
        """PinholeCameraIntrinsic object."""
        return self._intrinsic

    @intrinsic.setter
    def intrinsic(self, value: PinholeCameraIntrinsic) -> None:
        self._intrinsic = value.copy()

    @property
    def extrinsic(self) -> np.ndarray:
        """4x4 numpy array: Camera extrinsic parameters."""
        return self._extrinsic

    @extrinsic.setter
    def extrinsic(self, value: Any) -> None:
        self._extrinsic = as_matrix(value, (4, 4), "extrinsic")

    def copy(self) -> PinholeCameraParameters:
        """Return an independent copy, including the nested intrinsic."""
        return PinholeCameraParameters(self)

    def __copy__(self) -> PinholeCameraParameters:
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> PinholeCameraParameters:
        return self.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PinholeCameraParameters):
            return NotImplemented
        return self._intrinsic == other._intrinsic and np.array_equal(
            self._extrinsic, other._extrinsic, equal_nan=True
        )

    def __repr__(self) -> str:
        return (
            "PinholeCameraParameters class.\n"
            "Access its data via intrinsic and extrinsic."
        )


def is_rigid_transform(matrix: Any, atol: float = 1e-6) -> bool:
    """Check that a 4x4 matrix is a proper rigid transform.

    The rotation block must be orthonormal with determinant +1 and the
    bottom row must be ``(0, 0, 0, 1)``, both within *atol*.

    Args:
        matrix: 4x4 array-like.
        atol: Absolute tolerance.

    Returns:
        True if *matrix* is a rigid transform.
    """
    m = np.asarray(matrix, dtype=np.float64)
    if m.shape != (4, 4):
        return False
    R = m[:3, :3]
    return bool(
        np.allclose(m[3], [0.0, 0.0, 0.0, 1.0], atol=atol)
        and np.allclose(R.T @ R, np.eye(3), atol=atol)
        and np.isclose(np.linalg.det(R), 1.0, atol=atol)
    )
