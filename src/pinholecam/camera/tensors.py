"""Conversion of camera values to PyTorch tensors for downstream consumers.

The value types keep float64 numpy storage. Rendering and reconstruction
code works in float32 tensors, so the narrowing happens here, explicitly.
"""

from __future__ import annotations

import torch

from .intrinsic import PinholeCameraIntrinsic
from .parameters import PinholeCameraParameters


def intrinsic_to_tensor(
    intrinsic: PinholeCameraIntrinsic,
    dtype: torch.dtype = torch.float32,
    device: torch.device | str | None = None,
) -> torch.Tensor:
    """Copy the intrinsic matrix into a new tensor.

    Args:
        intrinsic: Source intrinsic.
        dtype: Target dtype.
        device: Target device. Defaults to CPU.

    Returns:
        Intrinsic matrix K, shape (3, 3).
    """
    return torch.tensor(intrinsic.intrinsic_matrix, dtype=dtype, device=device)


def extrinsic_to_tensors(
    parameters: PinholeCameraParameters,
    dtype: torch.dtype = torch.float32,
    device: torch.device | str | None = None,
) -> tuple[torch.Tensor, torch.Tensor]:
    """Split the extrinsic into rotation and translation tensors.

    Args:
        parameters: Posed camera.
        dtype: Target dtype.
        device: Target device. Defaults to CPU.

    Returns:
        Tuple (R, t): rotation (world to camera), shape (3, 3), and
        translation, shape (3,).
    """
    extrinsic = torch.tensor(parameters.extrinsic, dtype=dtype, device=device)
    return extrinsic[:3, :3].clone(), extrinsic[:3, 3].clone()


def camera_center(
    parameters: PinholeCameraParameters,
    dtype: torch.dtype = torch.float32,
    device: torch.device | str | None = None,
) -> torch.Tensor:
    """World-frame camera center, computed as C = -R^T @ t.

    Assumes the extrinsic is a rigid transform.

    Args:
        parameters: Posed camera.
        dtype: Target dtype.
        device: Target device. Defaults to CPU.

    Returns:
        Camera center, shape (3,).
    """
    R, t = extrinsic_to_tensors(parameters, dtype=dtype, device=device)
    return -R.T @ t
