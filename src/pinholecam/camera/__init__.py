"""Pinhole camera intrinsics, sensor presets, and posed camera parameters."""

from .intrinsic import (
    Kinect2ColorCameraDefault,
    Kinect2DepthCameraDefault,
    PinholeCameraIntrinsic,
    PinholeCameraIntrinsicParameters,
    PinholeCameraIntrinsicPreset,
    PresetCalibration,
    PrimeSenseDefault,
    is_canonical_intrinsic_matrix,
)
from .parameters import PinholeCameraParameters, is_rigid_transform
from .tensors import camera_center, extrinsic_to_tensors, intrinsic_to_tensor

__all__ = [
    "Kinect2ColorCameraDefault",
    "Kinect2DepthCameraDefault",
    "PinholeCameraIntrinsic",
    "PinholeCameraIntrinsicParameters",
    "PinholeCameraIntrinsicPreset",
    "PinholeCameraParameters",
    "PresetCalibration",
    "PrimeSenseDefault",
    "camera_center",
    "extrinsic_to_tensors",
    "intrinsic_to_tensor",
    "is_canonical_intrinsic_matrix",
    "is_rigid_transform",
]
