"""Tests for tensor conversion helpers."""

import numpy as np
import torch

from pinholecam.camera import (
    PinholeCameraIntrinsic,
    PinholeCameraParameters,
    PrimeSenseDefault,
    camera_center,
    extrinsic_to_tensors,
    intrinsic_to_tensor,
)


def _posed_at(center: np.ndarray) -> PinholeCameraParameters:
    """Camera rotated 90 degrees about Z, centered at *center*."""
    R = np.array([[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
    extrinsic = np.eye(4)
    extrinsic[:3, :3] = R
    extrinsic[:3, 3] = -R @ center
    return PinholeCameraParameters(
        intrinsic=PinholeCameraIntrinsic(PrimeSenseDefault), extrinsic=extrinsic
    )


class TestIntrinsicToTensor:
    """Tests for intrinsic_to_tensor."""

    def test_default_float32(self):
        K = intrinsic_to_tensor(PinholeCameraIntrinsic(PrimeSenseDefault))

        assert K.shape == (3, 3)
        assert K.dtype == torch.float32
        assert K[0, 0].item() == 525.0
        assert K[1, 2].item() == 239.5

    def test_float64_exact(self):
        intrinsic = PinholeCameraIntrinsic(PrimeSenseDefault)
        K = intrinsic_to_tensor(intrinsic, dtype=torch.float64)

        np.testing.assert_array_equal(K.numpy(), intrinsic.intrinsic_matrix)

    def test_tensor_is_independent(self):
        intrinsic = PinholeCameraIntrinsic(PrimeSenseDefault)
        K = intrinsic_to_tensor(intrinsic, dtype=torch.float64)
        K[0, 0] = 1.0

        assert intrinsic.get_focal_length() == (525.0, 525.0)


class TestExtrinsic:
    """Tests for extrinsic_to_tensors and camera_center."""

    def test_split_shapes(self):
        R, t = extrinsic_to_tensors(_posed_at(np.array([1.0, 2.0, 3.0])))

        assert R.shape == (3, 3)
        assert t.shape == (3,)
        assert R.dtype == torch.float32

    def test_identity(self):
        R, t = extrinsic_to_tensors(PinholeCameraParameters())

        assert torch.equal(R, torch.eye(3))
        assert torch.equal(t, torch.zeros(3))

    def test_camera_center(self):
        center = np.array([1.0, 2.0, 3.0])
        C = camera_center(_posed_at(center), dtype=torch.float64)

        np.testing.assert_allclose(C.numpy(), center, atol=1e-12)
