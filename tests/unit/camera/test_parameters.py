"""Tests for PinholeCameraParameters."""

import copy

import numpy as np
import pytest

from pinholecam.camera import (
    Kinect2ColorCameraDefault,
    PinholeCameraIntrinsic,
    PinholeCameraParameters,
    PrimeSenseDefault,
    is_rigid_transform,
)


@pytest.fixture
def posed() -> PinholeCameraParameters:
    """PrimeSense camera translated by (1, 2, 3)."""
    extrinsic = np.eye(4)
    extrinsic[:3, 3] = [1.0, 2.0, 3.0]
    return PinholeCameraParameters(
        intrinsic=PinholeCameraIntrinsic(PrimeSenseDefault), extrinsic=extrinsic
    )


class TestConstruction:
    """Tests for construction."""

    def test_default(self):
        """Default has identity extrinsic and an invalid intrinsic."""
        params = PinholeCameraParameters()

        np.testing.assert_array_equal(params.extrinsic, np.eye(4))
        assert params.extrinsic.dtype == np.float64
        assert not params.intrinsic.is_valid()

    def test_constructor_copies_inputs(self):
        intrinsic = PinholeCameraIntrinsic(PrimeSenseDefault)
        extrinsic = np.eye(4)
        params = PinholeCameraParameters(intrinsic=intrinsic, extrinsic=extrinsic)

        intrinsic.width = 1
        extrinsic[0, 3] = 5.0

        assert params.intrinsic.width == 640
        assert params.extrinsic[0, 3] == 0.0

    def test_bad_extrinsic_shape(self):
        with pytest.raises(ValueError, match="extrinsic"):
            PinholeCameraParameters(extrinsic=np.eye(3))


class TestFieldAccess:
    """Tests for intrinsic and extrinsic reads and writes."""

    def test_intrinsic_in_place_edit_sticks(self, posed: PinholeCameraParameters):
        posed.intrinsic.width = 100
        posed.intrinsic.intrinsic_matrix[0, 1] = 0.5

        assert posed.intrinsic.width == 100
        assert posed.intrinsic.get_skew() == 0.5

    def test_intrinsic_assignment_copies(self, posed: PinholeCameraParameters):
        """Assigned intrinsic is owned; later edits to the source do not leak."""
        source = PinholeCameraIntrinsic(Kinect2ColorCameraDefault)
        posed.intrinsic = source
        source.width = 0

        assert posed.intrinsic.width == 1920
        assert posed.intrinsic == PinholeCameraIntrinsic(Kinect2ColorCameraDefault)

    def test_extrinsic_assignment(self, posed: PinholeCameraParameters):
        new = [
            [0.0, -1.0, 0.0, 0.0],
            [1.0, 0.0, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
        posed.extrinsic = new

        np.testing.assert_array_equal(posed.extrinsic, np.array(new))

    def test_extrinsic_in_place(self, posed: PinholeCameraParameters):
        posed.extrinsic[2, 3] = -7.0

        assert posed.extrinsic[2, 3] == -7.0

    def test_extrinsic_not_checked(self, posed: PinholeCameraParameters):
        """Non-rigid extrinsics are stored without complaint."""
        posed.extrinsic = np.full((4, 4), 2.0)

        assert posed.extrinsic[3, 3] == 2.0

    def test_extrinsic_wrong_shape(self, posed: PinholeCameraParameters):
        with pytest.raises(ValueError):
            posed.extrinsic = np.zeros(16)


class TestCopy:
    """Tests for copy independence."""

    @pytest.mark.parametrize(
        "copier",
        [copy.copy, copy.deepcopy, lambda p: p.copy(), PinholeCameraParameters],
    )
    def test_copy_is_deep(self, posed: PinholeCameraParameters, copier):
        clone = copier(posed)
        clone.intrinsic.width = 0
        clone.intrinsic.intrinsic_matrix[0, 0] = 1.0
        clone.extrinsic[0, 3] = 42.0

        assert posed.intrinsic.width == 640
        assert posed.intrinsic.is_valid()
        assert posed.intrinsic.get_focal_length() == (525.0, 525.0)
        assert posed.extrinsic[0, 3] == 1.0


class TestValueSemantics:
    """Tests for equality and repr."""

    def test_equality(self, posed: PinholeCameraParameters):
        other = posed.copy()
        assert other == posed
        other.extrinsic[0, 0] = 2.0
        assert other != posed

    def test_nan_extrinsic_equals_its_copy(self, posed: PinholeCameraParameters):
        posed.extrinsic[2, 3] = np.nan

        assert posed == posed.copy()
        assert posed == copy.deepcopy(posed)

    def test_repr(self):
        text = repr(PinholeCameraParameters())

        assert text.startswith("PinholeCameraParameters")
        assert "intrinsic and extrinsic" in text


class TestRigidTransform:
    """Tests for is_rigid_transform."""

    def test_identity(self):
        assert is_rigid_transform(np.eye(4))

    def test_rotation_and_translation(self):
        theta = 0.3
        m = np.eye(4)
        m[:3, :3] = [
            [np.cos(theta), -np.sin(theta), 0.0],
            [np.sin(theta), np.cos(theta), 0.0],
            [0.0, 0.0, 1.0],
        ]
        m[:3, 3] = [0.5, -1.0, 2.0]
        assert is_rigid_transform(m)

    def test_scaled_is_not_rigid(self):
        assert not is_rigid_transform(np.diag([2.0, 2.0, 2.0, 1.0]))

    def test_reflection_is_not_rigid(self):
        assert not is_rigid_transform(np.diag([-1.0, 1.0, 1.0, 1.0]))

    def test_wrong_shape(self):
        assert not is_rigid_transform(np.eye(3))
