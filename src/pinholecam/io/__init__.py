"""File I/O and serialization of camera records."""

from .serialization import (
    intrinsic_from_dict,
    intrinsic_to_dict,
    parameters_from_dict,
    parameters_to_dict,
    read_camera_record,
    read_pinhole_camera_intrinsic,
    read_pinhole_camera_parameters,
    write_pinhole_camera_intrinsic,
    write_pinhole_camera_parameters,
)

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
