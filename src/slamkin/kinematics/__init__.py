"""Constant velocity kinematics: types, quaternion algebra and prediction."""

from .batch import constant_velocity_step_batch
from .model import ConstantVelocityModel
from .motion import StepResult, constant_velocity_step, constant_velocity_step_with_jacobians
from .predict import predict_orientation, predict_position
from .rotations import (
    left_product_matrix,
    normalize_quaternion,
    quaternion_angle_error,
    quaternion_conjugate,
    quaternion_product,
    quaternion_to_rotation_matrix,
    quaternion_to_rotation_vector,
    right_product_matrix,
    rotation_vector_to_quaternion,
)
from .types import (
    CONTROL_SIZE,
    STATE_SIZE,
    InvalidArgument,
    MotionModelParams,
    MotionState,
    VelocityControl,
)

__all__ = [
    "CONTROL_SIZE",
    "STATE_SIZE",
    "ConstantVelocityModel",
    "InvalidArgument",
    "MotionModelParams",
    "MotionState",
    "StepResult",
    "VelocityControl",
    "constant_velocity_step",
    "constant_velocity_step_batch",
    "constant_velocity_step_with_jacobians",
    "left_product_matrix",
    "normalize_quaternion",
    "predict_orientation",
    "predict_position",
    "quaternion_angle_error",
    "quaternion_conjugate",
    "quaternion_product",
    "quaternion_to_rotation_matrix",
    "quaternion_to_rotation_vector",
    "right_product_matrix",
    "rotation_vector_to_quaternion",
]
