"""Constant velocity motion model for SLAM prediction steps."""

from .kinematics import (
    ConstantVelocityModel,
    InvalidArgument,
    MotionModelParams,
    MotionState,
    StepResult,
    VelocityControl,
    constant_velocity_step,
    constant_velocity_step_batch,
    constant_velocity_step_with_jacobians,
    predict_orientation,
    predict_position,
)

__all__ = [
    "ConstantVelocityModel",
    "InvalidArgument",
    "MotionModelParams",
    "MotionState",
    "StepResult",
    "VelocityControl",
    "constant_velocity_step",
    "constant_velocity_step_batch",
    "constant_velocity_step_with_jacobians",
    "predict_orientation",
    "predict_position",
]
