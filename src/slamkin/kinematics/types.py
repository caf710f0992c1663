"""Core dataclasses and validation utilities for the constant velocity model."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar, Sequence

import numpy as np

STATE_SIZE = 13
CONTROL_SIZE = 6

# Block offsets inside the flat state vector [x(3), q(4), v(3), w(3)].
POSITION = slice(0, 3)
ORIENTATION = slice(3, 7)
LINEAR_VELOCITY = slice(7, 10)
ANGULAR_VELOCITY = slice(10, 13)

# Block offsets inside the flat control vector [uv(3), uw(3)].
LINEAR_VELOCITY_DELTA = slice(0, 3)
ANGULAR_VELOCITY_DELTA = slice(3, 6)

ORIENTATION_METHODS = ("exact", "euler")


class InvalidArgument(ValueError):
    """Raised when an input does not match the fixed state/control layouts."""


def as_vector(value: Sequence[float] | np.ndarray, size: int, name: str) -> np.ndarray:
    """Return a validated float vector of fixed length.

    Parameters
    ----------
    value
        Input values convertible to a flat vector.
    size
        Required number of elements.
    name
        Field name used in validation error messages.

    Returns
    -------
    np.ndarray
        A new float array with shape ``(size,)``.
    """
    try:
        arr = np.array(value, dtype=float).reshape(-1)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"{name} must be numeric, got {value!r}.") from exc
    if arr.shape != (size,):
        raise InvalidArgument(f"{name} must be length {size}, got shape {arr.shape}.")
    return arr


def as_timestep(dt: float) -> float:
    """Return ``dt`` as a finite float.

    Negative values are accepted and describe backward prediction.
    """
    if np.ndim(dt) != 0:
        raise InvalidArgument(f"dt must be a scalar, got shape {np.shape(dt)}.")
    try:
        value = float(dt)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"dt must be numeric, got {dt!r}.") from exc
    if not math.isfinite(value):
        raise InvalidArgument(f"dt must be finite, got {value}.")
    return value


def zero_control() -> np.ndarray:
    """Return the all-zero 6-element control vector."""
    return np.zeros(CONTROL_SIZE)


@dataclass
class MotionState:
    """Rigid-body state advanced by the constant velocity model.

    Attributes
    ----------
    position
        Position ``[x, y, z]``.
    orientation
        Scalar-first Hamilton quaternion ``[qw, qx, qy, qz]``. Unit norm is
        expected but not enforced.
    linear_velocity
        Linear velocity ``[vx, vy, vz]`` in the position frame.
    angular_velocity
        Angular velocity ``[wx, wy, wz]`` in the body frame, rad/s.
    """

    position: np.ndarray
    orientation: np.ndarray
    linear_velocity: np.ndarray
    angular_velocity: np.ndarray

    def __post_init__(self) -> None:
        self.position = as_vector(self.position, 3, "position")
        self.orientation = as_vector(self.orientation, 4, "orientation")
        self.linear_velocity = as_vector(self.linear_velocity, 3, "linear_velocity")
        self.angular_velocity = as_vector(self.angular_velocity, 3, "angular_velocity")

    @classmethod
    def from_vector(cls, values: Sequence[float] | np.ndarray) -> "MotionState":
        """Build state from the flat 13-element layout.

        Parameters
        ----------
        values
            Vector ordered as ``[position, orientation, linear_velocity, angular_velocity]``.

        Returns
        -------
        MotionState
            Typed state instance.
        """
        vec = as_vector(values, STATE_SIZE, "state")
        return cls(
            position=vec[POSITION],
            orientation=vec[ORIENTATION],
            linear_velocity=vec[LINEAR_VELOCITY],
            angular_velocity=vec[ANGULAR_VELOCITY],
        )

    @classmethod
    def at_rest(cls, position: Sequence[float] | np.ndarray | None = None) -> "MotionState":
        """Return a motionless state with identity orientation."""
        return cls(
            position=np.zeros(3) if position is None else position,
            orientation=np.array([1.0, 0.0, 0.0, 0.0]),
            linear_velocity=np.zeros(3),
            angular_velocity=np.zeros(3),
        )

    def as_vector(self) -> np.ndarray:
        """Return the flat 13-element layout.

        Returns
        -------
        np.ndarray
            Ordered as ``[position, orientation, linear_velocity, angular_velocity]``.
        """
        vec = np.empty(STATE_SIZE)
        vec[POSITION] = self.position
        vec[ORIENTATION] = self.orientation
        vec[LINEAR_VELOCITY] = self.linear_velocity
        vec[ANGULAR_VELOCITY] = self.angular_velocity
        return vec

    def copy(self) -> "MotionState":
        return MotionState.from_vector(self.as_vector())


@dataclass
class VelocityControl:
    """Additive velocity perturbation applied before a prediction step.

    Attributes
    ----------
    linear_velocity_delta
        Change added to the linear velocity.
    angular_velocity_delta
        Change added to the angular velocity.
    """

    linear_velocity_delta: np.ndarray
    angular_velocity_delta: np.ndarray

    def __post_init__(self) -> None:
        self.linear_velocity_delta = as_vector(self.linear_velocity_delta, 3, "linear_velocity_delta")
        self.angular_velocity_delta = as_vector(self.angular_velocity_delta, 3, "angular_velocity_delta")

    @classmethod
    def zeros(cls) -> "VelocityControl":
        return cls(np.zeros(3), np.zeros(3))

    @classmethod
    def from_vector(cls, values: Sequence[float] | np.ndarray) -> "VelocityControl":
        """Build control from the flat 6-element layout ``[uv, uw]``."""
        vec = as_vector(values, CONTROL_SIZE, "control")
        return cls(vec[LINEAR_VELOCITY_DELTA], vec[ANGULAR_VELOCITY_DELTA])

    def as_vector(self) -> np.ndarray:
        """Return the flat 6-element layout ``[uv, uw]``."""
        vec = np.empty(CONTROL_SIZE)
        vec[LINEAR_VELOCITY_DELTA] = self.linear_velocity_delta
        vec[ANGULAR_VELOCITY_DELTA] = self.angular_velocity_delta
        return vec


@dataclass
class MotionModelParams:
    """Configuration for the constant velocity model.

    Attributes
    ----------
    dt
        Default time step in seconds used by the stateful model.
    orientation_method
        Quaternion integration method, one of :data:`ORIENTATION_METHODS`.
    normalize_orientation
        If ``True`` the stateful model renormalises the quaternion after each
        step. The pure step functions never normalise.
    chain_rule_control_jacobian
        If ``True`` the orientation block of the control Jacobian is ``Q_w``
        rather than ``Q_w * dt``. See
        :func:`~slamkin.kinematics.motion.constant_velocity_step_with_jacobians`.
    """

    dt: float = 0.1
    orientation_method: str = "exact"
    normalize_orientation: bool = False
    chain_rule_control_jacobian: bool = False

    KEYS: ClassVar[tuple[str, ...]] = (
        "dt",
        "orientation_method",
        "normalize_orientation",
        "chain_rule_control_jacobian",
    )

    def __post_init__(self) -> None:
        self.dt = as_timestep(self.dt)
        self.orientation_method = str(self.orientation_method).strip().lower()
        if self.orientation_method not in ORIENTATION_METHODS:
            raise InvalidArgument(
                f"orientation_method must be one of {ORIENTATION_METHODS}, got '{self.orientation_method}'."
            )
        self.normalize_orientation = bool(self.normalize_orientation)
        self.chain_rule_control_jacobian = bool(self.chain_rule_control_jacobian)

    @classmethod
    def from_mapping(cls, values: dict[str, object] | None) -> "MotionModelParams":
        """Construct parameters from a partially specified mapping.

        Parameters
        ----------
        values
            Mapping of parameter names to overrides. Unknown keys are ignored.

        Returns
        -------
        MotionModelParams
            Validated parameter set.
        """
        if values is None:
            return cls()
        return cls(**{key: value for key, value in values.items() if key in cls.KEYS})
