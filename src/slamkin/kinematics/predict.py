"""Position and orientation prediction primitives with analytic Jacobians."""

from __future__ import annotations

import numpy as np

from .rotations import left_product_matrix, quaternion_product, right_product_matrix, rotation_vector_to_quaternion
from .types import ORIENTATION_METHODS, InvalidArgument, as_timestep, as_vector

_I3 = np.eye(3)


def predict_position(
    position: np.ndarray,
    velocity: np.ndarray,
    dt: float,
    jacobians: bool = False,
) -> np.ndarray | tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Advance a position with constant velocity, ``x' = x + v dt``.

    Parameters
    ----------
    position
        Current position, shape ``(3,)``.
    velocity
        Linear velocity held over the step, shape ``(3,)``.
    dt
        Time increment in seconds.
    jacobians
        If ``True`` also return ``dx'/dx`` and ``dx'/dv``.

    Returns
    -------
    np.ndarray or tuple[np.ndarray, np.ndarray, np.ndarray]
        ``x'`` or ``(x', X_x, X_v)`` with both Jacobians of shape ``(3, 3)``.
    """
    x = as_vector(position, 3, "position")
    v = as_vector(velocity, 3, "velocity")
    dt = as_timestep(dt)
    x_new = x + v * dt
    if not jacobians:
        return x_new
    return x_new, _I3.copy(), _I3 * dt


def _orientation_increment(rotation_vector: np.ndarray, method: str) -> tuple[np.ndarray, np.ndarray]:
    """Return the increment quaternion for ``w dt`` and its Jacobian wrt ``w dt``."""
    if method == "exact":
        return rotation_vector_to_quaternion(rotation_vector, jacobian=True)
    # First order: q ⊗ [1, w dt / 2], i.e. q + 0.5 dt Omega(w) q.
    increment = np.empty(4)
    increment[0] = 1.0
    increment[1:] = 0.5 * rotation_vector
    jac = np.zeros((4, 3))
    jac[1:, :] = 0.5 * _I3
    return increment, jac


def predict_orientation(
    orientation: np.ndarray,
    angular_velocity: np.ndarray,
    dt: float,
    method: str = "exact",
    jacobians: bool = False,
) -> np.ndarray | tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Rotate a quaternion by a constant body angular velocity over ``dt``.

    Computes ``q' = q ⊗ dq(w dt)`` where ``dq`` is the exponential map
    (``method="exact"``) or its first-order truncation (``method="euler"``).
    The returned quaternion is the same with or without Jacobians.

    Parameters
    ----------
    orientation
        Quaternion ``[qw, qx, qy, qz]``. Its norm is not checked.
    angular_velocity
        Body angular velocity in rad/s.
    dt
        Time increment in seconds.
    method
        One of ``"exact"`` or ``"euler"``.
    jacobians
        If ``True`` also return ``dq'/dq`` and ``dq'/dw``.

    Returns
    -------
    np.ndarray or tuple[np.ndarray, np.ndarray, np.ndarray]
        ``q'`` or ``(q', Q_q, Q_w)`` with Jacobians of shape ``(4, 4)`` and ``(4, 3)``.
    """
    q = as_vector(orientation, 4, "orientation")
    w = as_vector(angular_velocity, 3, "angular_velocity")
    dt = as_timestep(dt)
    key = str(method).strip().lower()
    if key not in ORIENTATION_METHODS:
        raise InvalidArgument(f"method must be one of {ORIENTATION_METHODS}, got '{method}'.")

    increment, increment_jac = _orientation_increment(w * dt, key)
    q_new = quaternion_product(q, increment)
    if not jacobians:
        return q_new
    q_jac_q = right_product_matrix(increment)
    q_jac_w = left_product_matrix(q) @ increment_jac * dt
    return q_new, q_jac_q, q_jac_w
