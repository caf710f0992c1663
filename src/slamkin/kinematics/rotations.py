"""Quaternion algebra and rotation-vector mappings.

Quaternions are scalar-first Hamilton quaternions ``[qw, qx, qy, qz]``.
"""

from __future__ import annotations

import numpy as np
from scipy.spatial.transform import Rotation

from .types import InvalidArgument

# Below this rotation angle the exponential map switches to its Taylor series.
SMALL_ANGLE = 1e-4


def quaternion_product(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Hamilton product ``q1 ⊗ q2``."""
    a1, b1, c1, d1 = q1
    a2, b2, c2, d2 = q2
    return np.array(
        [
            a1 * a2 - b1 * b2 - c1 * c2 - d1 * d2,
            a1 * b2 + b1 * a2 + c1 * d2 - d1 * c2,
            a1 * c2 - b1 * d2 + c1 * a2 + d1 * b2,
            a1 * d2 + b1 * c2 - c1 * b2 + d1 * a2,
        ]
    )


def left_product_matrix(q: np.ndarray) -> np.ndarray:
    """Return ``Q_L`` with ``q ⊗ p == Q_L(q) @ p``."""
    a, b, c, d = q
    return np.array(
        [
            [a, -b, -c, -d],
            [b, a, -d, c],
            [c, d, a, -b],
            [d, -c, b, a],
        ]
    )


def right_product_matrix(p: np.ndarray) -> np.ndarray:
    """Return ``Q_R`` with ``q ⊗ p == Q_R(p) @ q``."""
    a, b, c, d = p
    return np.array(
        [
            [a, -b, -c, -d],
            [b, a, d, -c],
            [c, -d, a, b],
            [d, c, -b, a],
        ]
    )


def quaternion_conjugate(q: np.ndarray) -> np.ndarray:
    return np.array([q[0], -q[1], -q[2], -q[3]])


def normalize_quaternion(q: np.ndarray) -> np.ndarray:
    """Return a unit-norm copy of ``q``.

    A zero quaternion maps to the identity.
    """
    norm = np.linalg.norm(q)
    if norm < 1e-12:
        return np.array([1.0, 0.0, 0.0, 0.0])
    return np.asarray(q, dtype=float) / norm


def _half_angle_terms(angle: float) -> tuple[float, float, float]:
    """Return ``(cos(a/2), sin(a/2)/a, d(sin(a/2)/a)/da / a)``."""
    half_cos = np.cos(0.5 * angle)
    if angle < SMALL_ANGLE:
        a2 = angle * angle
        sinc_half = 0.5 - a2 / 48.0
        dsinc = -1.0 / 24.0 + a2 / 960.0
    else:
        sinc_half = np.sin(0.5 * angle) / angle
        dsinc = (0.5 * half_cos - sinc_half) / (angle * angle)
    return half_cos, sinc_half, dsinc


def rotation_vector_to_quaternion(
    rotation_vector: np.ndarray,
    jacobian: bool = False,
) -> np.ndarray | tuple[np.ndarray, np.ndarray]:
    """Map a rotation vector to a unit quaternion (exponential map).

    Parameters
    ----------
    rotation_vector
        Rotation vector ``theta``; its norm is the rotation angle in radians.
    jacobian
        If ``True`` also return ``dq/dtheta``.

    Returns
    -------
    np.ndarray or tuple[np.ndarray, np.ndarray]
        Quaternion with shape ``(4,)``, plus the ``(4, 3)`` Jacobian when
        requested.
    """
    theta = np.asarray(rotation_vector, dtype=float)
    angle = float(np.linalg.norm(theta))
    half_cos, sinc_half, dsinc = _half_angle_terms(angle)
    q = np.empty(4)
    q[0] = half_cos
    q[1:] = sinc_half * theta
    if not jacobian:
        return q

    jac = np.empty((4, 3))
    jac[0, :] = -0.5 * sinc_half * theta
    jac[1:, :] = sinc_half * np.eye(3) + dsinc * np.outer(theta, theta)
    return q, jac


def quaternion_to_rotation_vector(q: np.ndarray) -> np.ndarray:
    """Inverse of :func:`rotation_vector_to_quaternion` for unit quaternions."""
    q = normalize_quaternion(q)
    if q[0] < 0.0:
        q = -q
    vec_norm = np.linalg.norm(q[1:])
    if vec_norm < 1e-12:
        return 2.0 * q[1:]
    angle = 2.0 * np.arctan2(vec_norm, q[0])
    return angle * q[1:] / vec_norm


def to_scipy_rotation(q: np.ndarray) -> Rotation:
    """Return a scipy :class:`Rotation` for a scalar-first quaternion."""
    q = np.asarray(q, dtype=float)
    # scipy stores quaternions scalar-last.
    return Rotation.from_quat(np.roll(q, -1, axis=-1))


def quaternion_to_rotation_matrix(q: np.ndarray) -> np.ndarray:
    """Return the body-to-world rotation matrix of ``q``.

    Parameters
    ----------
    q
        Quaternion ``[qw, qx, qy, qz]``. Normalised before conversion.

    Returns
    -------
    np.ndarray
        Rotation matrix with shape ``(3, 3)``.
    """
    return to_scipy_rotation(q).as_matrix()


def quaternion_angle_error(reference: np.ndarray, measured: np.ndarray) -> np.ndarray:
    """Return the rotation angle (rad) between paired quaternions.

    Used to compare integration methods, e.g. ``"exact"`` against
    ``"euler"`` orientations of the same step.

    Parameters
    ----------
    reference, measured
        Quaternions ``[qw, qx, qy, qz]`` of shape ``(4,)`` or ``(n, 4)``.
        Both are normalised before comparison.

    Returns
    -------
    np.ndarray
        Angles in ``[0, pi]`` with shape ``(n,)``.
    """
    ref = np.asarray(reference, dtype=float).reshape(-1, 4)
    meas = np.asarray(measured, dtype=float).reshape(-1, 4)
    if ref.shape != meas.shape:
        raise InvalidArgument(f"quaternion series must match, got {ref.shape} and {meas.shape}.")
    relative = to_scipy_rotation(ref).inv() * to_scipy_rotation(meas)
    return np.asarray(relative.magnitude(), dtype=float).reshape(-1)
