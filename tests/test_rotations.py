"""Tests for quaternion algebra and the exponential map."""

from __future__ import annotations

import unittest

import numpy as np
from scipy.spatial.transform import Rotation

from slamkin.kinematics.predict import predict_orientation
from slamkin.kinematics.rotations import (
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
from slamkin.kinematics.types import InvalidArgument


def _numeric_jacobian(fn, x: np.ndarray, eps: float = 1e-6) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    cols = []
    for i in range(x.size):
        dx = np.zeros_like(x)
        dx[i] = eps
        cols.append((fn(x + dx) - fn(x - dx)) / (2.0 * eps))
    return np.column_stack(cols)


class TestQuaternionAlgebra(unittest.TestCase):
    def setUp(self) -> None:
        rng = np.random.default_rng(3)
        self.q1 = normalize_quaternion(rng.normal(size=4))
        self.q2 = normalize_quaternion(rng.normal(size=4))

    def test_product_matrices_agree_with_product(self) -> None:
        expected = quaternion_product(self.q1, self.q2)
        np.testing.assert_allclose(left_product_matrix(self.q1) @ self.q2, expected, atol=1e-12)
        np.testing.assert_allclose(right_product_matrix(self.q2) @ self.q1, expected, atol=1e-12)

    def test_product_matches_rotation_composition(self) -> None:
        composed = quaternion_to_rotation_matrix(quaternion_product(self.q1, self.q2))
        expected = quaternion_to_rotation_matrix(self.q1) @ quaternion_to_rotation_matrix(self.q2)
        np.testing.assert_allclose(composed, expected, atol=1e-12)

    def test_conjugate_is_inverse_for_unit_quaternion(self) -> None:
        identity = quaternion_product(self.q1, quaternion_conjugate(self.q1))
        np.testing.assert_allclose(identity, [1.0, 0.0, 0.0, 0.0], atol=1e-12)

    def test_normalize_zero_quaternion_returns_identity(self) -> None:
        np.testing.assert_allclose(normalize_quaternion(np.zeros(4)), [1.0, 0.0, 0.0, 0.0])


class TestExponentialMap(unittest.TestCase):
    def test_zero_rotation_vector_is_identity(self) -> None:
        np.testing.assert_array_equal(rotation_vector_to_quaternion(np.zeros(3)), [1.0, 0.0, 0.0, 0.0])

    def test_matches_scipy_rotvec(self) -> None:
        theta = np.array([0.3, -1.2, 0.7])
        q = rotation_vector_to_quaternion(theta)
        expected = Rotation.from_rotvec(theta).as_matrix()
        np.testing.assert_allclose(quaternion_to_rotation_matrix(q), expected, atol=1e-12)
        self.assertAlmostEqual(float(np.linalg.norm(q)), 1.0, places=12)

    def test_rotation_vector_roundtrip_single_value(self) -> None:
        theta = np.array([0.0, 0.0, 2.5])
        np.testing.assert_allclose(quaternion_to_rotation_vector(rotation_vector_to_quaternion(theta)), theta, atol=1e-12)

    def test_jacobian_matches_finite_difference(self) -> None:
        for theta in (np.array([0.4, -0.2, 0.9]), np.array([1e-3, 2e-3, -1e-3]), np.array([2.0, 1.0, -1.5])):
            _, jac = rotation_vector_to_quaternion(theta, jacobian=True)
            numeric = _numeric_jacobian(rotation_vector_to_quaternion, theta)
            np.testing.assert_allclose(jac, numeric, atol=1e-7)

    def test_small_angle_branch_is_continuous(self) -> None:
        axis = np.array([1.0, 2.0, -2.0]) / 3.0
        below, jac_below = rotation_vector_to_quaternion(axis * 0.99e-4, jacobian=True)
        above, jac_above = rotation_vector_to_quaternion(axis * 1.01e-4, jacobian=True)
        np.testing.assert_allclose(below, above, atol=1e-6)
        np.testing.assert_allclose(jac_below, jac_above, atol=1e-6)

    def test_zero_rotation_jacobian(self) -> None:
        _, jac = rotation_vector_to_quaternion(np.zeros(3), jacobian=True)
        expected = np.zeros((4, 3))
        expected[1:, :] = 0.5 * np.eye(3)
        np.testing.assert_allclose(jac, expected)


class TestQuaternionAngleError(unittest.TestCase):
    def test_identity_against_rotation_about_z(self) -> None:
        identity = np.array([1.0, 0.0, 0.0, 0.0])
        turned = rotation_vector_to_quaternion(np.array([0.0, 0.0, 0.3]))
        angles = quaternion_angle_error(np.stack([identity, identity]), np.stack([identity, turned]))
        np.testing.assert_allclose(angles, [0.0, 0.3], atol=1e-12)

    def test_euler_drift_is_small_but_nonzero(self) -> None:
        q = np.array([1.0, 0.0, 0.0, 0.0])
        w = np.array([0.0, 0.1, 0.5])
        exact = predict_orientation(q, w, 1.0, method="exact")
        euler = predict_orientation(q, w, 1.0, method="euler")
        angle = float(quaternion_angle_error(exact, euler)[0])
        self.assertGreater(angle, 0.0)
        self.assertLess(angle, 0.05)

    def test_mismatched_series(self) -> None:
        with self.assertRaises(InvalidArgument):
            quaternion_angle_error(np.zeros((2, 4)) + [1, 0, 0, 0], np.array([1.0, 0.0, 0.0, 0.0]))


if __name__ == "__main__":
    unittest.main()
