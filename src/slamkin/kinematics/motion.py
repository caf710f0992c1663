"""Pure constant velocity motion model.

One step advances the state ``X = [x; q; v; w]`` by::

    v = v + uv
    w = w + uw
    x = x + v * dt
    q = q ⊗ exp(w * dt)

with ``U = [uv; uw]`` an additive velocity perturbation or control.
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

from .predict import predict_orientation, predict_position
from .types import (
    ANGULAR_VELOCITY,
    ANGULAR_VELOCITY_DELTA,
    CONTROL_SIZE,
    LINEAR_VELOCITY,
    LINEAR_VELOCITY_DELTA,
    ORIENTATION,
    POSITION,
    STATE_SIZE,
    as_timestep,
    as_vector,
    zero_control,
)

_I3 = np.eye(3)


class StepResult(NamedTuple):
    """New state with the Jacobians wrt the previous state and the control."""

    state: np.ndarray
    jacobian_state: np.ndarray
    jacobian_control: np.ndarray


def _split(state: np.ndarray, control: np.ndarray | None, dt: float) -> tuple[np.ndarray, np.ndarray, float]:
    x = as_vector(state, STATE_SIZE, "state")
    u = zero_control() if control is None else as_vector(control, CONTROL_SIZE, "control")
    return x, u, as_timestep(dt)


def constant_velocity_step(
    state: np.ndarray,
    dt: float,
    control: np.ndarray | None = None,
    method: str = "exact",
) -> np.ndarray:
    """Advance a 13-element state by one constant velocity step.

    Parameters
    ----------
    state
        ``[position(3), orientation(4), linear_velocity(3), angular_velocity(3)]``.
    dt
        Time increment in seconds.
    control
        ``[linear_velocity_delta(3), angular_velocity_delta(3)]``. Zero if omitted.
    method
        Orientation integration method passed to :func:`predict_orientation`.

    Returns
    -------
    np.ndarray
        New state with the same layout as ``state``.

    Raises
    ------
    InvalidArgument
        If ``state`` or ``control`` have the wrong length or ``dt`` is not a
        finite scalar.
    """
    x, u, dt = _split(state, control, dt)
    out = np.empty(STATE_SIZE)
    out[LINEAR_VELOCITY] = x[LINEAR_VELOCITY] + u[LINEAR_VELOCITY_DELTA]
    out[ANGULAR_VELOCITY] = x[ANGULAR_VELOCITY] + u[ANGULAR_VELOCITY_DELTA]
    out[POSITION] = predict_position(x[POSITION], out[LINEAR_VELOCITY], dt)
    out[ORIENTATION] = predict_orientation(x[ORIENTATION], out[ANGULAR_VELOCITY], dt, method=method)
    return out


def constant_velocity_step_with_jacobians(
    state: np.ndarray,
    dt: float,
    control: np.ndarray | None = None,
    method: str = "exact",
    chain_rule_control_jacobian: bool = False,
) -> StepResult:
    """Advance a 13-element state and return the step Jacobians.

    The returned state is identical to :func:`constant_velocity_step` for the
    same inputs.

    Parameters
    ----------
    state
        ``[position(3), orientation(4), linear_velocity(3), angular_velocity(3)]``.
    dt
        Time increment in seconds.
    control
        ``[linear_velocity_delta(3), angular_velocity_delta(3)]``. Zero if omitted.
    method
        Orientation integration method passed to :func:`predict_orientation`.
    chain_rule_control_jacobian
        Use ``Q_w`` instead of ``Q_w * dt`` as the orientation block of ``F_u``.
        ``Q_w`` already carries one factor of ``dt``, so this variant agrees
        with finite differences of the step wrt the control.

    Returns
    -------
    StepResult
        ``(new_state, F_x, F_u)`` with ``F_x`` of shape ``(13, 13)`` and
        ``F_u`` of shape ``(13, 6)``.
    """
    x, u, dt = _split(state, control, dt)
    out = np.empty(STATE_SIZE)
    out[LINEAR_VELOCITY] = x[LINEAR_VELOCITY] + u[LINEAR_VELOCITY_DELTA]
    out[ANGULAR_VELOCITY] = x[ANGULAR_VELOCITY] + u[ANGULAR_VELOCITY_DELTA]
    out[POSITION], pos_jac_x, pos_jac_v = predict_position(x[POSITION], out[LINEAR_VELOCITY], dt, jacobians=True)
    out[ORIENTATION], ori_jac_q, ori_jac_w = predict_orientation(
        x[ORIENTATION], out[ANGULAR_VELOCITY], dt, method=method, jacobians=True
    )

    jac_x = np.zeros((STATE_SIZE, STATE_SIZE))
    jac_x[POSITION, POSITION] = pos_jac_x
    jac_x[POSITION, LINEAR_VELOCITY] = pos_jac_v
    jac_x[ORIENTATION, ORIENTATION] = ori_jac_q
    jac_x[ORIENTATION, ANGULAR_VELOCITY] = ori_jac_w
    jac_x[LINEAR_VELOCITY, LINEAR_VELOCITY] = _I3
    jac_x[ANGULAR_VELOCITY, ANGULAR_VELOCITY] = _I3

    # Control blocks are the velocity blocks scaled by dt.
    jac_u = np.zeros((STATE_SIZE, CONTROL_SIZE))
    jac_u[POSITION, LINEAR_VELOCITY_DELTA] = _I3 * dt
    jac_u[ORIENTATION, ANGULAR_VELOCITY_DELTA] = ori_jac_w if chain_rule_control_jacobian else ori_jac_w * dt
    jac_u[LINEAR_VELOCITY, LINEAR_VELOCITY_DELTA] = _I3
    jac_u[ANGULAR_VELOCITY, ANGULAR_VELOCITY_DELTA] = _I3

    return StepResult(out, jac_x, jac_u)
