"""Constant velocity steps over stacks of independent states."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .motion import StepResult, constant_velocity_step, constant_velocity_step_with_jacobians
from .types import CONTROL_SIZE, STATE_SIZE, InvalidArgument, as_timestep


def _as_stack(values: np.ndarray, width: int, name: str) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.ndim == 1 and arr.shape[0] == width:
        arr = arr[np.newaxis, :]
    if arr.ndim != 2 or arr.shape[1] != width:
        raise InvalidArgument(f"{name} must have shape (n, {width}), got {arr.shape}.")
    return arr


def constant_velocity_step_batch(
    states: np.ndarray,
    dt: float,
    controls: np.ndarray | None = None,
    jacobians: bool = False,
    method: str = "exact",
    chain_rule_control_jacobian: bool = False,
    max_workers: int | None = None,
) -> np.ndarray | StepResult:
    """Advance ``n`` states by one step each.

    Every row goes through the same single-state step as
    :func:`~slamkin.kinematics.motion.constant_velocity_step`, so row ``i`` of
    the result equals the single call on row ``i``.

    Parameters
    ----------
    states
        Array of shape ``(n, 13)``. A single 13-vector is treated as ``n = 1``.
    dt
        Time step shared by all rows.
    controls
        Array of shape ``(n, 6)``; zero for every row if omitted.
    jacobians
        If ``True`` also return stacked ``F_x`` and ``F_u``.
    method
        Orientation integration method.
    chain_rule_control_jacobian
        Passed through to
        :func:`~slamkin.kinematics.motion.constant_velocity_step_with_jacobians`.
    max_workers
        If given, rows are stepped on a thread pool of this size.

    Returns
    -------
    np.ndarray or StepResult
        ``(n, 13)`` states, or ``StepResult`` with arrays of shape
        ``(n, 13)``, ``(n, 13, 13)`` and ``(n, 13, 6)``.
    """
    x = _as_stack(states, STATE_SIZE, "states")
    n = x.shape[0]
    if controls is None:
        u = np.zeros((n, CONTROL_SIZE))
    else:
        u = _as_stack(controls, CONTROL_SIZE, "controls")
        if u.shape[0] != n:
            raise InvalidArgument(f"controls must have {n} rows, got {u.shape[0]}.")
    dt = as_timestep(dt)

    if jacobians:
        def one(i: int) -> StepResult:
            return constant_velocity_step_with_jacobians(
                x[i], dt, u[i], method=method, chain_rule_control_jacobian=chain_rule_control_jacobian
            )
    else:
        def one(i: int) -> np.ndarray:
            return constant_velocity_step(x[i], dt, u[i], method=method)

    if max_workers is None:
        results = [one(i) for i in range(n)]
    else:
        logging.debug("Stepping %d states on %d threads", n, max_workers)
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(one, range(n)))

    if not jacobians:
        return np.array(results).reshape(n, STATE_SIZE)
    return StepResult(
        np.array([r.state for r in results]).reshape(n, STATE_SIZE),
        np.array([r.jacobian_state for r in results]).reshape(n, STATE_SIZE, STATE_SIZE),
        np.array([r.jacobian_control for r in results]).reshape(n, STATE_SIZE, CONTROL_SIZE),
    )
