"""Stateful constant velocity model.

This module provides a typed orchestration layer around the pure functions in
``motion.py``: it keeps the current state and clock, applies the configured
integration options, and retains the Jacobians of the last step.
"""

from __future__ import annotations

import numpy as np

from .batch import constant_velocity_step_batch
from .motion import StepResult, constant_velocity_step, constant_velocity_step_with_jacobians
from .rotations import normalize_quaternion
from .types import MotionModelParams, MotionState, VelocityControl, as_timestep


def _control_vector(control: VelocityControl | np.ndarray | None) -> np.ndarray | None:
    if control is None:
        return None
    if isinstance(control, VelocityControl):
        return control.as_vector()
    return VelocityControl.from_vector(control).as_vector()


def _state_vector(state: MotionState | np.ndarray) -> np.ndarray:
    if isinstance(state, MotionState):
        return state.as_vector()
    return MotionState.from_vector(state).as_vector()


class ConstantVelocityModel:
    """Constant velocity model with an internal state and clock.

    Parameters
    ----------
    params
        Either a :class:`MotionModelParams` instance or a partial mapping of
        parameter overrides.
    initial_state
        Initial state as :class:`MotionState` or flat 13-element vector. If
        omitted, the body is at rest at the origin.
    """

    def __init__(
        self,
        params: dict | MotionModelParams | None = None,
        initial_state: MotionState | np.ndarray | None = None,
    ) -> None:
        self.params = params if isinstance(params, MotionModelParams) else MotionModelParams.from_mapping(params)
        self.state = MotionState.at_rest() if initial_state is None else MotionState.from_vector(_state_vector(initial_state))
        self.time_s = 0.0
        self.last_jacobian_state: np.ndarray | None = None
        self.last_jacobian_control: np.ndarray | None = None

    def predict(
        self,
        state: MotionState | np.ndarray,
        control: VelocityControl | np.ndarray | None = None,
        dt: float | None = None,
        jacobians: bool = False,
    ) -> np.ndarray | StepResult:
        """Predict one step from ``state`` without touching the model state.

        Parameters
        ----------
        state
            State to propagate.
        control
            Velocity perturbation. Zero if omitted.
        dt
            Time step; defaults to ``params.dt``.
        jacobians
            Select the Jacobian-producing mode.

        Returns
        -------
        np.ndarray or StepResult
            New flat state, or ``(new_state, F_x, F_u)`` when ``jacobians`` is set.
        """
        step_dt = self.params.dt if dt is None else as_timestep(dt)
        x = _state_vector(state)
        u = _control_vector(control)
        if jacobians:
            return constant_velocity_step_with_jacobians(
                x,
                step_dt,
                u,
                method=self.params.orientation_method,
                chain_rule_control_jacobian=self.params.chain_rule_control_jacobian,
            )
        return constant_velocity_step(x, step_dt, u, method=self.params.orientation_method)

    def predict_batch(
        self,
        states: np.ndarray,
        controls: np.ndarray | None = None,
        dt: float | None = None,
        jacobians: bool = False,
        max_workers: int | None = None,
    ) -> np.ndarray | StepResult:
        """Predict one step for each row of ``states`` with this model's options.

        See :func:`~slamkin.kinematics.batch.constant_velocity_step_batch`.
        """
        return constant_velocity_step_batch(
            states,
            self.params.dt if dt is None else dt,
            controls,
            jacobians=jacobians,
            method=self.params.orientation_method,
            chain_rule_control_jacobian=self.params.chain_rule_control_jacobian,
            max_workers=max_workers,
        )

    def step(
        self,
        control: VelocityControl | np.ndarray | None = None,
        dt: float | None = None,
        jacobians: bool = False,
    ) -> MotionState:
        """Advance the internal state by one step.

        Parameters
        ----------
        control
            Velocity perturbation. Zero if omitted.
        dt
            Time step; defaults to ``params.dt``.
        jacobians
            If ``True`` keep ``F_x``/``F_u`` in :attr:`last_jacobian_state`
            and :attr:`last_jacobian_control`.

        Returns
        -------
        MotionState
            The new state (also stored on the model).
        """
        step_dt = self.params.dt if dt is None else as_timestep(dt)
        result = self.predict(self.state, control, dt=step_dt, jacobians=jacobians)
        if jacobians:
            new_vec, self.last_jacobian_state, self.last_jacobian_control = result
        else:
            new_vec = result
            self.last_jacobian_state = None
            self.last_jacobian_control = None

        new_state = MotionState.from_vector(new_vec)
        if self.params.normalize_orientation:
            new_state.orientation = normalize_quaternion(new_state.orientation)
        self.state = new_state
        self.time_s += step_dt
        return new_state

    def set_state(self, state: MotionState | np.ndarray) -> None:
        """Replace the current state."""
        self.state = MotionState.from_vector(_state_vector(state))

    def reset(self, state: MotionState | np.ndarray | None = None) -> None:
        """Reset clock, Jacobians and (optionally) state."""
        if state is not None:
            self.set_state(state)
        self.time_s = 0.0
        self.last_jacobian_state = None
        self.last_jacobian_control = None
