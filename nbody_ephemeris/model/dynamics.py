"""
Dynamics
========

Acceleration coordinator and equations of motion of the ephemeris.

The right-hand side decodes the DOF vector into a fresh SimulationState on
every call, so it holds no state between evaluations:

  total = newtonian + relativistic + figure (oblateness, tides)

and the lunar libration second derivatives come from the figure model.
"""
import numpy as np

from dataclasses import dataclass
from typing      import Optional

from nbody_ephemeris.model.figure     import FigureModel, compute_figure_accelerations
from nbody_ephemeris.model.relativity import acc_point_mass
from nbody_ephemeris.model.state      import (
  SimulationState,
  LibrationAcceleration,
  NUM_LIBRATION_DOF,
  NUM_BODY_DOF,
  decode,
  num_dof,
)


@dataclass(frozen=True, eq=False)
class AccelerationResult:
  newtonian     : np.ndarray             # (N, 3) [au/d²]
  relativistic  : np.ndarray             # (N, 3) [au/d²]
  figure        : np.ndarray             # (N, 3) [au/d²]
  libration_acc : LibrationAcceleration  # [rad/d²]

  @property
  def total(self) -> np.ndarray:
    return self.newtonian + self.relativistic + self.figure


# =============================================================================
# Top-Level Coordinator
# =============================================================================

class Acceleration:
  """
  Acceleration coordinator - orchestrates all acceleration components
  
  Computes total acceleration as:
    total = point_mass (newtonian + relativistic) + figure
  
  where:
    figure = moon_figure + earth_oblateness + earth_tides
  """

  def __init__(
    self,
    enable_relativity : bool                  = True,
    enable_figure     : bool                  = True,
    figure_model      : Optional[FigureModel] = None,
  ):
    """
    Initialize acceleration coordinator
    
    Input:
    ------
      enable_relativity : bool
        Include the post-Newtonian point-mass correction.
      enable_figure : bool
        Include figure, oblateness and tide accelerations and the lunar
        libration dynamics.
      figure_model : FigureModel | None
        Figure parameters. Defaults to the DE118 values.
    
    Output:
    -------
      None
    """
    self.enable_relativity = enable_relativity
    self.enable_figure     = enable_figure
    self.figure_model      = figure_model if figure_model is not None else FigureModel()

  def compute(
    self,
    state : SimulationState,
  ) -> AccelerationResult:
    """
    Compute all acceleration components for a state
    
    Input:
    ------
      state : SimulationState
        Current state.
    
    Output:
    -------
      result : AccelerationResult
        Newtonian, relativistic and figure accelerations and the libration
        second derivatives.
    """
    point_mass = acc_point_mass(state, relativistic=self.enable_relativity)

    if self.enable_figure:
      figure_acc    = compute_figure_accelerations(state, self.figure_model)
      acc_figure    = figure_acc.acc
      libration_acc = figure_acc.libration_acc
    else:
      acc_figure    = np.zeros_like(point_mass.newtonian)
      libration_acc = LibrationAcceleration()

    return AccelerationResult(
      newtonian     = point_mass.newtonian,
      relativistic  = point_mass.relativistic,
      figure        = acc_figure,
      libration_acc = libration_acc,
    )


# =============================================================================
# Equations of Motion
# =============================================================================

class EphemerisEquationsOfMotion:
  """
  Equations of motion dy/dt = f(t, y) on the DOF vector
  """

  def __init__(
    self,
    acceleration : Acceleration,
    template     : SimulationState,
  ):
    """
    Initialize equations of motion
    
    Input:
    ------
      acceleration : Acceleration
        Acceleration coordinator instance
      template : SimulationState
        State providing body names, gravitational parameters and the epoch.
    
    Output:
    -------
      None
    """
    self.acceleration = acceleration
    self.template     = template

  def state_time_derivative(
    self,
    time : float,
    dof  : np.ndarray,
  ) -> np.ndarray:
    """
    Compute the DOF time derivative for the integrator
    
    Input:
    ------
      time : float
        Time after epoch [d]
      dof : np.ndarray
        DOF vector [libration, pos/vel per body]
    
    Output:
    -------
      dof_dot : np.ndarray
        [phi', phi'', theta', theta'', psi', psi''] followed by
        [vel, acc] per body
    """
    state  = decode(dof, time, self.template)
    result = self.acceleration.compute(state)

    libration     = state.libration
    libration_acc = result.libration_acc
    acc_total     = result.total

    dof_dot = np.empty(num_dof(state.num_bodies))
    dof_dot[0:NUM_LIBRATION_DOF] = [
      libration.phi_dot,
      libration_acc.phi_ddot,
      libration.theta_dot,
      libration_acc.theta_ddot,
      libration.psi_dot,
      libration_acc.psi_ddot,
    ]

    for index, body in enumerate(state.bodies):
      idx_dof = NUM_LIBRATION_DOF + index * NUM_BODY_DOF
      dof_dot[idx_dof     : idx_dof + 3] = body.vel_vec
      dof_dot[idx_dof + 3 : idx_dof + 6] = acc_total[index]

    return dof_dot

  def __call__(
    self,
    time : float,
    dof  : np.ndarray,
  ) -> np.ndarray:
    return self.state_time_derivative(time, dof)
