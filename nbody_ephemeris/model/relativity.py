"""
Point-Mass Gravity
==================

Newtonian and first-order post-Newtonian accelerations of an arbitrary
number of point masses, and the classical or relativistic barycenter.

The relativistic acceleration follows equation (1) of:
  Newhall, Standish, Williams - DE 102: a numerically integrated ephemeris
  of the Moon and planets spanning forty-four centuries, Astronomy and
  Astrophysics, 125, 150-167, 1983.
"""
import numpy as np

from dataclasses import dataclass

from nbody_ephemeris.model.constants import PHYSICALCONSTANTS
from nbody_ephemeris.model.errors    import SingularConfigurationError
from nbody_ephemeris.model.state     import SimulationState, Body, with_bodies


SPEED_OF_LIGHT    = PHYSICALCONSTANTS.speed_of_light
SPEED_OF_LIGHT_SQ = SPEED_OF_LIGHT * SPEED_OF_LIGHT


@dataclass(frozen=True, eq=False)
class PointMassAcceleration:
  """
  Newtonian and relativistic parts of the point-mass acceleration, (N, 3)
  arrays in body order [au/d²]. The parts are kept separate so that the small
  relativistic terms are not added to the much larger Newtonian terms before
  the final summation.
  """
  newtonian    : np.ndarray
  relativistic : np.ndarray


def _pairwise_geometry(
  pos_array : np.ndarray,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
  """
  Relative positions and inverse distances between all pairs of bodies.
  
  Input:
  ------
    pos_array : np.ndarray
      Positions (N, 3).
  
  Output:
  -------
    diff : np.ndarray
      diff[i, j] = r_j - r_i, shape (N, N, 3).
    inv_dist : np.ndarray
      1 / |r_j - r_i| with zero diagonal, shape (N, N).
    inv_dist3 : np.ndarray
      1 / |r_j - r_i|³ with zero diagonal, shape (N, N).
  
  Raises:
  -------
    SingularConfigurationError
      If two distinct bodies occupy the same position.
  """
  num_bodies = pos_array.shape[0]
  diff       = pos_array[np.newaxis, :, :] - pos_array[:, np.newaxis, :]
  dist       = np.linalg.norm(diff, axis=2)

  off_diagonal = ~np.eye(num_bodies, dtype=bool)
  if np.any(dist[off_diagonal] == 0.0):
    raise SingularConfigurationError("Two bodies are at zero separation.")

  inv_dist               = np.zeros_like(dist)
  inv_dist[off_diagonal] = 1.0 / dist[off_diagonal]
  inv_dist3              = inv_dist ** 3

  return diff, inv_dist, inv_dist3


def acc_point_mass(
  state        : SimulationState,
  relativistic : bool = True,
) -> PointMassAcceleration:
  """
  Compute the Newtonian and relativistic point-mass accelerations of all
  bodies.
  
  The Newtonian pass completes before the relativistic pass because the
  relativistic correction uses the Newtonian accelerations of the sources.
  
  Input:
  ------
    state : SimulationState
      Bodies with positions, velocities and gravitational parameters.
    relativistic : bool
      If False, the relativistic part is returned as zeros.
  
  Output:
  -------
    acc : PointMassAcceleration
      Newtonian and relativistic accelerations (N, 3) [au/d²].
  """
  mu_array  = state.mu_array()
  pos_array = state.pos_array()
  vel_array = state.vel_array()

  diff, inv_dist, inv_dist3 = _pairwise_geometry(pos_array)

  # Newtonian: sum over sources j of mu_j (r_j - r_i) / |r_j - r_i|³
  weight_newton = mu_array[np.newaxis, :] * inv_dist3
  acc_newton    = np.einsum('ij,ijk->ik', weight_newton, diff)

  acc_rel = np.zeros_like(acc_newton)
  if not relativistic:
    return PointMassAcceleration(newtonian=acc_newton, relativistic=acc_rel)

  c2 = SPEED_OF_LIGHT_SQ

  # Newtonian potentials sum_{k != i} mu_k / r_ik
  potential = inv_dist @ mu_array
  speed_sq  = np.sum(vel_array * vel_array, axis=1)
  vel_dot   = vel_array @ vel_array.T

  diff_dot_vel_src = np.einsum('ijk,jk->ij', diff, vel_array)
  diff_dot_vel_tgt = np.einsum('ijk,ik->ij', diff, vel_array)
  diff_dot_acc_src = np.einsum('ijk,jk->ij', diff, acc_newton)

  newton_mult = (
    - 4.0 * potential[:, np.newaxis]
    -       potential[np.newaxis, :]
    +       speed_sq[:, np.newaxis]
    + 2.0 * speed_sq[np.newaxis, :]
    - 4.0 * vel_dot
    - 1.5 * (diff_dot_vel_src * inv_dist) ** 2
    + 0.5 * diff_dot_acc_src
  ) / c2

  vel_diff = vel_array[np.newaxis, :, :] - vel_array[:, np.newaxis, :]

  weight_vel = mu_array[np.newaxis, :] * inv_dist3 / c2 * (4.0 * diff_dot_vel_tgt - 3.0 * diff_dot_vel_src)
  weight_acc = 3.5 / c2 * mu_array[np.newaxis, :] * inv_dist

  acc_rel += np.einsum('ij,ijk->ik', newton_mult * weight_newton, diff)
  acc_rel += np.einsum('ij,ijk->ik', weight_vel, vel_diff)
  acc_rel += weight_acc @ acc_newton

  return PointMassAcceleration(newtonian=acc_newton, relativistic=acc_rel)


def barycenter(
  state        : SimulationState,
  relativistic : bool = False,
) -> tuple[np.ndarray, np.ndarray]:
  """
  Compute the classical or relativistic barycenter of the bodies.
  
  With relativistic weighting every gravitational parameter is replaced by
    mu* = mu (1 - (|v|² - sum_{k != i} mu_k / r_ik) / (2 c²))
  
  Input:
  ------
    state : SimulationState
      Bodies with positions, velocities and gravitational parameters.
    relativistic : bool
      Use the relativistic weights mu* instead of mu.
  
  Output:
  -------
    pos_vec : np.ndarray
      Barycenter position [au].
    vel_vec : np.ndarray
      Barycenter velocity [au/d].
  """
  mu_array  = state.mu_array()
  pos_array = state.pos_array()
  vel_array = state.vel_array()

  if relativistic:
    _, inv_dist, _ = _pairwise_geometry(pos_array)
    speed_sq       = np.sum(vel_array * vel_array, axis=1)
    weights        = mu_array * (1.0 - (speed_sq - inv_dist @ mu_array) * 0.5 / SPEED_OF_LIGHT_SQ)
  else:
    weights = mu_array

  weight_sum = np.sum(weights)
  pos_vec    = weights @ pos_array / weight_sum
  vel_vec    = weights @ vel_array / weight_sum

  return pos_vec, vel_vec


def center_on_barycenter(
  state        : SimulationState,
  relativistic : bool = True,
) -> SimulationState:
  """
  Shift all bodies so that the barycenter is at rest at the origin.
  
  Input:
  ------
    state : SimulationState
      State to re-center.
    relativistic : bool
      Use the relativistic barycenter.
  
  Output:
  -------
    state : SimulationState
      New state with barycentric positions and velocities.
  """
  bary_pos_vec, bary_vel_vec = barycenter(state, relativistic)

  bodies = [
    Body(
      name    = body.name,
      mu      = body.mu,
      pos_vec = body.pos_vec - bary_pos_vec,
      vel_vec = body.vel_vec - bary_vel_vec,
    )
    for body in state.bodies
  ]
  return with_bodies(state, bodies)
