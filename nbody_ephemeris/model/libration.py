"""
Lunar Libration
===============

Euler's rigid-body equations for the Moon, written in terms of the 3-1-3
Euler angles (phi, theta, psi) of the lunar principal axes.

The principal moments A < B < C enter through
  beta  = (C - A) / B
  gamma = (B - A) / C
and their scale is fixed by C / (M R²).
"""
import numpy as np

from nbody_ephemeris.model.constants import SOLARSYSTEMCONSTANTS
from nbody_ephemeris.model.errors    import SingularConfigurationError
from nbody_ephemeris.model.state     import LibrationState, LibrationAcceleration


# |sin(theta)| below this is treated as theta = 0 or pi
SINGULAR_SIN_THETA = 1.0e-12


def moon_moments(
  beta     : float = SOLARSYSTEMCONSTANTS.MOON.BETA,
  gamma    : float = SOLARSYSTEMCONSTANTS.MOON.GAMMA,
  moment_c : float = SOLARSYSTEMCONSTANTS.MOON.MOMENT_C,
) -> tuple[float, float, float]:
  """
  Principal moments of inertia of the Moon normalized by M R².
  
  Input:
  ------
    beta : float
      (C - A) / B.
    gamma : float
      (B - A) / C.
    moment_c : float
      C / (M R²).
  
  Output:
  -------
    moments : tuple[float, float, float]
      (A, B, C) / (M R²).
  """
  moment_a = moment_c * (1.0 - beta * gamma) / (1.0 + beta)
  moment_b = moment_a + gamma * moment_c
  return moment_a, moment_b, moment_c


def libration_moon(
  libration  : LibrationState,
  torque_vec : np.ndarray,
  beta       : float = SOLARSYSTEMCONSTANTS.MOON.BETA,
  gamma      : float = SOLARSYSTEMCONSTANTS.MOON.GAMMA,
  moment_c   : float = SOLARSYSTEMCONSTANTS.MOON.MOMENT_C,
  radius     : float = SOLARSYSTEMCONSTANTS.MOON.RADIUS.EQUATOR,
) -> LibrationAcceleration:
  """
  Compute the second time derivatives of the lunar Euler angles.
  
  Input:
  ------
    libration : LibrationState
      Euler angles [rad] and their rates [rad/d].
    torque_vec : np.ndarray
      Torque per unit lunar mass in the lunar body frame [au²/d²].
    beta : float
      (C - A) / B.
    gamma : float
      (B - A) / C.
    moment_c : float
      C / (M R²).
    radius : float
      Reference radius of the Moon [au].
  
  Output:
  -------
    libration_acc : LibrationAcceleration
      phi'', theta'', psi'' [rad/d²].
  
  Raises:
  -------
    SingularConfigurationError
      If the inclination theta is 0 or pi (|sin theta| < SINGULAR_SIN_THETA).
  """
  phi_dot   = libration.phi_dot
  theta_dot = libration.theta_dot
  psi_dot   = libration.psi_dot

  sin_theta = np.sin(libration.theta)
  cos_theta = np.cos(libration.theta)
  sin_psi   = np.sin(libration.psi)
  cos_psi   = np.cos(libration.psi)

  if abs(sin_theta) < SINGULAR_SIN_THETA:
    raise SingularConfigurationError(
      f"Libration inclination theta = {libration.theta} rad makes the Euler angles singular."
    )

  # Angular velocity in the body frame
  omega_x = phi_dot * sin_theta * sin_psi + theta_dot * cos_psi
  omega_y = phi_dot * sin_theta * cos_psi - theta_dot * sin_psi
  omega_z = phi_dot * cos_theta + psi_dot

  alpha = (beta - gamma) / (1.0 - beta * gamma)

  moment_a, moment_b, moment_c = moon_moments(beta, gamma, moment_c)
  radius_sq = radius * radius

  # Euler's equations
  omega_x_dot = -alpha * omega_y * omega_z + torque_vec[0] / (moment_a * radius_sq)
  omega_y_dot =  beta  * omega_z * omega_x + torque_vec[1] / (moment_b * radius_sq)
  omega_z_dot = -gamma * omega_x * omega_y + torque_vec[2] / (moment_c * radius_sq)

  # Inverse kinematics
  phi_ddot = (
    omega_x_dot * sin_psi + omega_y_dot * cos_psi
    + psi_dot * theta_dot - phi_dot * theta_dot * cos_theta
  ) / sin_theta
  theta_ddot = omega_x_dot * cos_psi - omega_y_dot * sin_psi - psi_dot * phi_dot * sin_theta
  psi_ddot   = omega_z_dot - phi_ddot * cos_theta + phi_dot * theta_dot * sin_theta

  return LibrationAcceleration(
    phi_ddot   = float(phi_ddot),
    theta_ddot = float(theta_ddot),
    psi_ddot   = float(psi_ddot),
  )
