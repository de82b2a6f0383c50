"""
Simulation State
================

Typed representation of the integrated system and the codec between it and
the flat degrees-of-freedom (DOF) vector used by the integrator.

DOF layout:
  [phi, phi_dot, theta, theta_dot, psi, psi_dot,
   x_0, y_0, z_0, vx_0, vy_0, vz_0,
   x_1, ...                                    ]
"""
import numpy as np

from dataclasses import dataclass, replace

from nbody_ephemeris.model.constants import INITIALSTATE, SOLARSYSTEMCONSTANTS, DE118
from nbody_ephemeris.model.errors    import MalformedInputError


NUM_LIBRATION_DOF = 6
NUM_BODY_DOF      = 6


@dataclass(frozen=True, eq=False)
class Body:
  name    : str
  mu      : float       # gravitational parameter [au³/d²]
  pos_vec : np.ndarray  # position [au]
  vel_vec : np.ndarray  # velocity [au/d]


@dataclass(frozen=True)
class LibrationState:
  phi       : float  # node angle [rad]
  phi_dot   : float  # [rad/d]
  theta     : float  # inclination of the lunar equator [rad]
  theta_dot : float  # [rad/d]
  psi       : float  # prime meridian angle [rad]
  psi_dot   : float  # [rad/d]


@dataclass(frozen=True)
class LibrationAcceleration:
  phi_ddot   : float = 0.0  # [rad/d²]
  theta_ddot : float = 0.0  # [rad/d²]
  psi_ddot   : float = 0.0  # [rad/d²]


@dataclass(frozen=True, eq=False)
class SimulationState:
  bodies    : tuple
  libration : LibrationState
  jd_epoch  : float        # Julian date of the epoch [d]
  time      : float = 0.0  # time after epoch [d]

  @property
  def jd(self) -> float:
    return self.jd_epoch + self.time

  @property
  def num_bodies(self) -> int:
    return len(self.bodies)

  @property
  def body_index(self) -> dict:
    return {body.name: index for index, body in enumerate(self.bodies)}

  @property
  def body_names(self) -> list:
    return [body.name for body in self.bodies]

  def body(
    self,
    name : str,
  ) -> Body:
    """
    Look up a body by name.
    
    Raises:
    -------
      MalformedInputError
        If no body with the name is part of the state.
    """
    index = self.body_index.get(name)
    if index is None:
      raise MalformedInputError(f"Body '{name}' is not part of the state. Bodies: {self.body_names}")
    return self.bodies[index]

  def mu_array(self) -> np.ndarray:
    return np.array([body.mu for body in self.bodies])

  def pos_array(self) -> np.ndarray:
    return np.array([body.pos_vec for body in self.bodies])

  def vel_array(self) -> np.ndarray:
    return np.array([body.vel_vec for body in self.bodies])


def num_dof(
  num_bodies : int,
) -> int:
  return NUM_LIBRATION_DOF + NUM_BODY_DOF * num_bodies


def encode(
  state : SimulationState,
) -> np.ndarray:
  """
  Flatten a simulation state to a DOF vector.
  
  Input:
  ------
    state : SimulationState
      State to encode.
  
  Output:
  -------
    dof : np.ndarray
      DOF vector of length 6 + 6 * num_bodies.
  """
  libration = state.libration
  dof       = np.empty(num_dof(state.num_bodies))

  dof[0:NUM_LIBRATION_DOF] = [
    libration.phi,
    libration.phi_dot,
    libration.theta,
    libration.theta_dot,
    libration.psi,
    libration.psi_dot,
  ]

  for index, body in enumerate(state.bodies):
    idx_dof = NUM_LIBRATION_DOF + index * NUM_BODY_DOF
    dof[idx_dof     : idx_dof + 3] = body.pos_vec
    dof[idx_dof + 3 : idx_dof + 6] = body.vel_vec

  return dof


def decode(
  dof      : np.ndarray,
  time     : float,
  template : SimulationState,
) -> SimulationState:
  """
  Rebuild a simulation state from a DOF vector.
  
  Names, gravitational parameters and the epoch are taken from the template;
  positions, velocities and libration angles from the vector. The template is
  not modified.
  
  Input:
  ------
    dof : np.ndarray
      DOF vector of length 6 + 6 * num_bodies.
    time : float
      Time after epoch [d].
    template : SimulationState
      State providing body names, gravitational parameters and the epoch.
  
  Output:
  -------
    state : SimulationState
      New simulation state.
  
  Raises:
  -------
    MalformedInputError
      If the vector is not one-dimensional or its length does not match the
      body count of the template.
  """
  dof      = np.asarray(dof, dtype=float)
  expected = num_dof(template.num_bodies)
  if dof.ndim != 1 or dof.shape[0] != expected:
    raise MalformedInputError(
      f"DOF vector of shape {dof.shape} does not match {template.num_bodies} bodies "
      f"(expected length {expected})."
    )

  libration = LibrationState(
    phi       = float(dof[0]),
    phi_dot   = float(dof[1]),
    theta     = float(dof[2]),
    theta_dot = float(dof[3]),
    psi       = float(dof[4]),
    psi_dot   = float(dof[5]),
  )

  bodies = []
  for index, body_old in enumerate(template.bodies):
    idx_dof = NUM_LIBRATION_DOF + index * NUM_BODY_DOF
    bodies.append(Body(
      name    = body_old.name,
      mu      = body_old.mu,
      pos_vec = dof[idx_dof     : idx_dof + 3].copy(),
      vel_vec = dof[idx_dof + 3 : idx_dof + 6].copy(),
    ))

  return SimulationState(
    bodies    = tuple(bodies),
    libration = libration,
    jd_epoch  = template.jd_epoch,
    time      = float(time),
  )


def with_bodies(
  state  : SimulationState,
  bodies : list,
) -> SimulationState:
  """
  Copy of a state with its bodies replaced.
  """
  return replace(state, bodies=tuple(bodies))


def default_initial_state(
) -> SimulationState:
  """
  Build the DE118 initial state at JD 2440400.5.
  
  Heliocentric planet and Earth-Moon barycenter states are moved to the
  solar-system barycenter by adding the Sun state. The Earth and Moon are then
  split from the Earth-Moon barycenter and the geocentric Moon:
    r_earth = r_emb - r_moon_geo / (1 + EMRAT)
    r_moon  = r_earth + r_moon_geo
  
  Output:
  -------
    state : SimulationState
      Initial simulation state in the body order of INITIALSTATE.BODY_NAMES.
  """
  sun_pos_vec = np.array(INITIALSTATE.SUN[0])
  sun_vel_vec = np.array(INITIALSTATE.SUN[1])

  def barycentric(
    heliocentric : tuple,
  ) -> tuple:
    return np.array(heliocentric[0]) + sun_pos_vec, np.array(heliocentric[1]) + sun_vel_vec

  emb_pos_vec, emb_vel_vec = barycentric(INITIALSTATE.EMB)

  moon_geo_pos_vec = np.array(INITIALSTATE.MOON_GEOCENTRIC[0])
  moon_geo_vel_vec = np.array(INITIALSTATE.MOON_GEOCENTRIC[1])

  earth_pos_vec = emb_pos_vec - moon_geo_pos_vec / (1.0 + DE118.EMRAT)
  earth_vel_vec = emb_vel_vec - moon_geo_vel_vec / (1.0 + DE118.EMRAT)

  pos_vel = {
    'Sun'     : (sun_pos_vec, sun_vel_vec),
    'Mercury' : barycentric(INITIALSTATE.MERCURY),
    'Venus'   : barycentric(INITIALSTATE.VENUS),
    'Earth'   : (earth_pos_vec, earth_vel_vec),
    'Moon'    : (earth_pos_vec + moon_geo_pos_vec, earth_vel_vec + moon_geo_vel_vec),
    'Mars'    : barycentric(INITIALSTATE.MARS),
    'Jupiter' : barycentric(INITIALSTATE.JUPITER),
    'Saturn'  : barycentric(INITIALSTATE.SATURN),
    'Uranus'  : barycentric(INITIALSTATE.URANUS),
    'Neptune' : barycentric(INITIALSTATE.NEPTUNE),
    'Pluto'   : barycentric(INITIALSTATE.PLUTO),
  }

  bodies = [
    Body(
      name    = name,
      mu      = getattr(SOLARSYSTEMCONSTANTS, name.upper()).GP,
      pos_vec = pos_vel[name][0],
      vel_vec = pos_vel[name][1],
    )
    for name in INITIALSTATE.BODY_NAMES
  ]

  return SimulationState(
    bodies    = tuple(bodies),
    libration = LibrationState(**INITIALSTATE.LIBRATION),
    jd_epoch  = INITIALSTATE.JD_EPOCH,
    time      = 0.0,
  )
