"""
Figure Model
============

Accelerations caused by the non-spherical figures of the Moon and the Earth,
the Earth tides raised by the Moon, and the torque that drives the lunar
libration.

Interactions:
  1. Moon figure <-> Earth point mass      (Moon body frame)
  2. Moon figure <-> Sun point mass        (Moon body frame)
  3. Lunar libration from the torques of 1 and 2
  4. Earth figure <-> Moon and Sun         (True-of-Date frame, zonal only)
  5. Earth tides  <-> Moon                 (True-of-Date frame)

References:
  Newhall, Standish, Williams - DE 102: a numerically integrated ephemeris of
  the Moon and planets spanning forty-four centuries, Astronomy and
  Astrophysics, 125, 150-167, 1983, equation (2).
"""
import numpy as np

from dataclasses import dataclass, field

from nbody_ephemeris.model.constants       import SOLARSYSTEMCONSTANTS
from nbody_ephemeris.model.errors          import MalformedInputError, SingularConfigurationError
from nbody_ephemeris.model.frame_converter import FrameConverter
from nbody_ephemeris.model.legendre        import legendre_value, legendre_deriv, legendre_assoc, legendre_assoc_deriv
from nbody_ephemeris.model.libration       import libration_moon
from nbody_ephemeris.model.rotations       import rotate_cart_2, rotate_cart_3
from nbody_ephemeris.model.state           import SimulationState, LibrationAcceleration


# =============================================================================
# Harmonics Tables
# =============================================================================

@dataclass(frozen=True)
class HarmonicsTable:
  """
  Unnormalized gravity field coefficients of an extended body.
  
  zonal    : J_n for n = 2, 3, ...
  tesseral : (n, m, C_nm, S_nm) rows
  """
  zonal    : tuple = ()
  tesseral : tuple = ()

  def __post_init__(self):
    zonal = tuple(float(jn) for jn in self.zonal)

    tesseral = []
    for row in self.tesseral:
      if not isinstance(row, (tuple, list, np.ndarray)) or len(row) != 4:
        raise MalformedInputError(f"Tesseral row {row} must have the form (n, m, C_nm, S_nm).")
      degree, order, c_nm, s_nm = row
      if int(degree) != degree or int(order) != order:
        raise MalformedInputError(f"Tesseral row {row} has non-integer degree or order.")
      if degree < 2 or order < 0 or order > degree:
        raise MalformedInputError(f"Tesseral row {row} must satisfy n >= 2 and 0 <= m <= n.")
      tesseral.append((int(degree), int(order), float(c_nm), float(s_nm)))

    object.__setattr__(self, 'zonal'   , zonal)
    object.__setattr__(self, 'tesseral', tuple(tesseral))


def moon_harmonics(
) -> HarmonicsTable:
  return HarmonicsTable(
    zonal    = (SOLARSYSTEMCONSTANTS.MOON.J2, SOLARSYSTEMCONSTANTS.MOON.J3),
    tesseral = SOLARSYSTEMCONSTANTS.MOON.CS_NM,
  )


def earth_harmonics(
) -> HarmonicsTable:
  return HarmonicsTable(
    zonal = (SOLARSYSTEMCONSTANTS.EARTH.J2, SOLARSYSTEMCONSTANTS.EARTH.J3, SOLARSYSTEMCONSTANTS.EARTH.J4),
  )


@dataclass(frozen=True)
class FigureModel:
  """
  Parameters of the figure, tide and libration model.
  """
  moon_harmonics     : HarmonicsTable = field(default_factory=moon_harmonics)
  earth_harmonics    : HarmonicsTable = field(default_factory=earth_harmonics)
  moon_radius        : float          = SOLARSYSTEMCONSTANTS.MOON.RADIUS.EQUATOR
  earth_radius       : float          = SOLARSYSTEMCONSTANTS.EARTH.RADIUS.EQUATOR
  earth_love_number  : float          = SOLARSYSTEMCONSTANTS.EARTH.LOVE_NUMBER
  earth_tidal_lag    : float          = SOLARSYSTEMCONSTANTS.EARTH.TIDAL_LAG
  moon_beta          : float          = SOLARSYSTEMCONSTANTS.MOON.BETA
  moon_gamma         : float          = SOLARSYSTEMCONSTANTS.MOON.GAMMA
  moon_moment_c      : float          = SOLARSYSTEMCONSTANTS.MOON.MOMENT_C

  def __post_init__(self):
    if self.earth_harmonics.tesseral:
      raise MalformedInputError("The Earth figure is modeled with zonal harmonics only.")


@dataclass(frozen=True, eq=False)
class FigureAcceleration:
  """
  Result of compute_figure_accelerations.
  """
  acc            : np.ndarray             # figure accelerations (N, 3) in body order [au/d²]
  torque_vec     : np.ndarray             # torque per unit lunar mass, Moon body frame [au²/d²]
  libration_acc  : LibrationAcceleration  # phi'', theta'', psi'' [rad/d²]


# =============================================================================
# Extended Body Acceleration
# =============================================================================

def acc_body(
  pos_vec   : np.ndarray,
  radius    : float,
  mu        : float,
  harmonics : HarmonicsTable,
) -> np.ndarray:
  """
  Acceleration term of a point mass from the zonal and tesseral harmonics of
  an extended body, in the body frame.
  
  The returned vector is the negative of the acceleration of the point per
  unit mu of the body when mu = 1: callers scale it by -mu_body to get the
  acceleration of the point mass and by +mu_point to get the reaction on the
  body.
  
  Input:
  ------
    pos_vec : np.ndarray
      Position of the point mass relative to the body center in body
      coordinates [au].
    radius : float
      Equatorial radius of the body [au].
    mu : float
      Gravitational parameter [au³/d²] or 1.
    harmonics : HarmonicsTable
      Zonal and tesseral coefficients of the body.
  
  Output:
  -------
    acc_vec : np.ndarray
      Acceleration term in body coordinates (3,).
  
  Raises:
  -------
    SingularConfigurationError
      If the point is at the body center, or tesseral terms are requested
      for a point on the rotation axis.
  """
  pos_mag = np.linalg.norm(pos_vec)
  if pos_mag == 0.0:
    raise SingularConfigurationError("Point mass at the center of the extended body.")

  # Latitude and longitude of the point in body coordinates
  sin_lat = pos_vec[2] / pos_mag
  lat     = np.arcsin(sin_lat)
  lon     = np.arctan2(pos_vec[1], pos_vec[0])
  cos_lat = np.cos(lat)

  if harmonics.tesseral and np.hypot(pos_vec[0], pos_vec[1]) == 0.0:
    raise SingularConfigurationError("Tesseral harmonics are undefined on the rotation axis.")

  ratio = radius / pos_mag

  # Zonal harmonics, local (radial, east, north) frame
  acc_zonal = np.zeros(3)
  for idx_zonal, jn in enumerate(harmonics.zonal):
    degree = idx_zonal + 2
    pn     = legendre_value(degree, sin_lat)
    pn_dot = legendre_deriv(degree, sin_lat)

    acc_zonal = acc_zonal + jn * ratio**degree * np.array([
      (degree + 1) * pn,
      0.0,
      -cos_lat * pn_dot,
    ])
  acc_zonal = acc_zonal * (-mu / (pos_mag * pos_mag))

  # Tesseral harmonics, local (radial, east, north) frame
  acc_tesseral = np.zeros(3)
  for degree, order, c_nm, s_nm in harmonics.tesseral:
    cos_mlon = np.cos(order * lon)
    sin_mlon = np.sin(order * lon)

    # Remove the Condon-Shortley phase
    pnm     = (-1.0)**order * legendre_assoc(degree, order, sin_lat)
    pnm_dot = (-1.0)**order * legendre_assoc_deriv(degree, order, sin_lat)

    acc_tesseral = acc_tesseral + ratio**degree * np.array([
      -(degree + 1)       * pnm     * ( c_nm * cos_mlon + s_nm * sin_mlon),
      (order / cos_lat)   * pnm     * (-c_nm * sin_mlon + s_nm * cos_mlon),
      cos_lat             * pnm_dot * ( c_nm * cos_mlon + s_nm * sin_mlon),
    ])
  acc_tesseral = acc_tesseral * (-mu / (pos_mag * pos_mag))

  acc_local = acc_zonal + acc_tesseral
  return rotate_cart_3(rotate_cart_2(acc_local, lat), -lon)


# =============================================================================
# Earth Tides
# =============================================================================

def acc_tides(
  moon_pos_vec : np.ndarray,
  mu_earth     : float,
  mu_moon      : float,
  earth_radius : float = SOLARSYSTEMCONSTANTS.EARTH.RADIUS.EQUATOR,
  love_number  : float = SOLARSYSTEMCONSTANTS.EARTH.LOVE_NUMBER,
  tidal_lag    : float = SOLARSYSTEMCONSTANTS.EARTH.TIDAL_LAG,
) -> tuple[np.ndarray, np.ndarray]:
  """
  Accelerations of the Moon and the Earth from the tidal bulge raised on the
  Earth by the Moon, with the bulge lagging by a constant phase angle.
  
    acc_moon  = -3 k2 mu_moon (1 + mu_moon / mu_earth) a_earth^5 / r^8 R3(lag) r
    acc_earth = -(mu_moon / mu_earth) acc_moon
  
  Input:
  ------
    moon_pos_vec : np.ndarray
      Position of the Moon relative to the Earth, True-of-Date [au].
    mu_earth : float
      Earth gravitational parameter [au³/d²].
    mu_moon : float
      Moon gravitational parameter [au³/d²].
    earth_radius : float
      Earth equatorial radius [au].
    love_number : float
      Love number k2 of the Earth.
    tidal_lag : float
      Tidal phase lag [rad].
  
  Output:
  -------
    acc_moon_vec : np.ndarray
      Tidal acceleration of the Moon, True-of-Date [au/d²].
    acc_earth_vec : np.ndarray
      Tidal acceleration of the Earth, True-of-Date [au/d²].
  """
  pos_mag = np.linalg.norm(moon_pos_vec)
  if pos_mag == 0.0:
    raise SingularConfigurationError("Moon at the center of the Earth.")

  scale = (
    -3.0 * love_number * mu_moon * (1.0 + mu_moon / mu_earth)
    * earth_radius**5 / pos_mag**8
  )
  acc_moon_vec  = scale * rotate_cart_3(moon_pos_vec, tidal_lag)
  acc_earth_vec = -(mu_moon / mu_earth) * acc_moon_vec

  return acc_moon_vec, acc_earth_vec


# =============================================================================
# Top-Level Figure Coordinator
# =============================================================================

def compute_figure_accelerations(
  state : SimulationState,
  model : FigureModel = FigureModel(),
) -> FigureAcceleration:
  """
  Compute the figure, oblateness and tide accelerations of the Sun, Earth and
  Moon together with the lunar libration second derivatives.
  
  Input:
  ------
    state : SimulationState
      Current state; must contain bodies named Sun, Earth and Moon.
    model : FigureModel
      Harmonics tables and figure parameters.
  
  Output:
  -------
    figure_acc : FigureAcceleration
      Figure accelerations (N, 3) in body order (zero for bodies other than
      Sun, Earth and Moon), lunar torque and libration second derivatives.
  """
  body_index = state.body_index
  for name in ('Sun', 'Earth', 'Moon'):
    if name not in body_index:
      raise MalformedInputError(f"The figure model requires a body named '{name}'. Bodies: {state.body_names}")

  sun   = state.bodies[body_index['Sun'  ]]
  earth = state.bodies[body_index['Earth']]
  moon  = state.bodies[body_index['Moon' ]]

  mu_sun   = sun.mu
  mu_earth = earth.mu
  mu_moon  = moon.mu

  libration = state.libration
  phi       = libration.phi
  theta     = libration.theta
  psi       = libration.psi

  # Nutation at the current date
  jd       = state.jd
  nutation = FrameConverter.nutation_terms(jd)

  # 1. Moon figure <-> Earth
  earth_moon_body_pos_vec = FrameConverter.to_body(earth.pos_vec - moon.pos_vec, phi, theta, psi)
  acc_earth_unit_vec      = acc_body(earth_moon_body_pos_vec, model.moon_radius, 1.0, model.moon_harmonics)
  torque_earth_vec        = np.cross(earth_moon_body_pos_vec, acc_earth_unit_vec)

  acc_em_fig = FrameConverter.from_body(-mu_moon  * acc_earth_unit_vec, phi, theta, psi)
  acc_me_fig = FrameConverter.from_body( mu_earth * acc_earth_unit_vec, phi, theta, psi)

  # 2. Moon figure <-> Sun
  sun_moon_body_pos_vec = FrameConverter.to_body(sun.pos_vec - moon.pos_vec, phi, theta, psi)
  acc_sun_unit_vec      = acc_body(sun_moon_body_pos_vec, model.moon_radius, 1.0, model.moon_harmonics)
  torque_sun_vec        = np.cross(sun_moon_body_pos_vec, acc_sun_unit_vec)

  acc_sm_fig = FrameConverter.from_body(-mu_moon * acc_sun_unit_vec, phi, theta, psi)
  acc_ms_fig = FrameConverter.from_body( mu_sun  * acc_sun_unit_vec, phi, theta, psi)

  # 3. Libration of the Moon
  torque_vec    = mu_earth * torque_earth_vec + mu_sun * torque_sun_vec
  libration_acc = libration_moon(
    libration  = libration,
    torque_vec = torque_vec,
    beta       = model.moon_beta,
    gamma      = model.moon_gamma,
    moment_c   = model.moon_moment_c,
    radius     = model.moon_radius,
  )

  # 4. Earth oblateness, True-of-Date
  rot_mat_j2000_to_tod = FrameConverter.j2000_to_tod(jd, nutation)
  rot_mat_tod_to_j2000 = rot_mat_j2000_to_tod.T

  moon_earth_tod_pos_vec = rot_mat_j2000_to_tod @ (moon.pos_vec - earth.pos_vec)
  sun_earth_tod_pos_vec  = rot_mat_j2000_to_tod @ (sun.pos_vec  - earth.pos_vec)

  acc_moon_unit_vec     = acc_body(moon_earth_tod_pos_vec, model.earth_radius, 1.0, model.earth_harmonics)
  acc_sun_unit_obl_vec  = acc_body(sun_earth_tod_pos_vec , model.earth_radius, 1.0, model.earth_harmonics)

  acc_me_obl = rot_mat_tod_to_j2000 @ (-mu_earth * acc_moon_unit_vec   )
  acc_se_obl = rot_mat_tod_to_j2000 @ (-mu_earth * acc_sun_unit_obl_vec)
  acc_em_obl = rot_mat_tod_to_j2000 @ ( mu_moon  * acc_moon_unit_vec   )
  acc_es_obl = rot_mat_tod_to_j2000 @ ( mu_sun   * acc_sun_unit_obl_vec)

  # 5. Earth tides
  acc_me_tides_tod, acc_em_tides_tod = acc_tides(
    moon_pos_vec = moon_earth_tod_pos_vec,
    mu_earth     = mu_earth,
    mu_moon      = mu_moon,
    earth_radius = model.earth_radius,
    love_number  = model.earth_love_number,
    tidal_lag    = model.earth_tidal_lag,
  )
  acc_me_tides = rot_mat_tod_to_j2000 @ acc_me_tides_tod
  acc_em_tides = rot_mat_tod_to_j2000 @ acc_em_tides_tod

  # Totals
  acc = np.zeros((state.num_bodies, 3))
  acc[body_index['Sun'  ]] = acc_sm_fig + acc_se_obl
  acc[body_index['Earth']] = acc_em_fig + acc_es_obl + acc_em_obl + acc_em_tides
  acc[body_index['Moon' ]] = acc_me_fig + acc_ms_fig + acc_me_obl + acc_me_tides

  return FigureAcceleration(
    acc           = acc,
    torque_vec    = torque_vec,
    libration_acc = libration_acc,
  )
