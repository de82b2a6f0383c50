"""
Frame Converter
===============

Rotations between the J2000 inertial frame, the Mean-of-Date (MoD) frame
(IAU 1976 precession), the True-of-Date (ToD) frame (IAU 1980 nutation) and a
body-fixed frame described by three 3-1-3 Euler angles.

Precession and nutation come from ERFA (pyerfa, the astropy backend).
"""
import erfa
import numpy as np

from dataclasses import dataclass

from nbody_ephemeris.model.rotations import rotate_cart_1, rotate_cart_3


@dataclass(frozen=True)
class NutationTerms:
  dpsi     : float  # nutation in longitude [rad]
  deps     : float  # nutation in obliquity [rad]
  eps_mean : float  # mean obliquity of the ecliptic [rad]


class FrameConverter:
  @staticmethod
  def nutation_terms(
    jd : float,
  ) -> NutationTerms:
    """
    Compute the IAU 1980 nutation angles and the mean obliquity.
    
    Input:
    ------
      jd : float
        Julian date (TDB, treated as TT).
    
    Output:
    -------
      nutation : NutationTerms
        Nutation in longitude and obliquity and the mean obliquity [rad].
    """
    dpsi, deps = erfa.nut80(jd, 0.0)
    eps_mean   = erfa.obl80(jd, 0.0)
    return NutationTerms(
      dpsi     = float(dpsi),
      deps     = float(deps),
      eps_mean = float(eps_mean),
    )

  @staticmethod
  def j2000_to_mod(
    jd : float,
  ) -> np.ndarray:
    """
    Get rotation matrix from J2000 to Mean-of-Date (IAU 1976 precession).
    
    Input:
    ------
      jd : float
        Julian date (TDB, treated as TT).
    
    Output:
    -------
      rot_mat : np.ndarray
        3x3 rotation matrix such that: mod_vec = rot_mat @ j2000_vec
    """
    return np.asarray(erfa.pmat76(jd, 0.0))

  @staticmethod
  def mod_to_j2000(
    jd : float,
  ) -> np.ndarray:
    """
    Get rotation matrix from Mean-of-Date to J2000 (transpose of j2000_to_mod).
    """
    return FrameConverter.j2000_to_mod(jd).T

  @staticmethod
  def mod_to_tod(
    nutation : NutationTerms,
  ) -> np.ndarray:
    """
    Get rotation matrix from Mean-of-Date to True-of-Date.
    
    Input:
    ------
      nutation : NutationTerms
        Nutation angles and mean obliquity.
    
    Output:
    -------
      rot_mat : np.ndarray
        3x3 rotation matrix such that: tod_vec = rot_mat @ mod_vec
    """
    return np.asarray(erfa.numat(nutation.eps_mean, nutation.dpsi, nutation.deps))

  @staticmethod
  def tod_to_mod(
    nutation : NutationTerms,
  ) -> np.ndarray:
    """
    Get rotation matrix from True-of-Date to Mean-of-Date (transpose of mod_to_tod).
    """
    return FrameConverter.mod_to_tod(nutation).T

  @staticmethod
  def j2000_to_tod(
    jd       : float,
    nutation : NutationTerms,
  ) -> np.ndarray:
    """
    Get rotation matrix from J2000 to True-of-Date through Mean-of-Date.
    
    Input:
    ------
      jd : float
        Julian date (TDB, treated as TT).
      nutation : NutationTerms
        Nutation angles at the same date.
    
    Output:
    -------
      rot_mat : np.ndarray
        3x3 rotation matrix such that: tod_vec = rot_mat @ j2000_vec
    """
    return FrameConverter.mod_to_tod(nutation) @ FrameConverter.j2000_to_mod(jd)

  @staticmethod
  def to_body(
    vec   : np.ndarray,
    phi   : float,
    theta : float,
    psi   : float,
  ) -> np.ndarray:
    """
    Transform a vector to body coordinates.
    
    Input:
    ------
      vec : np.ndarray
        Vector in the reference frame (3,).
      phi : float
        Angle along the reference xy-plane from the x-axis to the line of nodes [rad].
      theta : float
        Inclination of the body equator [rad].
      psi : float
        Angle along the body equator from the node to the prime meridian [rad].
    
    Output:
    -------
      body_vec : np.ndarray
        Vector in body coordinates (3,).
    """
    return rotate_cart_3(rotate_cart_1(rotate_cart_3(vec, phi), theta), psi)

  @staticmethod
  def from_body(
    vec   : np.ndarray,
    phi   : float,
    theta : float,
    psi   : float,
  ) -> np.ndarray:
    """
    Transform a vector from body coordinates. Exact inverse of to_body.
    
    Input:
    ------
      vec : np.ndarray
        Vector in body coordinates (3,).
      phi, theta, psi : float
        Euler angles of the body frame [rad], see to_body.
    
    Output:
    -------
      ref_vec : np.ndarray
        Vector in the reference frame (3,).
    """
    return rotate_cart_3(rotate_cart_1(rotate_cart_3(vec, -psi), -theta), -phi)
