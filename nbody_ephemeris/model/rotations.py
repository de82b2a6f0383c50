"""
Axis Rotations
==============

Passive rotations of a Cartesian vector about one coordinate axis. A positive
angle rotates the coordinate frame counter-clockwise, so the vector appears
rotated clockwise. The inverse of each rotation is the same rotation with the
negated angle.
"""
import numpy as np


def rotate_cart_1(
  vec   : np.ndarray,
  angle : float,
) -> np.ndarray:
  """
  Rotate about the x-axis.
  
  Input:
  ------
    vec : np.ndarray
      Cartesian vector (3,).
    angle : float
      Rotation angle [rad].
  
  Output:
  -------
    rot_vec : np.ndarray
      Rotated vector (3,).
  """
  cos_a = np.cos(angle)
  sin_a = np.sin(angle)
  return np.array([
    vec[0],
     cos_a * vec[1] + sin_a * vec[2],
    -sin_a * vec[1] + cos_a * vec[2],
  ])


def rotate_cart_2(
  vec   : np.ndarray,
  angle : float,
) -> np.ndarray:
  """
  Rotate about the y-axis.
  
  Input:
  ------
    vec : np.ndarray
      Cartesian vector (3,).
    angle : float
      Rotation angle [rad].
  
  Output:
  -------
    rot_vec : np.ndarray
      Rotated vector (3,).
  """
  cos_a = np.cos(angle)
  sin_a = np.sin(angle)
  return np.array([
    cos_a * vec[0] - sin_a * vec[2],
    vec[1],
    sin_a * vec[0] + cos_a * vec[2],
  ])


def rotate_cart_3(
  vec   : np.ndarray,
  angle : float,
) -> np.ndarray:
  """
  Rotate about the z-axis.
  
  Input:
  ------
    vec : np.ndarray
      Cartesian vector (3,).
    angle : float
      Rotation angle [rad].
  
  Output:
  -------
    rot_vec : np.ndarray
      Rotated vector (3,).
  """
  cos_a = np.cos(angle)
  sin_a = np.sin(angle)
  return np.array([
     cos_a * vec[0] + sin_a * vec[1],
    -sin_a * vec[0] + cos_a * vec[1],
    vec[2],
  ])
