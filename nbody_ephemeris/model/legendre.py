"""
Legendre Functions
==================

Legendre polynomials, associated Legendre functions and their derivatives
with respect to the argument x = sin(latitude).

The associated functions include the Condon-Shortley phase (-1)^m, as
returned by scipy.special.lpmv.
"""
import numpy as np

from numpy.polynomial import legendre as npleg
from scipy.special    import lpmv

from nbody_ephemeris.model.errors import SingularConfigurationError


def _unit_series(
  degree : int,
) -> np.ndarray:
  coeffs         = np.zeros(degree + 1)
  coeffs[degree] = 1.0
  return coeffs


def legendre_value(
  degree : int,
  x      : float,
) -> float:
  """
  Evaluate the Legendre polynomial P_n(x).
  
  Input:
  ------
    degree : int
      Degree n >= 0.
    x : float
      Argument in [-1, 1].
  
  Output:
  -------
    value : float
      P_n(x).
  """
  return float(npleg.legval(x, _unit_series(degree)))


def legendre_deriv(
  degree : int,
  x      : float,
) -> float:
  """
  Evaluate the derivative dP_n/dx. Exact at the endpoints x = -1 and x = 1.
  
  Input:
  ------
    degree : int
      Degree n >= 0.
    x : float
      Argument in [-1, 1].
  
  Output:
  -------
    value : float
      dP_n/dx evaluated at x.
  """
  if degree == 0:
    return 0.0
  return float(npleg.legval(x, npleg.legder(_unit_series(degree))))


def legendre_assoc(
  degree : int,
  order  : int,
  x      : float,
) -> float:
  """
  Evaluate the associated Legendre function P_n^m(x) (Condon-Shortley
  phase included).
  
  Input:
  ------
    degree : int
      Degree n >= 0.
    order : int
      Order 0 <= m <= n.
    x : float
      Argument in [-1, 1].
  
  Output:
  -------
    value : float
      P_n^m(x).
  """
  if order > degree:
    return 0.0
  return float(lpmv(order, degree, x))


def legendre_assoc_deriv(
  degree : int,
  order  : int,
  x      : float,
) -> float:
  """
  Evaluate dP_n^m/dx from the recurrence
    (x² - 1) dP_n^m/dx = n x P_n^m - (n + m) P_(n-1)^m
  
  Input:
  ------
    degree : int
      Degree n >= 1.
    order : int
      Order 0 <= m <= n.
    x : float
      Argument in [-1, 1]. For m > 0 the endpoints are excluded.
  
  Output:
  -------
    value : float
      dP_n^m/dx evaluated at x.
  
  Raises:
  -------
    SingularConfigurationError
      If m > 0 and |x| = 1.
  """
  if order == 0:
    return legendre_deriv(degree, x)

  denom = x * x - 1.0
  if denom == 0.0:
    raise SingularConfigurationError(
      f"Derivative of P_{degree}^{order} is singular at x = {x}"
    )

  return (
    degree * x * legendre_assoc(degree, order, x)
    - (degree + order) * legendre_assoc(degree - 1, order, x)
  ) / denom
