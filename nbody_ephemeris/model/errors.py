"""
Errors
======

Exception types raised by the ephemeris model and integrator.
"""


class EphemerisError(Exception):
  """
  Base class for all ephemeris errors.
  """


class SingularConfigurationError(EphemerisError, ArithmeticError):
  """
  A geometric singularity was reached: a point on a body's rotation axis,
  zero separation between two bodies, or a lunar libration inclination of
  0 or pi.
  """


class MalformedInputError(EphemerisError, ValueError):
  """
  Input with the wrong shape or content: a degrees-of-freedom vector whose
  length does not match the body count, a malformed harmonics row, or an
  invalid configuration value.
  """


class NumericalDivergenceError(EphemerisError, FloatingPointError):
  """
  Non-finite values appeared in the state after an integration step.
  """
  def __init__(
    self,
    message    : str,
    step_index : int   = -1,
    time       : float = float('nan'),
  ):
    super().__init__(message)
    self.step_index = step_index
    self.time       = time
