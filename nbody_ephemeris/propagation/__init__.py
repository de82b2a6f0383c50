"""
Ephemeris Propagation Package
=============================

Fixed-step integrators and the propagation driver.
"""

from .integrator import DerivativeHistory, StepResult, runge4, adams8
from .propagator import propagate_ephemeris, body_state, run_propagation

__all__ = [
  'DerivativeHistory', 'StepResult', 'runge4', 'adams8',
  'propagate_ephemeris', 'body_state', 'run_propagation',
]
