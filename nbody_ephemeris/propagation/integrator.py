"""
Fixed-Step Integrators
======================

Single-step integrators for the initial value problem
  dy/dt = f(t, y),  y(t_o) = y_o

  runge4 : classical 4th-order Runge-Kutta, used to start the integration
  adams8 : 8th-order Adams-Bashforth-Moulton predictor-corrector, which needs
           the derivatives of the 8 previous steps (newest first)
"""
import numpy as np

from collections import deque
from dataclasses import dataclass
from typing      import Callable, Iterator, Optional

from nbody_ephemeris.model.errors import MalformedInputError


ADAMS_ORDER = 8

ADAMS_DENOMINATOR = 120960.0

ADAMS_BASHFORTH_COEFFS = np.array([
   434241.0,
  -1152169.0,
   2183877.0,
  -2664477.0,
   2102243.0,
  -1041723.0,
   295767.0,
  -36799.0,
])

ADAMS_MOULTON_COEFFS = np.array([
   36799.0,
   139849.0,
  -121797.0,
   123133.0,
  -88547.0,
   41499.0,
  -11351.0,
   1375.0,
])


class DerivativeHistory:
  """
  Bounded history of derivative vectors, newest first. Pushing onto a full
  history drops the oldest entry.
  """
  def __init__(
    self,
    entries : Optional[list] = None,
    maxlen  : int            = ADAMS_ORDER,
  ):
    self._entries = deque(maxlen=maxlen)
    # entries are given newest first
    for entry in reversed(entries or []):
      self._entries.appendleft(np.asarray(entry, dtype=float))

  @property
  def maxlen(self) -> int:
    return self._entries.maxlen

  def push(
    self,
    dof_dot : np.ndarray,
  ) -> None:
    self._entries.appendleft(np.asarray(dof_dot, dtype=float))

  def is_full(self) -> bool:
    return len(self._entries) == self._entries.maxlen

  def copy(self) -> 'DerivativeHistory':
    return DerivativeHistory(list(self._entries), maxlen=self.maxlen)

  def __len__(self) -> int:
    return len(self._entries)

  def __getitem__(self, index: int) -> np.ndarray:
    return self._entries[index]

  def __iter__(self) -> Iterator[np.ndarray]:
    return iter(self._entries)


@dataclass(frozen=True, eq=False)
class StepResult:
  time_out : float
  dof_out  : np.ndarray
  history  : Optional[DerivativeHistory] = None


def runge4(
  func      : Callable,
  time      : float,
  dof       : np.ndarray,
  step_size : float,
  args      : tuple = (),
) -> StepResult:
  """
  Perform one classical Runge-Kutta step.
  
  Input:
  ------
    func : Callable
      Right-hand side f(t, y, *args).
    time : float
      Time before the step.
    dof : np.ndarray
      DOF vector before the step.
    step_size : float
      Step size h.
    args : tuple
      Extra arguments passed to func.
  
  Output:
  -------
    result : StepResult
      Time and DOF vector after the step.
  """
  h   = step_size
  dof = np.asarray(dof, dtype=float)

  k1 = func(time        , dof            , *args)
  k2 = func(time + h/2.0, dof + h/2.0 * k1, *args)
  k3 = func(time + h/2.0, dof + h/2.0 * k2, *args)
  k4 = func(time + h    , dof + h     * k3, *args)

  dof_out = dof + h/6.0 * k1 + h/3.0 * k2 + h/3.0 * k3 + h/6.0 * k4

  return StepResult(
    time_out = time + h,
    dof_out  = dof_out,
  )


def adams8(
  func      : Callable,
  time      : float,
  dof       : np.ndarray,
  history   : DerivativeHistory,
  step_size : float,
  args      : tuple = (),
) -> StepResult:
  """
  Perform one 8th-order Adams-Bashforth-Moulton predictor-corrector step.
  
  The predictor uses the 8 derivatives of the history. The corrector uses the
  derivative at the predicted state together with the 7 newest derivatives of
  the history. The derivative at the corrected state becomes the newest entry
  of the returned history; the input history is left unchanged.
  
  Input:
  ------
    func : Callable
      Right-hand side f(t, y, *args).
    time : float
      Time before the step.
    dof : np.ndarray
      DOF vector before the step.
    history : DerivativeHistory
      Derivatives of the 8 previous steps, newest first (history[0] is the
      derivative at time).
    step_size : float
      Step size h.
    args : tuple
      Extra arguments passed to func.
  
  Output:
  -------
    result : StepResult
      Time, DOF vector and derivative history after the step.
  
  Raises:
  -------
    MalformedInputError
      If the history holds fewer than 8 derivatives.
  """
  if len(history) < ADAMS_ORDER:
    raise MalformedInputError(
      f"Adams-Bashforth-Moulton step needs {ADAMS_ORDER} previous derivatives, got {len(history)}."
    )

  h           = step_size
  dof         = np.asarray(dof, dtype=float)
  pred_coeffs = h * ADAMS_BASHFORTH_COEFFS / ADAMS_DENOMINATOR
  corr_coeffs = h * ADAMS_MOULTON_COEFFS   / ADAMS_DENOMINATOR

  # Predictor
  dof_pred = dof.copy()
  for coeff, dof_dot in zip(pred_coeffs, history):
    dof_pred += coeff * dof_dot

  # Corrector
  working = history.copy()
  working.push(func(time + h, dof_pred, *args))

  dof_out = dof.copy()
  for coeff, dof_dot in zip(corr_coeffs, working):
    dof_out += coeff * dof_dot

  history_out = history.copy()
  history_out.push(func(time + h, dof_out, *args))

  return StepResult(
    time_out = time + h,
    dof_out  = dof_out,
    history  = history_out,
  )
