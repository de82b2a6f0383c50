"""
Ephemeris Propagator
====================

Fixed-step propagation of the ephemeris: Runge-Kutta startup steps fill the
derivative history, then Adams-Bashforth-Moulton steps advance the state.
"""
import numpy as np

from types  import SimpleNamespace
from typing import Optional

from nbody_ephemeris.model.dynamics         import Acceleration, EphemerisEquationsOfMotion
from nbody_ephemeris.model.errors           import MalformedInputError, NumericalDivergenceError
from nbody_ephemeris.model.relativity       import center_on_barycenter
from nbody_ephemeris.model.state            import SimulationState, NUM_LIBRATION_DOF, NUM_BODY_DOF, encode, decode
from nbody_ephemeris.propagation.integrator import ADAMS_ORDER, DerivativeHistory, runge4, adams8
from nbody_ephemeris.utility.time_helper    import format_time_offset, jd_to_datetime


def propagate_ephemeris(
  initial_state     : SimulationState,
  step_size         : float,
  num_steps         : int,
  acceleration      : Optional[Acceleration] = None,
  num_startup_steps : int                    = ADAMS_ORDER,
  output_interval   : int                    = 1,
) -> dict:
  """
  Propagate the ephemeris from an initial state with a fixed step size.
  
  Input:
  ------
    initial_state : SimulationState
      Initial state; its time is the start time after epoch [d].
    step_size : float
      Step size [d]. Negative values integrate backwards.
    num_steps : int
      Number of steps.
    acceleration : Acceleration | None
      Acceleration model. Defaults to the full model (relativity and figure).
    num_startup_steps : int
      Number of Runge-Kutta steps before switching to Adams-Bashforth-Moulton.
      At least 8.
    output_interval : int
      Record the state every output_interval steps. The initial and the
      final state are always recorded.
  
  Output:
  -------
    result : dict
      Dictionary containing:
      - success    : bool - Integration success flag
      - message    : str - Status message
      - time       : np.ndarray - Time after epoch of the samples [d]
      - jd         : np.ndarray - Julian date of the samples [d]
      - state      : np.ndarray - DOF samples [num_samples x num_dof]
      - state_f    : np.ndarray - Final DOF vector
      - num_steps  : int - Number of steps taken
      - body_names : list - Body order of the DOF vector
      - final      : SimulationState - Final state
  
  Raises:
  -------
    MalformedInputError
      If the step size is zero, the number of steps is negative, the output
      interval is below 1, or there are too few startup steps.
    NumericalDivergenceError
      If the state becomes non-finite.
  """
  if step_size == 0.0 or not np.isfinite(step_size):
    raise MalformedInputError(f"Step size must be finite and non-zero, got {step_size}.")
  if num_steps < 0:
    raise MalformedInputError(f"Number of steps must be non-negative, got {num_steps}.")
  if output_interval < 1:
    raise MalformedInputError(f"Output interval must be at least 1, got {output_interval}.")
  if num_startup_steps < ADAMS_ORDER:
    raise MalformedInputError(
      f"At least {ADAMS_ORDER} Runge-Kutta startup steps are required, got {num_startup_steps}."
    )

  if acceleration is None:
    acceleration = Acceleration()

  equations_of_motion = EphemerisEquationsOfMotion(acceleration, initial_state)

  time    = initial_state.time
  dof     = encode(initial_state)
  history = DerivativeHistory()

  sample_time = [time]
  sample_dof  = [dof.copy()]

  for step_index in range(num_steps):
    if step_index < num_startup_steps:
      step = runge4(equations_of_motion, time, dof, step_size)
      history.push(equations_of_motion(step.time_out, step.dof_out))
    else:
      step    = adams8(equations_of_motion, time, dof, history, step_size)
      history = step.history

    time = step.time_out
    dof  = step.dof_out

    if not np.all(np.isfinite(dof)):
      raise NumericalDivergenceError(
        f"Non-finite state after step {step_index + 1} at t = {time} d.",
        step_index = step_index + 1,
        time       = time,
      )

    if (step_index + 1) % output_interval == 0 or step_index + 1 == num_steps:
      sample_time.append(time)
      sample_dof.append(dof.copy())

  sample_time = np.array(sample_time)

  return {
    'success'    : True,
    'message'    : f'Propagation completed in {num_steps} steps.',
    'time'       : sample_time,
    'jd'         : initial_state.jd_epoch + sample_time,
    'state'      : np.array(sample_dof),
    'state_f'    : dof,
    'num_steps'  : num_steps,
    'body_names' : initial_state.body_names,
    'final'      : decode(dof, time, initial_state),
  }


def body_state(
  result : dict,
  name   : str,
) -> np.ndarray:
  """
  Extract the position/velocity history of one body from a propagation result.
  
  Input:
  ------
    result : dict
      Result of propagate_ephemeris.
    name : str
      Body name.
  
  Output:
  -------
    pos_vel : np.ndarray
      Position and velocity samples [num_samples x 6] [au, au/d].
  """
  if name not in result['body_names']:
    raise MalformedInputError(f"Body '{name}' is not part of the result. Bodies: {result['body_names']}")
  idx_dof = NUM_LIBRATION_DOF + result['body_names'].index(name) * NUM_BODY_DOF
  return result['state'][:, idx_dof : idx_dof + NUM_BODY_DOF]


def run_propagation(
  config        : SimpleNamespace,
  initial_state : SimulationState,
) -> dict:
  """
  Configure and run the ephemeris propagation.
  
  Input:
  ------
    config : SimpleNamespace
      Run configuration from build_config.
    initial_state : SimulationState
      Initial state.
  
  Output:
  -------
    result : dict
      Result of propagate_ephemeris.
  """
  print("\nEphemeris Propagation")

  if config.recenter_barycenter:
    initial_state = center_on_barycenter(initial_state, relativistic=True)

  acceleration = Acceleration(
    enable_relativity = config.relativistic,
    enable_figure     = config.figure,
  )

  time_span_days = config.num_steps * config.step_size

  print(f"  Configuration")
  print(f"    Timespan")
  print(f"      Initial  : {jd_to_datetime(initial_state.jd)} TDB / JD {initial_state.jd:.6f}")
  print(f"      Final    : {jd_to_datetime(initial_state.jd + time_span_days)} TDB / JD {initial_state.jd + time_span_days:.6f}")
  print(f"      Duration : {format_time_offset(time_span_days)}")
  print(f"    Bodies     : {', '.join(initial_state.body_names)}")
  print(f"    Forces")
  print(f"      Newtonian Point Mass")
  print(f"      Post-Newtonian Point Mass : {'Enabled' if config.relativistic else 'Disabled'}")
  print(f"      Figure, Tides, Libration  : {'Enabled' if config.figure else 'Disabled'}")
  print(f"    Numerical Integration")
  print(f"      Method    : RK4 ({config.num_startup_steps} steps) + Adams-Bashforth-Moulton 8")
  print(f"      Step Size : {config.step_size} d")
  print(f"      Steps     : {config.num_steps}")
  print(f"      Output    : every {config.output_interval} steps")

  print("\n  Compute")
  print("    Numerical Integration Running ... ", end='', flush=True)

  result = propagate_ephemeris(
    initial_state     = initial_state,
    step_size         = config.step_size,
    num_steps         = config.num_steps,
    acceleration      = acceleration,
    num_startup_steps = config.num_startup_steps,
    output_interval   = config.output_interval,
  )

  print("Complete")

  return result
