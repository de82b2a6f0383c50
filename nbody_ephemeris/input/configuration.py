import os
import math
import yaml
import numpy as np

from pathlib  import Path
from datetime import datetime
from types    import SimpleNamespace
from typing   import Optional

from nbody_ephemeris.model.errors        import MalformedInputError
from nbody_ephemeris.model.state         import Body, LibrationState, SimulationState, default_initial_state
from nbody_ephemeris.utility.time_helper import datetime_to_jd


DEFAULTS = {
  'step_size'              : 0.05,
  'num_startup_steps'      : 8,
  'relativistic'           : True,
  'figure'                 : True,
  'output_interval'        : 20,
  'initial_state_filepath' : None,
  'recenter_barycenter'    : False,
  'plot'                   : False,
}

LIBRATION_KEYS = ('phi', 'phi_dot', 'theta', 'theta_dot', 'psi', 'psi_dot')


def print_input_configuration(
  config : SimpleNamespace,
) -> None:
  """
  Print the input configuration in a formatted table.

  Input:
  ------
    config : SimpleNamespace
      Configuration object from build_config.
      
  Output:
  -------
    None
  """
  timespan_str = f"{config.num_steps * config.step_size:g} d"

  # Build configuration entries: (name, value, default, user_set)
  entries = [
    ('timespan',               timespan_str,                  "None",                             True),
    ('num_steps',              config.num_steps,              "None",                             True),
    ('step_size',              config.step_size,              DEFAULTS['step_size'],              abs(config.step_size) != DEFAULTS['step_size']),
    ('num_startup_steps',      config.num_startup_steps,      DEFAULTS['num_startup_steps'],      config.num_startup_steps      != DEFAULTS['num_startup_steps']),
    ('relativistic',           config.relativistic,           DEFAULTS['relativistic'],           config.relativistic           != DEFAULTS['relativistic']),
    ('figure',                 config.figure,                 DEFAULTS['figure'],                 config.figure                 != DEFAULTS['figure']),
    ('output_interval',        config.output_interval,        DEFAULTS['output_interval'],        config.output_interval        != DEFAULTS['output_interval']),
    ('initial_state_filepath', config.initial_state_filepath, DEFAULTS['initial_state_filepath'], config.initial_state_filepath is not None),
    ('recenter_barycenter',    config.recenter_barycenter,    DEFAULTS['recenter_barycenter'],    config.recenter_barycenter    != DEFAULTS['recenter_barycenter']),
    ('plot',                   config.plot,                   DEFAULTS['plot'],                   config.plot                   != DEFAULTS['plot']),
  ]

  headers = ['Argument', 'Value', 'Default', 'User Set']
  rows = []
  for name, value, default, user_set in entries:
    rows.append([
      name,
      str(value) if value is not None else "None",
      str(default) if default is not None else "None",
      str(user_set),
    ])

  # Column widths: max of header and all values, plus spacing
  min_spacing = 4
  col_widths  = []
  for col_idx in range(len(headers)):
    max_len = len(headers[col_idx])
    for row in rows:
      max_len = max(max_len, len(row[col_idx]))
    col_widths.append(max_len + min_spacing)

  print("\nInput Configuration")
  print("  " + "".join(h.ljust(col_widths[i]) for i, h in enumerate(headers)))
  print("  " + "".join(("-" * (col_widths[i] - min_spacing)).ljust(col_widths[i]) for i in range(len(headers))))
  for row in rows:
    print("  " + "".join(row[col_idx].ljust(col_widths[col_idx]) for col_idx in range(len(row))))


def print_paths(
  config : SimpleNamespace,
) -> None:
  """
  Print the paths configuration.
  """
  print("\nPaths and Files Setup")
  print(f"  Output Folderpath      : {config.output_folderpath}")
  print(f"    Timestamp Folderpath : <output_folderpath>/{config.timestamp_folderpath.relative_to(config.output_folderpath)}")
  print(f"    Figures Folderpath   : <output_folderpath>/{config.figures_folderpath.relative_to(config.output_folderpath)}")
  print(f"    Files Folderpath     : <output_folderpath>/{config.files_folderpath.relative_to(config.output_folderpath)}")
  print(f"    Log Filepath         : <output_folderpath>/{config.log_filepath.relative_to(config.output_folderpath)}")


def print_configuration(
  config : SimpleNamespace,
) -> None:
  """
  Print the complete configuration (input arguments and paths).
  """
  print_input_configuration(config)
  print_paths(config)


def parse_vec3(
  raw_val,
) -> np.ndarray:
  """
  Parse a 3-vector given as a list or as an "x, y, z" string (brackets
  optional).
  
  Input:
  ------
    raw_val : list | str
      Raw vector value from a YAML file.
  
  Output:
  -------
    vec : np.ndarray
      Vector (3,).
  
  Raises:
  -------
    MalformedInputError
      If the value cannot be read as three numbers.
  """
  if isinstance(raw_val, str):
    clean  = raw_val.replace('[', '').replace(']', '')
    values = [x.strip() for x in clean.split(',') if x.strip()]
  elif isinstance(raw_val, (list, tuple)):
    values = list(raw_val)
  else:
    raise MalformedInputError(f"Unknown format for vector: {raw_val}")

  try:
    vec = np.array([float(x) for x in values])
  except (TypeError, ValueError) as error:
    raise MalformedInputError(f"Vector {raw_val} contains non-numeric entries.") from error

  if vec.shape != (3,):
    raise MalformedInputError(f"Vector {raw_val} must have exactly 3 components.")
  return vec


def load_initial_state(
  filepath : Path,
) -> SimulationState:
  """
  Load an initial state from a YAML file.
  
  File layout:
    jd_epoch  : 2440400.5
    libration : {phi: ..., phi_dot: ..., theta: ..., theta_dot: ..., psi: ..., psi_dot: ...}
    bodies    :
      - name    : Sun
        mu      : 2.959122082855911e-04
        pos_vec : [x, y, z]           # or "x, y, z"
        vel_vec : [vx, vy, vz]
  
  Input:
  ------
    filepath : Path
      Path to the YAML file.
  
  Output:
  -------
    state : SimulationState
      Initial state, time after epoch 0.
  
  Raises:
  -------
    FileNotFoundError
      If the file does not exist.
    MalformedInputError
      If a required key is missing or a value is malformed.
  """
  filepath = Path(filepath)
  if not filepath.exists():
    raise FileNotFoundError(f"Initial state file not found: {filepath}")

  with open(filepath, 'r') as f:
    data = yaml.safe_load(f)

  if not isinstance(data, dict):
    raise MalformedInputError(f"Initial state file {filepath} must contain a mapping.")

  for key in ('jd_epoch', 'libration', 'bodies'):
    if key not in data:
      raise MalformedInputError(f"Initial state file {filepath} is missing '{key}'.")

  libration_data = data['libration']
  missing = [key for key in LIBRATION_KEYS if key not in (libration_data or {})]
  if missing:
    raise MalformedInputError(f"Libration entry of {filepath} is missing {missing}.")

  bodies = []
  for body_data in data['bodies'] or []:
    for key in ('name', 'mu', 'pos_vec', 'vel_vec'):
      if key not in body_data:
        raise MalformedInputError(f"Body entry {body_data} in {filepath} is missing '{key}'.")
    bodies.append(Body(
      name    = str(body_data['name']),
      mu      = float(body_data['mu']),
      pos_vec = parse_vec3(body_data['pos_vec']),
      vel_vec = parse_vec3(body_data['vel_vec']),
    ))

  if not bodies:
    raise MalformedInputError(f"Initial state file {filepath} lists no bodies.")

  names = [body.name for body in bodies]
  if len(set(names)) != len(names):
    raise MalformedInputError(f"Body names in {filepath} are not unique: {names}")

  return SimulationState(
    bodies    = tuple(bodies),
    libration = LibrationState(**{key: float(libration_data[key]) for key in LIBRATION_KEYS}),
    jd_epoch  = float(data['jd_epoch']),
    time      = 0.0,
  )


def build_config(
  timespan_days          : Optional[float]    = None,
  num_steps              : Optional[int]      = None,
  end_time_dt            : Optional[datetime] = None,
  step_size              : float              = DEFAULTS['step_size'],
  num_startup_steps      : int                = DEFAULTS['num_startup_steps'],
  relativistic           : bool               = DEFAULTS['relativistic'],
  figure                 : bool               = DEFAULTS['figure'],
  output_interval        : int                = DEFAULTS['output_interval'],
  initial_state_filepath : Optional[str]      = DEFAULTS['initial_state_filepath'],
  recenter_barycenter    : bool               = DEFAULTS['recenter_barycenter'],
  plot                   : bool               = DEFAULTS['plot'],
) -> SimpleNamespace:
  """
  Parse, validate, and set up input parameters for the ephemeris propagation.
  
  Exactly one of timespan_days, num_steps and end_time_dt sets the length of
  the run. A negative timespan (or an end time before the epoch) integrates
  backwards.
  
  Input:
  ------
    timespan_days : float | None
      Propagation span [d].
    num_steps : int | None
      Number of steps.
    end_time_dt : datetime | None
      Final time (TDB).
    step_size : float
      Step size magnitude [d].
    num_startup_steps : int
      Number of Runge-Kutta startup steps.
    relativistic : bool
      Include the post-Newtonian correction.
    figure : bool
      Include figure, tide and libration dynamics.
    output_interval : int
      Steps between recorded samples.
    initial_state_filepath : str | None
      YAML initial state. None uses the DE118 state.
    recenter_barycenter : bool
      Shift the initial state to the relativistic barycenter.
    plot : bool
      Generate figures after the run.
  
  Output:
  -------
    config : SimpleNamespace
      Configuration object containing parsed and calculated parameters.
  
  Raises:
  -------
    MalformedInputError
      For inconsistent or invalid values.
  """
  # Validate: exactly one length argument
  num_length_args = sum(arg is not None for arg in (timespan_days, num_steps, end_time_dt))
  if num_length_args != 1:
    raise MalformedInputError("Exactly one of timespan_days, num_steps and end_time_dt must be given.")

  if not (math.isfinite(step_size) and step_size > 0.0):
    raise MalformedInputError(f"Step size must be positive, got {step_size}.")
  if output_interval < 1:
    raise MalformedInputError(f"Output interval must be at least 1, got {output_interval}.")
  if num_startup_steps < DEFAULTS['num_startup_steps']:
    raise MalformedInputError(
      f"At least {DEFAULTS['num_startup_steps']} startup steps are required, got {num_startup_steps}."
    )

  # Initial state
  if initial_state_filepath is not None:
    initial_state = load_initial_state(Path(initial_state_filepath))
  else:
    initial_state = default_initial_state()

  # Number of steps and direction
  direction = 1.0
  if num_steps is not None:
    if num_steps < 1:
      raise MalformedInputError(f"Number of steps must be at least 1, got {num_steps}.")
  else:
    if end_time_dt is not None:
      timespan_days = datetime_to_jd(end_time_dt) - initial_state.jd
    if timespan_days == 0.0 or not math.isfinite(timespan_days):
      raise MalformedInputError(f"Timespan must be finite and non-zero, got {timespan_days} d.")
    direction = math.copysign(1.0, timespan_days)
    num_steps = int(round(abs(timespan_days) / step_size))
    if num_steps < 1:
      raise MalformedInputError(f"Timespan {timespan_days} d is shorter than one step of {step_size} d.")

  paths = setup_paths()

  return SimpleNamespace(
    initial_state          = initial_state,
    initial_state_filepath = initial_state_filepath,
    num_steps              = num_steps,
    step_size              = direction * step_size,
    num_startup_steps      = num_startup_steps,
    relativistic           = relativistic,
    figure                 = figure,
    output_interval        = output_interval,
    recenter_barycenter    = recenter_barycenter,
    plot                   = plot,
    output_folderpath      = paths['output_folderpath'],
    timestamp_folderpath   = paths['timestamp_folderpath'],
    figures_folderpath     = paths['figures_folderpath'],
    files_folderpath       = paths['files_folderpath'],
    log_filepath           = paths['log_filepath'],
  )


def setup_paths(
) -> dict:
  """
  Set up the output folder paths of a run.
  
  The output root is the 'output' folder of the working directory unless
  the environment variable NBODY_EPHEMERIS_OUTPUT points elsewhere.
  
  Output:
  -------
    paths : dict
      Output, timestamp, figures and files folderpaths and the log filepath.
  """
  output_override = os.environ.get('NBODY_EPHEMERIS_OUTPUT')
  if output_override:
    output_folderpath = Path(output_override)
  else:
    output_folderpath = Path.cwd() / 'output'

  timestamp_str        = datetime.now().strftime("%Y%m%d_%H%M%S")
  timestamp_folderpath = output_folderpath / timestamp_str
  figures_folderpath   = timestamp_folderpath / 'figures'
  files_folderpath     = timestamp_folderpath / 'files'
  log_filepath         = files_folderpath / 'output.log'

  figures_folderpath.mkdir(parents=True, exist_ok=True)
  files_folderpath.mkdir(parents=True, exist_ok=True)

  return {
    'output_folderpath'    : output_folderpath,
    'timestamp_folderpath' : timestamp_folderpath,
    'figures_folderpath'   : figures_folderpath,
    'files_folderpath'     : files_folderpath,
    'log_filepath'         : log_filepath,
  }
