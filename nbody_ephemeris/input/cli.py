import sys
import argparse

from nbody_ephemeris.utility.time_helper import parse_time


def parse_command_line_arguments(
  argv : list = None,
) -> argparse.Namespace:
  """
  Parse command-line arguments for the ephemeris integrator.
  
  Input:
  ------
    argv : list | None
      Argument list. None reads from sys.argv.
      
  Output:
  -------
    args : argparse.Namespace
      Parsed command-line arguments.
  """
  parser = argparse.ArgumentParser(
    description     = 'Numerical ephemeris of the Sun, planets, Moon and lunar libration',
    formatter_class = argparse.RawDescriptionHelpFormatter,
  )

  # If no arguments provided, print help and exit
  if argv is None and len(sys.argv) == 1:
    parser.print_help(sys.stderr)
    sys.exit(1)

  # Length of the run: exactly one of these
  length_group = parser.add_mutually_exclusive_group(required=True)
  length_group.add_argument(
    '--timespan-days',
    dest    = 'timespan_days',
    type    = float,
    default = None,
    help    = "Propagation span in days. Negative values integrate backwards (e.g. 36525).",
  )
  length_group.add_argument(
    '--num-steps',
    dest    = 'num_steps',
    type    = int,
    default = None,
    help    = "Number of integration steps.",
  )
  length_group.add_argument(
    '--end-time',
    dest    = 'end_time',
    type    = parse_time,
    default = None,
    help    = "Final time (TDB) in ISO format (e.g. '1979-06-28T00:00:00').",
  )

  # Integration arguments
  parser.add_argument(
    '--step-size',
    dest    = 'step_size',
    type    = float,
    default = 0.05,
    help    = "Step size magnitude in days (default: 0.05).",
  )
  parser.add_argument(
    '--startup-steps',
    dest    = 'num_startup_steps',
    type    = int,
    default = 8,
    help    = "Number of Runge-Kutta startup steps, at least 8 (default: 8).",
  )
  parser.add_argument(
    '--output-interval',
    dest    = 'output_interval',
    type    = int,
    default = 20,
    help    = "Record the state every N steps (default: 20).",
  )

  # Force model arguments
  parser.add_argument(
    '--no-relativity',
    dest    = 'relativistic',
    action  = 'store_false',
    default = True,
    help    = "Disable the post-Newtonian point-mass correction.",
  )
  parser.add_argument(
    '--no-figure',
    dest    = 'figure',
    action  = 'store_false',
    default = True,
    help    = "Disable figure, tide and libration dynamics.",
  )

  # Initial state arguments
  parser.add_argument(
    '--initial-state-filepath',
    dest     = 'initial_state_filepath',
    type     = str,
    required = False,
    default  = None,
    help     = "YAML file with the initial state (default: built-in DE118 state at JD 2440400.5).",
  )
  parser.add_argument(
    '--recenter-barycenter',
    dest    = 'recenter_barycenter',
    action  = 'store_true',
    default = False,
    help    = "Shift the initial state so the barycenter is at rest at the origin.",
  )

  # Output arguments
  parser.add_argument(
    '--plot',
    dest    = 'plot',
    action  = 'store_true',
    default = False,
    help    = "Generate figures (disabled by default).",
  )

  # Parse arguments
  args = parser.parse_args(argv)

  return args
