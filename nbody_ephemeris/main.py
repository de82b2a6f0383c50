"""
Numerical Ephemeris Integrator

Description:
  This script integrates the motion of the Sun, the nine planets and the Moon,
  together with the physical libration of the Moon, in the J2000 barycentric
  frame. Units are au and days.

  The dynamics include:
  - Newtonian and post-Newtonian point-mass gravity between all bodies
  - Earth zonal harmonics acting on the Moon, Sun and Moon point masses
  - Lunar zonal and tesseral harmonics acting on the Earth and Sun point masses
  - Earth tides raised by the Moon
  - Lunar libration driven by the Earth and Sun torques

  The script performs the following steps:
  1. Builds the configuration and the initial state (built-in or YAML file).
  2. Propagates with Runge-Kutta startup steps and an 8th order
     Adams-Bashforth-Moulton method.
  3. Prints a summary of the final state and saves plots on request.

Usage:

  Argument                     Required   Description
  ---------------------------  --------   --------------------------------------------------
  --timespan-days              One of     Propagation span [d], negative integrates backwards
  --num-steps                  One of     Number of steps
  --end-time                   One of     Final time (ISO format, TDB)
  --step-size                  No         Step size magnitude [d] (default 0.05)
  --startup-steps              No         Runge-Kutta startup steps (default 8)
  --output-interval            No         Record every N steps (default 20)
  --no-relativity              No         Disable the post-Newtonian correction
  --no-figure                  No         Disable figure, tide and libration dynamics
  --initial-state-filepath     No         YAML initial state file
  --recenter-barycenter        No         Move the barycenter to the origin at rest
  --plot                       No         Generate figures

  Example Commands:
    python -m nbody_ephemeris.main \
      --timespan-days 36525 \
      [--step-size 0.05] \
      [--no-relativity] \
      [--plot]

    python -m nbody_ephemeris.main \
      --end-time 1979-06-28T00:00:00 \
      --initial-state-filepath my_state.yaml \
      --recenter-barycenter
"""
from typing   import Optional
from datetime import datetime

from nbody_ephemeris.input.cli           import parse_command_line_arguments
from nbody_ephemeris.input.configuration import build_config, print_configuration
from nbody_ephemeris.model.errors        import EphemerisError
from nbody_ephemeris.plot.trajectory     import generate_plots
from nbody_ephemeris.propagation         import run_propagation
from nbody_ephemeris.utility.logger      import start_logging, stop_logging
from nbody_ephemeris.utility.printer     import print_results_summary


def main(
  timespan_days          : Optional[float]    = None,
  num_steps              : Optional[int]      = None,
  end_time_dt            : Optional[datetime] = None,
  step_size              : float              = 0.05,
  num_startup_steps      : int                = 8,
  relativistic           : bool               = True,
  figure                 : bool               = True,
  output_interval        : int                = 20,
  initial_state_filepath : Optional[str]      = None,
  recenter_barycenter    : bool               = False,
  plot                   : bool               = False,
) -> dict:
  """
  Main function to run the ephemeris integration.
  
  This function builds the configuration, starts logging, runs the
  propagation, prints the summary and optionally generates plots.
  
  Input:
  ------
    See build_config.
  
  Output:
  -------
    result : dict
      Result of propagate_ephemeris, or {'success': False, 'message': ...}
      if the configuration or the propagation failed.
  """
  # Process inputs and setup
  try:
    config = build_config(
      timespan_days          = timespan_days,
      num_steps              = num_steps,
      end_time_dt            = end_time_dt,
      step_size              = step_size,
      num_startup_steps      = num_startup_steps,
      relativistic           = relativistic,
      figure                 = figure,
      output_interval        = output_interval,
      initial_state_filepath = initial_state_filepath,
      recenter_barycenter    = recenter_barycenter,
      plot                   = plot,
    )
  except (EphemerisError, FileNotFoundError) as error:
    print(f"\n[ERROR] {error}")
    return {'success': False, 'message': str(error)}

  # Start logging to file
  logger = start_logging(
    config.log_filepath,
  )

  try:
    # Print input configuration and paths
    print_configuration(config)

    # Run propagation
    try:
      result = run_propagation(
        config        = config,
        initial_state = config.initial_state,
      )
    except EphemerisError as error:
      print(f"Failed\n    [ERROR] {error}")
      result = {'success': False, 'message': str(error)}

    # Display results
    print_results_summary(result)

    # Generate plots
    if config.plot:
      generate_plots(
        result             = result,
        figures_folderpath = config.figures_folderpath,
      )
  finally:
    # Stop logging
    stop_logging(logger)

  return result


def cli(
) -> int:
  """
  Console entry point.
  """
  # Parse command-line arguments
  args = parse_command_line_arguments()

  # Run main function
  result = main(
    timespan_days          = args.timespan_days,
    num_steps              = args.num_steps,
    end_time_dt            = args.end_time,
    step_size              = args.step_size,
    num_startup_steps      = args.num_startup_steps,
    relativistic           = args.relativistic,
    figure                 = args.figure,
    output_interval        = args.output_interval,
    initial_state_filepath = args.initial_state_filepath,
    recenter_barycenter    = args.recenter_barycenter,
    plot                   = args.plot,
  )

  return 0 if result.get('success') else 1


if __name__ == "__main__":
  raise SystemExit(cli())
