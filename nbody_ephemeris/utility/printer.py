"""
Printer Utility
===============

Summary printing of propagation results.
"""
import numpy as np

from nbody_ephemeris.model.constants     import CONVERTER
from nbody_ephemeris.model.relativity    import barycenter
from nbody_ephemeris.model.state         import decode
from nbody_ephemeris.utility.time_helper import jd_to_datetime


def print_results_summary(
  result : dict,
) -> None:
  """
  Print a summary of the propagation results.
  
  Input:
  ------
    result : dict
      Result of propagate_ephemeris.
  """
  print("\nResults Summary")

  if not result.get('success'):
    print(f"  [ERROR] {result.get('message', 'Propagation failed')}")
    return

  state_f = result['final']
  state_o = decode(result['state'][0], result['time'][0], state_f)
  jd_f    = state_f.jd

  print(f"  Final State")
  print(f"    Epoch : {jd_to_datetime(jd_f)} TDB (JD {jd_f:.6f})")
  print(f"    Frame : J2000, Solar System Barycenter")
  print(f"    Cartesian State [au, au/d]")
  for body in state_f.bodies:
    pos_vec = body.pos_vec
    vel_vec = body.vel_vec
    print(f"      {body.name:<8} Position : {pos_vec[0]:>19.12e}  {pos_vec[1]:>19.12e}  {pos_vec[2]:>19.12e}")
    print(f"      {'':<8} Velocity : {vel_vec[0]:>19.12e}  {vel_vec[1]:>19.12e}  {vel_vec[2]:>19.12e}")

  libration = state_f.libration
  print(f"    Lunar Libration [rad, rad/d]")
  print(f"      phi   : {libration.phi  :>19.12e}  rate : {libration.phi_dot  :>19.12e}")
  print(f"      theta : {libration.theta:>19.12e}  rate : {libration.theta_dot:>19.12e}")
  print(f"      psi   : {libration.psi  :>19.12e}  rate : {libration.psi_dot  :>19.12e}")

  if 'Earth' in state_f.body_index and 'Moon' in state_f.body_index:
    earth_moon_dist = np.linalg.norm(state_f.body('Moon').pos_vec - state_f.body('Earth').pos_vec)
    print(f"    Earth-Moon Distance : {earth_moon_dist * CONVERTER.KM_PER_AU:.3f} km")

  # Drift of the classical barycenter over the run
  bary_pos_o, bary_vel_o = barycenter(state_o)
  bary_pos_f, _          = barycenter(state_f)
  drift_pos_vec = bary_pos_f - (bary_pos_o + bary_vel_o * (state_f.time - state_o.time))
  print(f"  Diagnostics")
  print(f"    Barycenter Drift : {np.linalg.norm(drift_pos_vec) * CONVERTER.KM_PER_AU:.6e} km")
  print(f"    Steps            : {result['num_steps']}")
