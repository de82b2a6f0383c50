import matplotlib
import numpy             as np

matplotlib.use("Agg")

import matplotlib.pyplot as plt

from pathlib           import Path
from matplotlib.figure import Figure
from matplotlib.lines  import Line2D

from nbody_ephemeris.model.constants     import CONVERTER
from nbody_ephemeris.propagation         import body_state
from nbody_ephemeris.utility.time_helper import jd_to_datetime


INNER_BODY_NAMES = ('Sun', 'Mercury', 'Venus', 'Earth', 'Mars')
OUTER_BODY_NAMES = ('Sun', 'Jupiter', 'Saturn', 'Uranus', 'Neptune', 'Pluto')


def _info_text(
  result : dict,
) -> str:
  start_str = jd_to_datetime(result['jd'][0]).strftime('%Y-%m-%d %H:%M:%S TDB')
  end_str   = jd_to_datetime(result['jd'][-1]).strftime('%Y-%m-%d %H:%M:%S TDB')
  return f"Frame: J2000 Barycentric  |  Start: {start_str}  |  End: {end_str}"


def plot_orbits_xy(
  result     : dict,
  body_names : tuple,
) -> Figure:
  """
  Plot body paths projected on the J2000 XY plane.
  
  Input:
  ------
    result : dict
      Result of propagate_ephemeris.
    body_names : tuple
      Names of the bodies to draw. Names missing from the result are skipped.
      
  Output:
  -------
    matplotlib.figure.Figure
      Figure object containing the plot.
  """
  fig, ax = plt.subplots(figsize=(10, 10))

  for name in body_names:
    if name not in result['body_names']:
      continue
    pos_vel = body_state(result, name)
    line,   = ax.plot(pos_vel[:, 0], pos_vel[:, 1], '-', linewidth=1, label=name)
    ax.scatter([pos_vel[0, 0]], [pos_vel[0, 1]], s=60, marker='>', facecolors='white', edgecolors=line.get_color(), linewidths=2)
    ax.scatter([pos_vel[-1, 0]], [pos_vel[-1, 1]], s=60, marker='s', facecolors='white', edgecolors=line.get_color(), linewidths=2)

  ax.set_xlabel('Pos-X [au]')
  ax.set_ylabel('Pos-Y [au]')
  ax.set_aspect('equal', adjustable='datalim')
  ax.grid(True)

  handles, _ = ax.get_legend_handles_labels()
  handles += [
    Line2D([0], [0], marker='>', color='w', markerfacecolor='white', markeredgecolor='black',
           markersize=10, markeredgewidth=2, linestyle='None', label='Start'),
    Line2D([0], [0], marker='s', color='w', markerfacecolor='white', markeredgecolor='black',
           markersize=10, markeredgewidth=2, linestyle='None', label='End'),
  ]
  ax.legend(handles=handles, loc='upper right', fontsize=10, framealpha=0.9)

  fig.text(0.5, 0.02, _info_text(result), ha='center', va='bottom', fontsize=11, color='black',
           bbox=dict(boxstyle='round,pad=0.5', facecolor='white', edgecolor='black', alpha=0.9))

  plt.tight_layout(rect=[0, 0.06, 1, 0.95])
  return fig


def plot_earth_moon(
  result : dict,
) -> Figure:
  """
  Plot the Earth-Moon distance and the lunar libration angles vs time.
  
  Input:
  ------
    result : dict
      Result of propagate_ephemeris. Must contain the Earth and the Moon.
      
  Output:
  -------
    matplotlib.figure.Figure
      Figure object containing the time series plots.
  """
  fig = plt.figure(figsize=(18, 10))

  time      = result['time']
  earth     = body_state(result, 'Earth')
  moon      = body_state(result, 'Moon')
  dist_km   = np.linalg.norm(moon[:, 0:3] - earth[:, 0:3], axis=1) * CONVERTER.KM_PER_AU
  libration = result['state'][:, 0:6]

  # Earth-Moon distance (row 0)
  ax_dist = plt.subplot2grid((4, 1), (0, 0))
  ax_dist.plot(time, dist_km, 'k-', linewidth=1.5)
  ax_dist.tick_params(labelbottom=False)
  ax_dist.set_ylabel('Earth-Moon\nDistance [km]')
  ax_dist.grid(True)

  # Libration angles (rows 1-3)
  labels = [r'$\phi$', r'$\theta$', r'$\psi$']
  colors = ['r', 'g', 'b']
  ax_prev = ax_dist
  for idx, (label, color) in enumerate(zip(labels, colors)):
    ax = plt.subplot2grid((4, 1), (idx + 1, 0), sharex=ax_dist)
    angle_deg = np.rad2deg(libration[:, 2 * idx])
    if idx == 2:
      angle_deg = np.mod(angle_deg, 360.0)
    ax.plot(time, angle_deg, f'{color}-', linewidth=1.5)
    ax.set_ylabel(f'{label}\n[deg]')
    ax.grid(True)
    if idx < 2:
      ax.tick_params(labelbottom=False)
    ax_prev = ax
  ax_prev.set_xlabel('Time after Epoch\n[d]')

  fig.text(0.5, 0.02, _info_text(result), ha='center', va='bottom', fontsize=11, color='black',
           bbox=dict(boxstyle='round,pad=0.5', facecolor='white', edgecolor='black', alpha=0.9))

  plt.tight_layout(rect=[0, 0.06, 1, 0.95])
  return fig


def generate_plots(
  result             : dict,
  figures_folderpath : Path,
) -> list:
  """
  Generate and save all propagation plots.
  
  Input:
  ------
    result : dict
      Result of propagate_ephemeris.
    figures_folderpath : Path
      Directory to save plots.
      
  Output:
  -------
    filepaths : list[Path]
      Paths of the saved figures.
  """
  print("\nGenerate and Save Plots")
  print(f"  Figure Folderpath : {figures_folderpath}\n")

  filepaths = []
  if not result.get('success'):
    print("  [WARNING] Propagation failed. No plots generated.")
    return filepaths

  figures_folderpath = Path(figures_folderpath)
  figures_folderpath.mkdir(parents=True, exist_ok=True)

  def save(fig, title, filename, label):
    fig.suptitle(title, fontsize=16)
    filepath = figures_folderpath / filename
    fig.savefig(filepath, dpi=150, bbox_inches='tight')
    plt.close(fig)
    filepaths.append(filepath)
    print(f"    {label} : <figures_folderpath>/{filename}")

  print("  Orbit Plots")
  save(plot_orbits_xy(result, INNER_BODY_NAMES), 'Inner Solar System - XY', 'xy_inner.png', 'Inner')
  save(plot_orbits_xy(result, OUTER_BODY_NAMES), 'Outer Solar System - XY', 'xy_outer.png', 'Outer')

  if 'Earth' in result['body_names'] and 'Moon' in result['body_names']:
    print("  Earth-Moon Plots")
    save(plot_earth_moon(result), 'Earth-Moon Distance and Lunar Libration', 'timeseries_earth_moon.png', 'Time Series')

  return filepaths
