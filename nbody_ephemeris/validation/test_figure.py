"""
Unit Tests for Figure Model
===========================

Tests:
------
TestAccBody
  - test_sanity_check_j2_equatorial_point    : verify the analytic J2 term on the equatorial x-axis
  - test_sanity_check_j2_polar_point         : verify the analytic J2 term on the rotation axis
  - test_sanity_check_j2_rotated_longitude   : verify the J2 term is symmetric about the rotation axis
  - test_sanity_check_c22_equatorial_point   : verify the analytic C22 term on the equatorial x-axis
  - test_lunar_field_reference              : verify the lunar field term and its torque at a reference point
  - test_center_raises                       : verify a point at the center raises SingularConfigurationError
  - test_tesseral_on_axis_raises             : verify tesseral terms on the rotation axis raise

TestHarmonicsTable
  - test_rows_normalized                     : verify rows become (int, int, float, float) tuples
  - test_invalid_rows_raise                  : verify malformed rows raise MalformedInputError
  - test_figure_model_rejects_earth_tesseral : verify the Earth figure is zonal only

TestTides
  - test_sanity_check_no_lag                 : verify the tidal acceleration is radial without lag
  - test_momentum_balance                    : verify mu_earth acc_earth + mu_moon acc_moon = 0

TestComputeFigureAccelerations
  - test_only_sun_earth_moon_affected        : verify other bodies get zero figure acceleration
  - test_sanity_check_magnitudes             : verify figure terms are small relative to point-mass terms
  - test_reference_epoch                     : verify figure accelerations and libration at JD 2440400.5
  - test_missing_moon_raises                 : verify the figure model requires the Moon

Usage:
------
  python -m pytest nbody_ephemeris/validation/test_figure.py -v
"""
import pytest
import numpy as np

from nbody_ephemeris.model.errors     import MalformedInputError, SingularConfigurationError
from nbody_ephemeris.model.figure     import (
  HarmonicsTable,
  FigureModel,
  acc_body,
  acc_tides,
  compute_figure_accelerations,
  moon_harmonics,
)
from nbody_ephemeris.model.relativity import acc_point_mass
from nbody_ephemeris.model.constants  import SOLARSYSTEMCONSTANTS
from nbody_ephemeris.model.state      import with_bodies


J2     = 1.08263e-3
RADIUS = 1.0


class TestAccBody:

  def test_sanity_check_j2_equatorial_point(self):
    pos_mag = 3.0
    acc_vec = acc_body(np.array([pos_mag, 0.0, 0.0]), RADIUS, 1.0, HarmonicsTable(zonal=(J2,)))

    assert acc_vec[0] == pytest.approx(1.5 * J2 * RADIUS**2 / pos_mag**4)
    assert acc_vec[1] == pytest.approx(0.0, abs=1e-20)
    assert acc_vec[2] == pytest.approx(0.0, abs=1e-20)

  def test_sanity_check_j2_polar_point(self):
    # P2(1) = 1: acc = -3 J2 a² / r⁴ along +z
    pos_mag = 3.0
    acc_vec = acc_body(np.array([0.0, 0.0, pos_mag]), RADIUS, 1.0, HarmonicsTable(zonal=(J2,)))

    assert acc_vec[2] == pytest.approx(-3.0 * J2 * RADIUS**2 / pos_mag**4)
    assert np.allclose(acc_vec[0:2], 0.0, atol=1e-20)

  def test_sanity_check_j2_rotated_longitude(self):
    harmonics = HarmonicsTable(zonal=(J2,))
    pos_vec   = np.array([2.0, 0.0, 1.0])
    acc_vec   = acc_body(pos_vec, RADIUS, 1.0, harmonics)

    angle         = 0.8
    rot_mat       = np.array([[np.cos(angle), -np.sin(angle), 0.0], [np.sin(angle), np.cos(angle), 0.0], [0.0, 0.0, 1.0]])
    acc_rot_vec   = acc_body(rot_mat @ pos_vec, RADIUS, 1.0, harmonics)
    assert np.allclose(acc_rot_vec, rot_mat @ acc_vec, rtol=1e-12, atol=1e-20)

  def test_sanity_check_c22_equatorial_point(self):
    # On the x-axis: P22 = 3, radial term = 3 (n + 1) C22 a² / r⁴ outward
    c22     = 2.0e-5
    pos_mag = 2.0
    acc_vec = acc_body(np.array([pos_mag, 0.0, 0.0]), RADIUS, 1.0, HarmonicsTable(tesseral=((2, 2, c22, 0.0),)))

    assert acc_vec[0] == pytest.approx(9.0 * c22 * RADIUS**2 / pos_mag**4)
    assert acc_vec[1] == pytest.approx(0.0, abs=1e-20)
    assert acc_vec[2] == pytest.approx(0.0, abs=1e-20)

  def test_lunar_field_reference(self):
    pos_vec = np.array([0.943722189960001, 0.382748021970811, 0.027075526655788])
    acc_vec = acc_body(pos_vec, 1.161781241920150e-05, 1.0, moon_harmonics())

    acc_expected    = np.array([0.475697396181525e-13, 0.318936432638165e-13, 0.038407095415640e-13])
    torque_expected = np.array([0.006064867916584e-13, -0.023365870665248e-13, 0.118915151222176e-13])
    # Degree-4 lunar terms are not modeled and account for the residual
    assert np.allclose(acc_vec, acc_expected, rtol=0.0, atol=1e-23)
    assert np.allclose(np.cross(pos_vec, acc_vec), torque_expected, rtol=0.0, atol=1e-23)

  def test_center_raises(self):
    with pytest.raises(SingularConfigurationError):
      acc_body(np.zeros(3), RADIUS, 1.0, HarmonicsTable(zonal=(J2,)))

  def test_tesseral_on_axis_raises(self):
    with pytest.raises(SingularConfigurationError):
      acc_body(np.array([0.0, 0.0, 2.0]), RADIUS, 1.0, moon_harmonics())


class TestHarmonicsTable:

  def test_rows_normalized(self):
    table = HarmonicsTable(zonal=[1e-3], tesseral=[[2.0, 1, 1e-6, 2e-6]])
    assert table.zonal    == (1e-3,)
    assert table.tesseral == ((2, 1, 1e-6, 2e-6),)
    assert isinstance(table.tesseral[0][0], int)

  def test_invalid_rows_raise(self):
    for row in [(2, 3, 0.0, 0.0), (1, 0, 0.0, 0.0), (2, 1, 0.0), (2.5, 1, 0.0, 0.0), 'abcd']:
      with pytest.raises(MalformedInputError):
        HarmonicsTable(tesseral=(row,))

  def test_figure_model_rejects_earth_tesseral(self):
    with pytest.raises(MalformedInputError):
      FigureModel(earth_harmonics=HarmonicsTable(zonal=(J2,), tesseral=((2, 2, 1e-6, 0.0),)))


class TestTides:

  mu_earth = SOLARSYSTEMCONSTANTS.EARTH.GP
  mu_moon  = SOLARSYSTEMCONSTANTS.MOON.GP

  def test_sanity_check_no_lag(self):
    pos_vec = np.array([0.0025, 0.0, 0.0])
    acc_moon_vec, _ = acc_tides(pos_vec, self.mu_earth, self.mu_moon, tidal_lag=0.0)

    assert acc_moon_vec[0] < 0.0
    assert acc_moon_vec[1] == 0.0
    assert acc_moon_vec[2] == 0.0

  def test_momentum_balance(self):
    pos_vec = np.array([-0.0008, -0.0020, -0.0011])
    acc_moon_vec, acc_earth_vec = acc_tides(pos_vec, self.mu_earth, self.mu_moon)

    assert np.allclose(self.mu_earth * acc_earth_vec + self.mu_moon * acc_moon_vec, 0.0, atol=1e-30)
    # The lag rotates the bulge out of the Earth-Moon line
    assert abs(np.dot(np.cross(pos_vec, acc_moon_vec), [0.0, 0.0, 1.0])) > 0.0


class TestComputeFigureAccelerations:

  def test_only_sun_earth_moon_affected(self, default_state):
    figure_acc = compute_figure_accelerations(default_state)
    body_index = default_state.body_index

    assert figure_acc.acc.shape == (default_state.num_bodies, 3)
    for name, index in body_index.items():
      if name in ('Sun', 'Earth', 'Moon'):
        assert np.linalg.norm(figure_acc.acc[index]) > 0.0
      else:
        assert np.all(figure_acc.acc[index] == 0.0)
    assert figure_acc.torque_vec.shape == (3,)

  def test_sanity_check_magnitudes(self, default_state):
    figure_acc = compute_figure_accelerations(default_state)
    point_mass = acc_point_mass(default_state, relativistic=False)

    for name in ('Sun', 'Earth', 'Moon'):
      index = default_state.body_index[name]
      ratio = np.linalg.norm(figure_acc.acc[index]) / np.linalg.norm(point_mass.newtonian[index])
      assert ratio < 1e-3

    libration_acc = figure_acc.libration_acc
    for value in (libration_acc.phi_ddot, libration_acc.theta_ddot, libration_acc.psi_ddot):
      assert np.isfinite(value)
      assert abs(value) < 1e-3

  def test_missing_moon_raises(self, default_state):
    bodies = [body for body in default_state.bodies if body.name != 'Moon']
    with pytest.raises(MalformedInputError):
      compute_figure_accelerations(with_bodies(default_state, bodies))

  def test_reference_epoch(self, default_state):
    figure_acc = compute_figure_accelerations(default_state)
    body_index = default_state.body_index

    acc_sun_expected   = np.array([ 0.006693249200862e-20, -0.048757372219467e-20, -0.21549982209912e-20 ])
    acc_earth_expected = np.array([-0.001397684554884e-12, -0.006003096556495e-12, -0.865835515062385e-12])
    acc_moon_expected  = np.array([ 0.001118207727728e-10,  0.005012531494318e-10,  0.704512523742023e-10])

    # IAU 1976/1980 precession and nutation leave a few 1e-6 of relative error
    assert np.allclose(figure_acc.acc[body_index['Sun'  ]], acc_sun_expected  , rtol=0.0, atol=5e-26)
    assert np.allclose(figure_acc.acc[body_index['Earth']], acc_earth_expected, rtol=0.0, atol=2e-17)
    assert np.allclose(figure_acc.acc[body_index['Moon' ]], acc_moon_expected , rtol=0.0, atol=2e-15)

    libration_acc = figure_acc.libration_acc
    assert libration_acc.phi_ddot   == pytest.approx(-0.213971696871218e-5, abs=5e-10)
    assert libration_acc.theta_ddot == pytest.approx( 0.245634047922518e-5, abs=5e-10)
    assert libration_acc.psi_ddot   == pytest.approx(-0.102242383380786e-5, abs=5e-10)
