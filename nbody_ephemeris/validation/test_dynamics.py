"""
Unit Tests for Dynamics Module
==============================

Tests:
------
TestAcceleration
  - test_components_sum_to_total           : verify total = newtonian + relativistic + figure
  - test_relativity_disabled               : verify the relativistic part is zero when disabled
  - test_figure_disabled                   : verify zero figure and libration terms when disabled
  - test_figure_disabled_without_moon      : verify the point-mass model runs without the Moon

TestEquationsOfMotion
  - test_derivative_layout                 : verify the position rows hold velocities and the libration rates
  - test_repeated_evaluation_is_identical  : verify the right-hand side holds no state between calls
  - test_template_unchanged                : verify evaluation does not modify the template state

Usage:
------
  python -m pytest nbody_ephemeris/validation/test_dynamics.py -v
"""
import numpy as np

from nbody_ephemeris.model.dynamics import Acceleration, EphemerisEquationsOfMotion
from nbody_ephemeris.model.state    import NUM_LIBRATION_DOF, NUM_BODY_DOF, encode


class TestAcceleration:

  def test_components_sum_to_total(self, default_state):
    result = Acceleration().compute(default_state)

    assert result.total.shape == (default_state.num_bodies, 3)
    assert np.array_equal(result.total, result.newtonian + result.relativistic + result.figure)
    assert np.any(result.figure != 0.0)
    assert np.any(result.relativistic != 0.0)

  def test_relativity_disabled(self, default_state):
    result = Acceleration(enable_relativity=False).compute(default_state)
    assert np.all(result.relativistic == 0.0)

  def test_figure_disabled(self, default_state):
    result = Acceleration(enable_figure=False).compute(default_state)

    assert np.all(result.figure == 0.0)
    assert result.libration_acc.phi_ddot   == 0.0
    assert result.libration_acc.theta_ddot == 0.0
    assert result.libration_acc.psi_ddot   == 0.0

  def test_figure_disabled_without_moon(self, two_body_state):
    result = Acceleration(enable_figure=False).compute(two_body_state)
    assert result.total.shape == (2, 3)


class TestEquationsOfMotion:

  def test_derivative_layout(self, default_state, equations_of_motion):
    dof     = encode(default_state)
    dof_dot = equations_of_motion(0.0, dof)

    assert dof_dot.shape == dof.shape
    assert dof_dot[0] == default_state.libration.phi_dot
    assert dof_dot[2] == default_state.libration.theta_dot
    assert dof_dot[4] == default_state.libration.psi_dot

    acc_total = equations_of_motion.acceleration.compute(default_state).total
    for index, body in enumerate(default_state.bodies):
      idx_dof = NUM_LIBRATION_DOF + index * NUM_BODY_DOF
      assert np.array_equal(dof_dot[idx_dof : idx_dof + 3], body.vel_vec)
      assert np.allclose(dof_dot[idx_dof + 3 : idx_dof + 6], acc_total[index], rtol=1e-14, atol=0.0)

  def test_repeated_evaluation_is_identical(self, default_state, equations_of_motion):
    dof = encode(default_state)
    dof_dot_1 = equations_of_motion.state_time_derivative(3.0, dof)
    dof_dot_2 = equations_of_motion.state_time_derivative(3.0, dof)
    assert np.array_equal(dof_dot_1, dof_dot_2)

  def test_template_unchanged(self, default_state, equations_of_motion):
    dof_o = encode(default_state)
    equations_of_motion(5.0, dof_o + 1e-6)
    assert np.array_equal(encode(default_state), dof_o)
    assert default_state.time == 0.0
