"""
Unit Tests for Ephemeris Propagator
===================================

Tests:
------
TestPropagateEphemeris
  - test_short_run_result                  : verify the result dictionary of a short full-model run
  - test_output_interval_sampling          : verify sampling every N steps plus the final step
  - test_zero_steps                        : verify zero steps return the initial state
  - test_sanity_check_circular_orbit       : verify a two-body circular orbit keeps its radius
  - test_forward_backward                  : verify integrating forward then backward returns to the start
  - test_body_state                        : verify extraction of one body's samples

TestPropagationErrors
  - test_invalid_arguments_raise           : verify zero step size, negative steps, bad interval and startup raise
  - test_divergence_raises                 : verify a non-finite state raises NumericalDivergenceError

Usage:
------
  python -m pytest nbody_ephemeris/validation/test_propagator.py -v
"""
import pytest
import numpy as np

from nbody_ephemeris.model.dynamics import Acceleration
from nbody_ephemeris.model.errors   import MalformedInputError, NumericalDivergenceError
from nbody_ephemeris.model.state    import Body, encode, with_bodies
from nbody_ephemeris.propagation    import propagate_ephemeris, body_state


POINT_MASS = Acceleration(enable_relativity=False, enable_figure=False)


class TestPropagateEphemeris:

  def test_short_run_result(self, default_state):
    result = propagate_ephemeris(default_state, step_size=0.5, num_steps=10)

    assert result['success']
    assert result['num_steps']  == 10
    assert result['body_names'] == default_state.body_names
    assert result['state'].shape == (11, encode(default_state).shape[0])
    assert result['time'][-1] == pytest.approx(5.0)
    assert result['jd'][0]    == default_state.jd_epoch
    assert np.array_equal(result['state'][0], encode(default_state))
    assert np.array_equal(result['state'][-1], result['state_f'])
    assert np.all(np.isfinite(result['state_f']))
    assert result['final'].time == pytest.approx(5.0)

    # The Moon stays bound to the Earth
    final    = result['final']
    dist_vec = final.body('Moon').pos_vec - final.body('Earth').pos_vec
    assert 0.0023 < np.linalg.norm(dist_vec) < 0.0028

  def test_output_interval_sampling(self, two_body_state):
    result = propagate_ephemeris(two_body_state, 0.1, 25, acceleration=POINT_MASS, output_interval=10)
    assert np.allclose(result['time'], [0.0, 1.0, 2.0, 2.5])

  def test_zero_steps(self, two_body_state):
    result = propagate_ephemeris(two_body_state, 0.1, 0, acceleration=POINT_MASS)
    assert result['state'].shape[0] == 1
    assert np.array_equal(result['state_f'], encode(two_body_state))

  def test_sanity_check_circular_orbit(self, two_body_state):
    # Roughly a quarter orbit
    result  = propagate_ephemeris(two_body_state, 0.5, 200, acceleration=POINT_MASS)
    planet  = body_state(result, 'Planet')
    sun     = body_state(result, 'Sun')
    radius  = np.linalg.norm(planet[:, 0:3] - sun[:, 0:3], axis=1)

    assert np.allclose(radius, 1.0, rtol=0.0, atol=1e-9)

  def test_forward_backward(self, two_body_state):
    forward  = propagate_ephemeris(two_body_state, 0.5, 100, acceleration=POINT_MASS)
    backward = propagate_ephemeris(forward['final'], -0.5, 100, acceleration=POINT_MASS)

    assert backward['final'].time == pytest.approx(0.0, abs=1e-12)
    assert np.allclose(backward['state_f'], encode(two_body_state), rtol=0.0, atol=1e-10)

  def test_body_state(self, default_state):
    result  = propagate_ephemeris(default_state, 0.5, 2, acceleration=POINT_MASS)
    pos_vel = body_state(result, 'Mars')

    assert pos_vel.shape == (3, 6)
    assert np.array_equal(pos_vel[0, 0:3], default_state.body('Mars').pos_vec)
    with pytest.raises(MalformedInputError):
      body_state(result, 'Vulcan')


class TestPropagationErrors:

  def test_invalid_arguments_raise(self, two_body_state):
    with pytest.raises(MalformedInputError):
      propagate_ephemeris(two_body_state, 0.0, 10, acceleration=POINT_MASS)
    with pytest.raises(MalformedInputError):
      propagate_ephemeris(two_body_state, 0.1, -1, acceleration=POINT_MASS)
    with pytest.raises(MalformedInputError):
      propagate_ephemeris(two_body_state, 0.1, 10, acceleration=POINT_MASS, output_interval=0)
    with pytest.raises(MalformedInputError):
      propagate_ephemeris(two_body_state, 0.1, 10, acceleration=POINT_MASS, num_startup_steps=7)

  def test_divergence_raises(self, two_body_state):
    bodies = [
      two_body_state.bodies[0],
      Body('Planet', 1.0e-9, np.array([np.nan, 0.0, 0.0]), np.zeros(3)),
    ]
    with pytest.raises(NumericalDivergenceError) as error:
      propagate_ephemeris(with_bodies(two_body_state, bodies), 0.1, 10, acceleration=POINT_MASS)
    assert error.value.step_index == 1
