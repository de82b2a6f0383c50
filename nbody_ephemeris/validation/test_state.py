"""
Unit Tests for State Module
===========================

Tests:
------
TestDefaultInitialState
  - test_body_order                       : verify the DE118 body order
  - test_earth_moon_split                 : verify Earth/Moon reproduce the barycenter and the geocentric Moon
  - test_planets_to_barycenter            : verify heliocentric planets are shifted by the Sun and the center of mass rests at the origin
  - test_epoch                            : verify the initial epoch

TestEncodeDecode
  - test_layout                           : verify the libration block precedes the body blocks
  - test_decode_restores_state            : verify decode(encode(s)) reproduces the state
  - test_decode_rejects_wrong_length      : verify a malformed vector raises MalformedInputError
  - test_decode_does_not_mutate_template  : verify the template is left unchanged

TestSimulationState
  - test_body_lookup                      : verify lookup by name and the error for unknown names

Usage:
------
  python -m pytest nbody_ephemeris/validation/test_state.py -v
"""
import pytest
import numpy as np

from nbody_ephemeris.model.constants import DE118, INITIALSTATE
from nbody_ephemeris.model.errors    import MalformedInputError
from nbody_ephemeris.model.state     import NUM_LIBRATION_DOF, NUM_BODY_DOF, num_dof, encode, decode


class TestDefaultInitialState:

  def test_body_order(self, default_state):
    assert default_state.body_names == list(INITIALSTATE.BODY_NAMES)
    assert default_state.num_bodies == 11

  def test_earth_moon_split(self, default_state):
    earth = default_state.body('Earth')
    moon  = default_state.body('Moon')

    assert np.allclose(moon.pos_vec - earth.pos_vec, INITIALSTATE.MOON_GEOCENTRIC[0], rtol=0.0, atol=1e-15)
    assert np.allclose(moon.vel_vec - earth.vel_vec, INITIALSTATE.MOON_GEOCENTRIC[1], rtol=0.0, atol=1e-15)

    emb_pos_vec = (earth.mu * earth.pos_vec + moon.mu * moon.pos_vec) / (earth.mu + moon.mu)
    assert np.allclose(emb_pos_vec, np.add(INITIALSTATE.EMB[0], INITIALSTATE.SUN[0]), rtol=0.0, atol=1e-14)
    assert earth.mu / moon.mu == pytest.approx(DE118.EMRAT)
    assert earth.mu + moon.mu == pytest.approx(DE118.GP_EMB)

  def test_planets_to_barycenter(self, default_state):
    sun     = default_state.body('Sun')
    jupiter = default_state.body('Jupiter')
    assert np.allclose(jupiter.pos_vec - sun.pos_vec, INITIALSTATE.JUPITER[0], rtol=0.0, atol=1e-14)
    assert np.allclose(jupiter.vel_vec - sun.vel_vec, INITIALSTATE.JUPITER[1], rtol=0.0, atol=1e-16)

    # Center of mass and its velocity sit at the origin
    mu_array   = default_state.mu_array()
    center_pos = mu_array @ default_state.pos_array() / mu_array.sum()
    center_vel = mu_array @ default_state.vel_array() / mu_array.sum()
    assert np.all(np.abs(center_pos) < 1e-7)
    assert np.all(np.abs(center_vel) < 1e-9)

  def test_epoch(self, default_state):
    assert default_state.jd_epoch == 2440400.5
    assert default_state.time     == 0.0
    assert default_state.jd       == 2440400.5


class TestEncodeDecode:

  def test_layout(self, default_state):
    dof = encode(default_state)
    assert dof.shape == (num_dof(11),)
    assert dof[2] == default_state.libration.theta
    assert dof[5] == default_state.libration.psi_dot
    idx_dof = NUM_LIBRATION_DOF + default_state.body_index['Jupiter'] * NUM_BODY_DOF
    assert np.array_equal(dof[idx_dof : idx_dof + 3], default_state.body('Jupiter').pos_vec)
    assert np.array_equal(dof[idx_dof + 3 : idx_dof + 6], default_state.body('Jupiter').vel_vec)

  def test_decode_restores_state(self, default_state):
    state = decode(encode(default_state), 12.5, default_state)
    assert state.time      == 12.5
    assert state.jd        == default_state.jd_epoch + 12.5
    assert state.libration == default_state.libration
    for body_old, body_new in zip(default_state.bodies, state.bodies):
      assert body_new.name == body_old.name
      assert body_new.mu   == body_old.mu
      assert np.array_equal(body_new.pos_vec, body_old.pos_vec)
      assert np.array_equal(body_new.vel_vec, body_old.vel_vec)

  def test_decode_rejects_wrong_length(self, default_state):
    dof = encode(default_state)
    with pytest.raises(MalformedInputError):
      decode(dof[:-1], 0.0, default_state)
    with pytest.raises(MalformedInputError):
      decode(dof.reshape(1, -1), 0.0, default_state)

  def test_decode_does_not_mutate_template(self, default_state):
    earth_pos_vec = default_state.body('Earth').pos_vec.copy()
    dof           = encode(default_state)
    dof[NUM_LIBRATION_DOF:] += 1.0
    state = decode(dof, 1.0, default_state)
    state.body('Earth').pos_vec[0] = 99.0
    assert np.array_equal(default_state.body('Earth').pos_vec, earth_pos_vec)
    assert default_state.time == 0.0


class TestSimulationState:

  def test_body_lookup(self, default_state):
    assert default_state.body('Moon').name == 'Moon'
    with pytest.raises(MalformedInputError):
      default_state.body('Vulcan')
