"""
Model Package
=============

Force model, figure model, lunar libration and the state representation used
by the integrator.
"""
