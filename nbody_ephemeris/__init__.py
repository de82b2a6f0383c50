"""
N-Body Ephemeris
================

Numerically integrated ephemeris of the Sun, planets and Moon, including the
physical libration of the Moon, following the DE102/DE118 force model.
"""

__version__ = '0.1.0'
