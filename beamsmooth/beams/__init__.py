# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
Subpackage containing tools to define elliptical Gaussian beams and to
deconvolve one beam from another.
"""

from .core import *  # noqa: F401, F403
from .deconvolve import *  # noqa: F401, F403
