# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
Subpackage containing tools to convolve images and cubes along their
spatial and spectral axes.
"""

from .core import *  # noqa: F401, F403
from .spectral import *  # noqa: F401, F403
